import math
import random
import re
import string
import time
from datetime import datetime, timezone
from typing import Any, List

from review_store.errors import ValidationError
from review_store.models import Review

NAME_MAX = 60
COMMENT_MAX = 1200
MAX_PHOTOS = 3
# ~450KB of binary once decoded
MAX_PHOTO_B64_LEN = 600_000
DEFAULT_RATING = 5

_WHITESPACE = re.compile(r"\s+")
_PHOTO_PREFIX = re.compile(r"^data:image/(png|jpe?g);base64,", re.IGNORECASE)
_BASE36 = string.digits + string.ascii_lowercase


def sanitize_text(value: Any, max_len: int) -> str:
    if not isinstance(value, str):
        return ""
    return _WHITESPACE.sub(" ", value).strip()[:max_len]


def sanitize_rating(value: Any) -> int:
    """Clamps to [1, 5]; absent, zero or non-numeric input counts as 5."""
    if isinstance(value, bool):
        return DEFAULT_RATING
    if isinstance(value, int) and value:
        value = max(1, min(5, value))
    try:
        rating = float(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_RATING
    if not rating or math.isnan(rating):
        return DEFAULT_RATING
    return math.floor(max(1.0, min(5.0, rating)) + 0.5)


def sanitize_photos(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    photos = [p for p in value if isinstance(p, str) and _PHOTO_PREFIX.match(p)]
    return [p[:MAX_PHOTO_B64_LEN] for p in photos[:MAX_PHOTOS]]


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def new_review_id() -> str:
    """Millisecond clock in base 36 followed by 6 random base-36 characters."""
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=6))
    return f"{_to_base36(millis)}{suffix}"


def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_review(rating: Any, name: Any, comment: Any, photos: Any) -> Review:
    clean_comment = sanitize_text(comment, COMMENT_MAX)
    if not clean_comment:
        raise ValidationError("Comment is required.")

    return Review(
        id=new_review_id(),
        rating=sanitize_rating(rating),
        name=sanitize_text(name, NAME_MAX),
        comment=clean_comment,
        photos=sanitize_photos(photos),
        date=utc_timestamp(),
        approved=False,
    )
