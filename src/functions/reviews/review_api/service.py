from functools import lru_cache, partial
from typing import Any, Dict, List

from loguru import logger

from review_store.configs import get_config
from review_store.engine import ReviewEngine
from review_store.errors import BadRequestError
from review_store.github_client import GitHubContentsClient
from review_store.models import Bucket, Review
from review_store.mutations import ACTIONS, append_review, apply_action
from review_store.sanitize import build_review
from review_api.interface import ModerateReviewRequest, SubmitReviewRequest


@lru_cache(maxsize=1)
def get_engine() -> ReviewEngine:
    config = get_config().require_store()
    return ReviewEngine(GitHubContentsClient(config), config.path, config.branch)


def list_reviews(status: Bucket) -> List[Dict[str, Any]]:
    return get_engine().list_reviews(status)


def submit_review(request: SubmitReviewRequest) -> Review:
    review = build_review(
        rating=request.rating,
        name=request.name,
        comment=request.comment,
        photos=request.photos,
    )
    updated = get_engine().mutate(
        partial(append_review, review=review),
        f"chore(reviews): new pending review {review.id}",
    )
    # append_review reassigns the id if it already exists in the document
    stored = review.model_copy(update={"id": updated.pending[-1]["id"]})
    logger.info(f"Review {stored.id} stored as pending")
    return stored


def moderate_review(request: ModerateReviewRequest) -> None:
    if not request.action or not request.id:
        raise BadRequestError("action and id are required.")
    if request.action not in ACTIONS:
        raise BadRequestError(f"Invalid action: {request.action}", "INVALID_ACTION")

    get_engine().mutate(
        partial(apply_action, action=request.action, review_id=request.id),
        f"chore(reviews): {request.action} {request.id}",
    )
    logger.info(f"Review {request.id}: {request.action}")
