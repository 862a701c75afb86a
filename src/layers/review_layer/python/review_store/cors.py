from typing import Dict, Optional, Sequence
from urllib.parse import urlparse

ALLOWED_METHODS = "GET,POST,PATCH,OPTIONS"
ALLOWED_HEADERS = "Content-Type,X-Admin-Pin"


def _matches_pattern(origin: str, pattern: str) -> bool:
    """`*.example.com` entries match any subdomain of example.com."""
    if not pattern.startswith("*."):
        return False
    host = urlparse(origin).hostname or ""
    return host.endswith(pattern[1:])


def resolve_origin(origin: Optional[str], allowed: Sequence[str]) -> str:
    if not origin:
        return "*"
    if not allowed:
        return origin
    if "*" in allowed or origin in allowed:
        return origin
    if any(_matches_pattern(origin, p) for p in allowed):
        return origin
    return "*"


def cors_headers(origin: Optional[str], allowed: Sequence[str]) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": resolve_origin(origin, allowed),
        "Vary": "Origin",
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }
