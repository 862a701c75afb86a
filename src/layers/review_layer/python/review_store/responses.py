from typing import Any, Optional, Dict
import json

_DEFAULT_HEADERS = {
    "Content-Type": "application/json",
}
_NO_STORE = {"Cache-Control": "no-store"}
MAX_ERROR_LEN = 300


def api_response(
    status_code: int,
    body: Any = None,
    error: Optional[str] = None,
    error_code: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Centralized API Gateway response formatter.

    Args:
        status_code: HTTP status code
        body: Response body (dict or list)
        error: Error message (if error, body is ignored)
        error_code: Machine-readable code sent alongside the error
        headers: Custom headers to include

    Returns:
        Formatted Lambda response for API Gateway
    """
    final_headers = (
        dict(_DEFAULT_HEADERS) if headers is None else {**_DEFAULT_HEADERS, **headers}
    )
    if error:
        payload = {"error": error[:MAX_ERROR_LEN]}
        if error_code:
            payload["error_code"] = error_code
    else:
        payload = body

    return {
        "statusCode": status_code,
        "headers": final_headers,
        "body": json.dumps(payload) if payload is not None else "",
    }


def success(
    data: Any,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Success response (2xx), never cached."""
    return api_response(status_code, body=data, headers={**_NO_STORE, **(headers or {})})


def created(
    data: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Created response (201)."""
    return success(data, status_code=201, headers=headers)


def no_content(headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Empty response (204), used for CORS preflight."""
    return {"statusCode": 204, "headers": dict(headers or {}), "body": ""}


def error_response(
    status_code: int,
    error: str,
    error_code: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    return api_response(status_code, error=error, error_code=error_code, headers=headers)


def bad_request(error: str, headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Bad request response (400)."""
    return api_response(400, error=error, headers=headers)


def method_not_allowed(
    allowed: str, headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Method not allowed response (405)."""
    return api_response(
        405, error="Method not allowed", headers={"Allow": allowed, **(headers or {})}
    )


def internal_error(
    error: str = "Internal server error", headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Internal server error response (500)."""
    return api_response(500, error=error, headers=headers)


def unprocessable_entity(
    error: str, headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Unprocessable entity response (422)."""
    return api_response(422, error=error, headers=headers)
