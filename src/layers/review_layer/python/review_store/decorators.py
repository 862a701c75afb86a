from typing import Any, Callable, Dict, Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError as SchemaValidationError
from review_store.configs import AppConfig, get_config
from review_store.cors import cors_headers
from review_store.errors import AppError, UnauthorizedError
from review_store.responses import (
    bad_request,
    error_response,
    internal_error,
    unprocessable_entity,
)
from loguru import logger
import functools
import base64
import hmac
import json

T = TypeVar("T", bound=BaseModel)
JsonDict = Dict[str, Any]

ADMIN_PIN_HEADER = "x-admin-pin"


def get_method(event: JsonDict) -> str:
    """Works with both REST (v1) and HTTP API (v2) payloads."""
    method = event.get("httpMethod")
    if not method:
        method = ((event.get("requestContext") or {}).get("http") or {}).get("method")
    return (method or "").upper()


def get_header(event: JsonDict, name: str) -> Optional[str]:
    headers = event.get("headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def _check_admin(event: JsonDict, config: AppConfig) -> None:
    expected = config.admin_pin.get_secret_value()
    provided = get_header(event, ADMIN_PIN_HEADER) or ""
    if not expected or not hmac.compare_digest(
        provided.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning("Rejected admin request with an invalid PIN")
        raise UnauthorizedError("Unauthorized (admin).")


def _parse_body(event: JsonDict) -> tuple[Dict[str, Any], Optional[JsonDict]]:
    """Parses JSON body safely."""
    raw_body = event.get("body")
    if not raw_body:
        return {}, None

    try:
        if event.get("isBase64Encoded"):
            raw_body = base64.b64decode(raw_body).decode("utf-8")
        parsed = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError):
        return {}, bad_request("Invalid JSON body")

    return (parsed if isinstance(parsed, dict) else {}), None


def _merge_request_data(event: JsonDict, body: Dict) -> Dict[str, Any]:
    qs = event.get("queryStringParameters") or {}
    path = event.get("pathParameters") or {}
    return {**qs, **path, **body}


def lambda_wrapper(
    model: Type[T],
    require_admin: bool = False,
) -> Callable[[Callable[[T, Any], Any]], Callable[..., Any]]:
    """
    Decorator that hydrates a Pydantic model from the API Gateway event.

    Args:
        model: The Pydantic class to validate against.
        require_admin: If True, blocks requests without the admin PIN header
            before the body is even parsed.
    """

    def decorator(func: Callable[[T, Any], Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(event: Optional[JsonDict], context: Any) -> Any:
            event = event or {}

            try:
                if require_admin:
                    _check_admin(event, get_config())

                body_data, err = _parse_body(event)
                if err:
                    return err

                request_data = _merge_request_data(event, body_data)

                try:
                    request_model = model(**request_data)
                except SchemaValidationError as e:
                    logger.warning(f"Validation failed: {e.errors()}")
                    return unprocessable_entity(error=e.json())

                return func(request_model, context)

            except AppError as e:
                logger.warning(f"{e.error_code}: {e.message}")
                return error_response(e.status_code, e.message, e.error_code)

            except Exception as e:
                logger.exception("Unhandled exception in lambda_wrapper")
                return internal_error(error=str(e) or "Unexpected error")

        return wrapper

    return decorator


def with_cors(func: Callable[..., JsonDict]) -> Callable[..., JsonDict]:
    """Adds CORS headers to every response the handler returns."""

    @functools.wraps(func)
    def wrapper(event: Optional[JsonDict], context: Any) -> JsonDict:
        event = event or {}
        response = func(event, context)
        origin = get_header(event, "origin")
        headers = cors_headers(origin, get_config().allowed_origins)
        response["headers"] = {**(response.get("headers") or {}), **headers}
        return response

    return wrapper
