class AppError(Exception):
    """Base class for application errors"""

    def __init__(self, message, status_code=500, error_code="INTERNAL_ERROR"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code


class BadRequestError(AppError):
    def __init__(self, message, error_code="BAD_REQUEST"):
        super().__init__(message, 400, error_code)


class ValidationError(BadRequestError):
    """A submitted field is missing or empty after sanitization."""

    def __init__(self, message, error_code="VALIDATION_ERROR"):
        super().__init__(message, error_code)


class UnauthorizedError(AppError):
    def __init__(self, message="Unauthorized", error_code="UNAUTHORIZED"):
        super().__init__(message, 401, error_code)


class NotFoundError(AppError):
    def __init__(self, message="Resource not found", error_code="NOT_FOUND"):
        super().__init__(message, 404, error_code)


class ConfigError(AppError):
    def __init__(self, message, error_code="CONFIG_ERROR"):
        super().__init__(message, 500, error_code)


class StoreError(AppError):
    """Non-success response from the document store."""

    MAX_DETAIL = 300

    def __init__(self, message, status=None, error_code="STORE_ERROR"):
        super().__init__(message[: self.MAX_DETAIL], 502, error_code)
        self.status = status


class VersionConflictError(AppError):
    """The store rejected the write on every attempt because the SHA was stale."""

    def __init__(self, message, error_code="VERSION_CONFLICT"):
        super().__init__(message, 503, error_code)


class DecodeError(Exception):
    """Stored content is not valid JSON or not a review collection."""

    pass
