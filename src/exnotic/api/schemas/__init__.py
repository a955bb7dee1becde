"""API schemas for exnotic."""

from exnotic.api.schemas.responses import (
    ERROR_TITLES,
    ERROR_TYPE_BASE,
    ErrorCode,
    FieldError,
    ProblemDetail,
    ProblemJSONResponse,
    ValidationProblemDetail,
    get_error_type_uri,
)

__all__ = [
    "ERROR_TITLES",
    "ERROR_TYPE_BASE",
    "ErrorCode",
    "FieldError",
    "ProblemDetail",
    "ProblemJSONResponse",
    "ValidationProblemDetail",
    "get_error_type_uri",
]
