"""
Problem documents returned by every failing ``/api`` route.

Errors leave the service as RFC 7807 ``application/problem+json`` bodies.
The ``type`` URI and ``title`` are derived from an ``ErrorCode``, so a
client can branch on ``code`` without parsing the human-readable detail.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from starlette.responses import JSONResponse


class ErrorCode(str, Enum):
    """Machine-readable error codes, one per status the API emits."""

    NOT_FOUND = "NOT_FOUND"  # 404, also for an exhausted source chain
    BAD_REQUEST = "BAD_REQUEST"  # 400
    VALIDATION_ERROR = "VALIDATION_ERROR"  # 422
    INTERNAL_ERROR = "INTERNAL_ERROR"  # 500
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"  # 502, YouTube or Invidious down


ERROR_TYPE_BASE = "https://api.exnotic.dev/errors"

ERROR_TITLES: dict[ErrorCode, str] = {
    ErrorCode.NOT_FOUND: "Resource Not Found",
    ErrorCode.BAD_REQUEST: "Bad Request",
    ErrorCode.VALIDATION_ERROR: "Validation Error",
    ErrorCode.INTERNAL_ERROR: "Internal Server Error",
    ErrorCode.EXTERNAL_SERVICE_ERROR: "External Service Error",
}


def get_error_type_uri(code: ErrorCode) -> str:
    """
    Build the problem ``type`` URI for an error code.

    >>> get_error_type_uri(ErrorCode.NOT_FOUND)
    'https://api.exnotic.dev/errors/NOT_FOUND'
    """
    return f"{ERROR_TYPE_BASE}/{code.value}"


class ProblemDetail(BaseModel):
    """
    A single problem document.

    ``code`` repeats the ``ErrorCode`` value and ``request_id`` matches the
    ``X-Request-ID`` response header, so a failing call can be traced in
    the server log.
    """

    type: str
    title: str
    status: int = Field(..., ge=400, le=599)
    detail: str = Field(..., examples=["Video 'dQw4w9WgXcQ' not found"])
    instance: str = Field(..., examples=["/api/video/dQw4w9WgXcQ"])
    code: str
    request_id: str


class FieldError(BaseModel):
    loc: list[str | int]
    msg: str
    type: str


class ValidationProblemDetail(ProblemDetail):
    """Problem document for 422 responses, listing each rejected parameter."""

    errors: list[FieldError]


class ProblemJSONResponse(JSONResponse):
    media_type = "application/problem+json"
