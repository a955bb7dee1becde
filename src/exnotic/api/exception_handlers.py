"""
Exception handlers that turn errors into RFC 7807 problem responses.

Route handlers only raise. Every problem document is built by
``APIError.to_problem_detail``: domain errors that are not ``APIError``s
(an exhausted source chain, an upstream failure that escaped its chain, a
crash) are first mapped onto the matching ``APIError`` subclass. Upstream
URLs and statuses go to the log, never to the client.

RFC 7807 Reference: https://tools.ietf.org/html/rfc7807
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from exnotic.api.middleware.request_id import NO_REQUEST_ID, get_request_id
from exnotic.api.schemas.responses import (
    ERROR_TITLES,
    ErrorCode,
    FieldError,
    ProblemDetail,
    ProblemJSONResponse,
    ValidationProblemDetail,
    get_error_type_uri,
)
from exnotic.exceptions import (
    APIError,
    ExternalServiceError,
    NotFoundError,
    SourcesExhaustedError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

MAX_DETAIL_LENGTH = 4096
TRUNCATION_SUFFIX = "... (truncated)"

EXTERNAL_SERVICE_DETAIL = "External service unavailable"
INTERNAL_ERROR_DETAIL = "An unexpected error occurred"


def _truncate_detail(detail: str) -> str:
    if len(detail) <= MAX_DETAIL_LENGTH:
        return detail
    return detail[: MAX_DETAIL_LENGTH - len(TRUNCATION_SUFFIX)] + TRUNCATION_SUFFIX


def _request_id(request: Request) -> str:
    # The context variable is already reset when the outermost error
    # middleware runs the catch-all handler; request.state still has it.
    return (
        get_request_id()
        or getattr(request.state, "request_id", None)
        or NO_REQUEST_ID
    )


def problem_response(request: Request, error: APIError) -> ProblemJSONResponse:
    """
    Render an ``APIError`` as an ``application/problem+json`` response.

    Parameters
    ----------
    request : Request
        The failing request; supplies ``instance`` and the request ID.
    error : APIError
        The error to render.

    Returns
    -------
    ProblemJSONResponse
        Response whose status matches ``error.status_code``.
    """
    document = error.to_problem_detail(
        instance=request.url.path, request_id=_request_id(request)
    )
    document["detail"] = _truncate_detail(document["detail"])
    problem = ProblemDetail.model_validate(document)
    return ProblemJSONResponse(content=problem.model_dump(), status_code=problem.status)


async def api_error_handler(request: Request, exc: APIError) -> ProblemJSONResponse:
    """Render ``APIError`` subclasses, hiding upstream detail for 502s."""
    if isinstance(exc, ExternalServiceError):
        logger.error("External service error: %s (details=%s)", exc.message, exc.details)
        exc = ExternalServiceError(EXTERNAL_SERVICE_DETAIL)
    return problem_response(request, exc)


async def sources_exhausted_handler(
    request: Request, exc: SourcesExhaustedError
) -> ProblemJSONResponse:
    logger.warning(
        "%s '%s' unresolved after trying: %s",
        exc.resource,
        exc.identifier,
        ", ".join(exc.attempted) or "nothing",
    )
    return problem_response(request, NotFoundError(exc.resource, exc.identifier))


async def upstream_error_handler(
    request: Request, exc: UpstreamError
) -> ProblemJSONResponse:
    logger.error(
        "Upstream failure: %s (url=%s, status=%s)", exc.message, exc.url, exc.status_code
    )
    return problem_response(request, ExternalServiceError(EXTERNAL_SERVICE_DETAIL))


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> ProblemJSONResponse:
    """
    Render a 422 listing every rejected parameter in pydantic's order.

    Parameters
    ----------
    request : Request
        The incoming FastAPI request.
    exc : RequestValidationError
        The validation failure raised while binding parameters.

    Returns
    -------
    ProblemJSONResponse
        Problem document with an ``errors`` array.
    """
    problem = ValidationProblemDetail(
        type=get_error_type_uri(ErrorCode.VALIDATION_ERROR),
        title=ERROR_TITLES[ErrorCode.VALIDATION_ERROR],
        status=422,
        detail="Request validation failed",
        instance=request.url.path,
        code=ErrorCode.VALIDATION_ERROR.value,
        request_id=_request_id(request),
        errors=[
            FieldError(
                loc=list(error.get("loc", [])),
                msg=error.get("msg", ""),
                type=error.get("type", ""),
            )
            for error in exc.errors()
        ],
    )
    return ProblemJSONResponse(content=problem.model_dump(), status_code=422)


async def generic_error_handler(request: Request, exc: Exception) -> ProblemJSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return problem_response(request, APIError(INTERNAL_ERROR_DETAIL))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the problem-document handlers on ``app``.

    >>> from fastapi import FastAPI
    >>> register_exception_handlers(FastAPI())
    """
    app.add_exception_handler(APIError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SourcesExhaustedError, sources_exhausted_handler)  # type: ignore[arg-type]
    app.add_exception_handler(UpstreamError, upstream_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_error_handler)
