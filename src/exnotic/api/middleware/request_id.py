"""
Request correlation IDs.

``RequestIdMiddleware`` binds an ID to each request in ``request_id_var``
and echoes it in the ``X-Request-ID`` response header. The scraping layer
never sees the request object; its log records pick the ID up through
``RequestIdFilter`` and problem documents through ``get_request_id``.
"""

from __future__ import annotations

import contextvars
import logging
import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

# Placeholder for log records and problem documents outside a request
NO_REQUEST_ID = "-"

# Visible ASCII only, so a client cannot inject whitespace into log lines
_USABLE_REQUEST_ID = re.compile(r"[\x21-\x7e]+")

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "exnotic_request_id", default=""
)


def get_request_id() -> str:
    """Return the ID bound to the current request, or ``""`` outside one."""
    return request_id_var.get()


def normalize_request_id(raw: str | None) -> str:
    """
    Accept a client-supplied request ID or mint a new one.

    Parameters
    ----------
    raw : str | None
        The incoming ``X-Request-ID`` header, if any.

    Returns
    -------
    str
        ``raw`` cut to ``MAX_REQUEST_ID_LENGTH`` characters when it is
        visible ASCII; otherwise a fresh UUID4 string.
    """
    if raw and _USABLE_REQUEST_ID.fullmatch(raw):
        return raw[:MAX_REQUEST_ID_LENGTH]
    if raw:
        logger.warning("Ignoring unusable %s header", REQUEST_ID_HEADER)
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Bind ``X-Request-ID`` for the lifetime of a request.

    The ID is also stored on ``request.state`` because the catch-all 500
    handler runs after the context variable has been reset.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = normalize_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestIdFilter(logging.Filter):
    """Stamp ``record.request_id`` so formats may use ``%(request_id)s``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or NO_REQUEST_ID
        return True
