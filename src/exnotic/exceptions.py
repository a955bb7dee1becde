"""
Custom exceptions for the exnotic application.

This module defines domain-specific exceptions for error handling
throughout the application: upstream transport and status failures,
exhausted fallback chains, and the API-layer errors that the exception
handlers render as RFC 7807 problem documents.

Parse failures are deliberately absent: extraction and projection degrade
to ``None``/empty results instead of raising.
"""

from __future__ import annotations

from typing import Any

from exnotic.api.schemas.responses import (
    ERROR_TITLES,
    ErrorCode,
    get_error_type_uri,
)


class ExnoticError(Exception):
    """Base exception for all exnotic errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize ExnoticError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        """
        self.message = message
        super().__init__(message)


class UpstreamError(ExnoticError):
    """
    Exception raised when an upstream fetch fails.

    Covers both transport failures (DNS, connection, timeout) and
    non-success HTTP statuses from YouTube, oEmbed, or an Invidious
    instance. Callers walking a fallback chain treat both the same way:
    move on to the next source.

    Attributes
    ----------
    message : str
        Human-readable error message.
    url : str
        The URL that was requested.
    status_code : int
        HTTP status returned by the upstream, or ``0`` for transport failures.
    reason : str | None
        Exception type name or status phrase, when known.

    Examples
    --------
    >>> try:
    ...     html = await fetcher.fetch_text(url)
    ... except UpstreamError as e:
    ...     if e.is_transport_error:
    ...         print(f"Network failure for {e.url}: {e.reason}")
    """

    def __init__(
        self,
        url: str,
        status_code: int = 0,
        reason: str | None = None,
        message: str | None = None,
    ) -> None:
        """
        Initialize UpstreamError.

        Parameters
        ----------
        url : str
            The URL that was requested.
        status_code : int, optional
            HTTP status code, or 0 for transport failures (default: 0).
        reason : str | None, optional
            Exception type name or status phrase (default: None).
        message : str | None, optional
            Override for the generated message (default: None).
        """
        self.url = url
        self.status_code = status_code
        self.reason = reason
        if message is None:
            if status_code:
                message = f"Upstream returned HTTP {status_code} for {url}"
            else:
                message = f"Upstream request to {url} failed: {reason or 'transport error'}"
        super().__init__(message)

    @property
    def is_transport_error(self) -> bool:
        """Whether the failure happened before any HTTP status was received."""
        return self.status_code == 0


class SourcesExhaustedError(ExnoticError):
    """
    Exception raised when every source in a fallback chain has failed.

    This is the only resolution failure that propagates to the route
    layer, where it becomes a 404.

    Attributes
    ----------
    message : str
        Human-readable error message.
    resource : str
        What was being resolved (e.g., "Video", "Invidious video").
    identifier : str
        The identifier being resolved.
    attempted : list[str]
        The sources that were tried, in order.
    """

    def __init__(
        self,
        resource: str,
        identifier: str,
        attempted: list[str] | None = None,
    ) -> None:
        """
        Initialize SourcesExhaustedError.

        Parameters
        ----------
        resource : str
            What was being resolved.
        identifier : str
            The identifier being resolved.
        attempted : list[str] | None, optional
            Sources tried, in order (default: None).
        """
        self.resource = resource
        self.identifier = identifier
        self.attempted: list[str] = list(attempted or [])
        super().__init__(
            f"All {len(self.attempted)} sources failed for "
            f"{resource} '{identifier}'"
        )


# =============================================================================
# API Layer Exceptions
# =============================================================================


class APIError(ExnoticError):
    """Base exception for API layer errors.

    Attributes
    ----------
    status_code : int
        HTTP status code for the error response (default: 500).
    error_code : ErrorCode
        Machine-readable error code for API consumers.
    message : str
        Human-readable error message.
    details : dict[str, Any] | None
        Additional error context (e.g., resource_type, identifier).
    """

    status_code: int = 500
    _error_code_value: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    @property
    def error_code(self) -> ErrorCode:
        """Get the error code as an ErrorCode enum."""
        return ErrorCode(self._error_code_value)

    def to_problem_detail(self, instance: str, request_id: str) -> dict[str, Any]:
        """Convert to RFC 7807 Problem Detail dictionary.

        The exception handlers render every problem response through this.

        Parameters
        ----------
        instance : str
            URI reference of the specific occurrence (e.g., "/api/video/xyz").
        request_id : str
            Unique request identifier for correlation and debugging.

        Returns
        -------
        dict[str, Any]
            Dictionary with RFC 7807 fields suitable for ProblemDetail model.
        """
        return {
            "type": get_error_type_uri(self.error_code),
            "title": ERROR_TITLES.get(self.error_code, "Error"),
            "status": self.status_code,
            "detail": self.message,
            "instance": instance,
            "code": self.error_code.value,
            "request_id": request_id,
        }


class NotFoundError(APIError):
    """Resource not found (404).

    Raised by route handlers when a lookup produced nothing or when a
    fallback chain was exhausted.

    Examples
    --------
    >>> raise NotFoundError(resource_type="Channel", identifier="Example Channel")
    """

    status_code: int = 404
    _error_code_value: str = "NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        identifier: str,
        hint: str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.identifier = identifier
        message = f"{resource_type} '{identifier}' not found"
        if hint:
            message += f". {hint}"
        super().__init__(
            message=message,
            details={"resource_type": resource_type, "identifier": identifier},
        )


class BadRequestError(APIError):
    """Invalid request parameters (400)."""

    status_code: int = 400
    _error_code_value: str = "BAD_REQUEST"


class ExternalServiceError(APIError):
    """External service unavailable (502).

    Raised when the single upstream a request depends on (e.g. the YouTube
    search page) cannot be fetched. The handler hides the upstream detail
    from the client and logs it instead.
    """

    status_code: int = 502
    _error_code_value: str = "EXTERNAL_SERVICE_ERROR"


# Exit codes for CLI integration
EXIT_CODE_SUCCESS = 0
EXIT_CODE_NOT_FOUND = 1
EXIT_CODE_UPSTREAM_FAILURE = 2
