"""
HTTP page fetcher for YouTube, oEmbed and Invidious.

Every upstream request in the service goes through ``PageFetcher``. It
issues a single GET with a browser-like user agent and either returns the
body or raises :class:`~exnotic.exceptions.UpstreamError`. There is no
retry here: each fallback chain gives every source exactly one attempt.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from exnotic.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class PageFetcher:
    """
    Async GET client that normalises every failure into ``UpstreamError``.

    Parameters
    ----------
    user_agent : str
        Default ``User-Agent`` header sent with each request.
    timeout : float
        Per-request timeout in seconds.
    client : httpx.AsyncClient | None, optional
        Shared client to issue requests with. When omitted a short-lived
        client is opened for each request.

    Examples
    --------
    >>> fetcher = PageFetcher(user_agent="Mozilla/5.0", timeout=30.0)
    >>> html = await fetcher.fetch_text("https://www.youtube.com/results?search_query=lofi")
    """

    def __init__(
        self,
        user_agent: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout
        self._client = client

    async def _get(self, url: str, user_agent: str | None) -> httpx.Response:
        headers = {"User-Agent": user_agent or self.user_agent}
        try:
            if self._client is not None:
                response = await self._client.get(
                    url, headers=headers, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    response = await client.get(
                        url, headers=headers, timeout=self.timeout
                    )
        except httpx.HTTPError as e:
            logger.debug("GET %s failed: %s", url, type(e).__name__)
            raise UpstreamError(url=url, reason=type(e).__name__) from e

        if not response.is_success:
            logger.debug("GET %s returned HTTP %d", url, response.status_code)
            raise UpstreamError(
                url=url,
                status_code=response.status_code,
                reason=response.reason_phrase or None,
            )
        return response

    async def fetch_text(self, url: str, *, user_agent: str | None = None) -> str:
        """
        Fetch ``url`` and return the response body as text.

        Parameters
        ----------
        url : str
            Absolute URL to fetch.
        user_agent : str | None, optional
            Override for the default user agent (default: None).

        Returns
        -------
        str
            The decoded response body.

        Raises
        ------
        UpstreamError
            On transport failure or a non-2xx status.
        """
        response = await self._get(url, user_agent)
        return response.text

    async def fetch_json(self, url: str, *, user_agent: str | None = None) -> Any:
        """
        Fetch ``url`` and decode the body as JSON.

        Raises
        ------
        UpstreamError
            On transport failure, a non-2xx status, or a body that is not JSON.
        """
        response = await self._get(url, user_agent)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                url=url,
                status_code=response.status_code,
                reason="invalid JSON",
                message=f"Upstream returned a non-JSON body for {url}",
            ) from e
