"""Single-shot HTTP exchange used by the AI providers."""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping

import httpx

from notepadpro.ai.errors import (
    NPAiConfigError,
    NPAiConnectionError,
    NPAiDecodeError,
    NPAiHTTPStatusError,
    NPAiTimeoutError,
)
from notepadpro.ai.models import RawResponse, RequestSpec

__all__ = ["Transport"]

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30.0
_USER_AGENT = "NotepadPro-AI/1.0"
_SCHEMES = frozenset({"http", "https"})


class Transport:
    """Execute one buffered HTTP request per call.

    Every call opens its own client and closes it before returning, so calls
    never share a connection and a timeout only aborts its own socket. The
    optional ``transport`` is handed to :class:`httpx.AsyncClient` and is how
    tests substitute an :class:`httpx.MockTransport`.
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._transport = transport
        self._user_agent = user_agent or _USER_AGENT

    async def send(self, spec: RequestSpec) -> RawResponse:
        """Execute a prepared :class:`RequestSpec`."""

        return await self.request(
            spec.url,
            method=spec.method,
            headers=spec.headers,
            body=spec.body,
            timeout=spec.timeout,
        )

    async def request(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> RawResponse:
        """Send a request and return the decoded JSON body.

        The timeout is a hard bound on the whole exchange, measured from the
        moment the request starts.

        Raises:
            NPAiConnectionError: the host could not be reached.
            NPAiTimeoutError: the deadline elapsed before the body was read.
            NPAiHTTPStatusError: the status code was outside ``[200, 300)``.
            NPAiDecodeError: a 2xx body could not be decoded as JSON.
        """

        target = self._parse_url(url)
        if timeout is None or timeout <= 0:
            raise NPAiConfigError(f"Request timeout must be positive, got {timeout!r}.")

        logger.debug(
            "Dispatching %s %s (secure=%s, timeout=%.1fs)",
            method,
            url,
            target.scheme == "https",
            timeout,
        )
        try:
            return await asyncio.wait_for(
                self._exchange(target, method, headers, body, timeout),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            raise NPAiTimeoutError(
                f"Request timed out after {timeout:g}s", url=url, timeout=timeout
            ) from exc

    async def _exchange(
        self,
        url: httpx.URL,
        method: str,
        headers: Mapping[str, str] | None,
        body: bytes | None,
        timeout: float,
    ) -> RawResponse:
        merged = {"User-Agent": self._user_agent, "Accept": "application/json"}
        if headers:
            merged.update(headers)

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=httpx.Timeout(timeout),
            ) as client:
                response = await client.request(method, url, headers=merged, content=body)
        except httpx.TimeoutException as exc:
            raise NPAiTimeoutError(
                f"Request timed out after {timeout:g}s", url=str(url), timeout=timeout
            ) from exc
        except httpx.HTTPError as exc:
            message = str(exc) or exc.__class__.__name__
            raise NPAiConnectionError(f"Request failed: {message}", url=str(url)) from exc

        if not 200 <= response.status_code < 300:
            raise NPAiHTTPStatusError(response.status_code, response.text, url=str(url))

        try:
            payload = response.json()
        except ValueError as exc:
            raise NPAiDecodeError(f"Failed to parse response: {exc}", url=str(url)) from exc

        return RawResponse(status_code=response.status_code, body=payload)

    @staticmethod
    def _parse_url(url: str) -> httpx.URL:
        try:
            target = httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise NPAiConfigError(f"Invalid request URL {url!r}: {exc}") from exc
        if target.scheme not in _SCHEMES or not target.host:
            raise NPAiConfigError(f"Unsupported request URL {url!r}; expected http or https.")
        return target
