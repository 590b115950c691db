"""Async HTTP transport bound to one control-plane base URL.

Every call goes through the same pipeline::

    build request -> interceptor.on_request (each, in order)
                  -> send
                  -> interceptor.on_error  (reverse order, failures only)
                  -> interceptor.on_response (reverse order)

A call either returns the 2xx :class:`httpx.Response` or raises a
:class:`~meshctl.errors.MeshApiError` subclass.  Raw ``httpx`` exceptions
never escape this module.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import httpx

from meshctl.config import settings
from meshctl.errors import (
    ApiStatusError,
    AuthenticationError,
    MeshApiError,
    RequestTimeoutError,
    TransportError,
)

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {"Content-Type": "application/json"}


class Interceptor:
    """Hook points around every request.  Subclasses override what they need."""

    def on_request(self, request: httpx.Request) -> None:
        """Inspect or mutate *request* before it is sent.  Raising aborts the send."""

    def on_response(self, response: httpx.Response) -> httpx.Response:
        """Inspect a successful (or recovered) response and return it."""
        return response

    def on_error(self, error: MeshApiError) -> httpx.Response | None:
        """React to a failed exchange.

        Return a replacement response to suppress *error*, return ``None`` to
        let it propagate, or raise a different exception.
        """
        return None


def _status_error(response: httpx.Response) -> ApiStatusError:
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text or None
    if response.status_code == 401:
        return AuthenticationError(response.status_code, body)
    return ApiStatusError(response.status_code, body)


def _clean_params(params: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None}


class Transport:
    """Configured ``httpx.AsyncClient`` plus an interceptor chain.

    Args:
        base_url: Control-plane URL including the ``/api/v1`` prefix.
            Defaults to ``settings.api_url``.
        timeout: Seconds before a send is aborted.  Defaults to
            ``settings.request_timeout``.
        headers: Extra default headers merged over ``Content-Type``.
        interceptors: Initial interceptor chain.
        transport: Optional ``httpx`` transport (e.g. ``httpx.ASGITransport``)
            used instead of the network.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        headers: Mapping[str, str] | None = None,
        interceptors: Sequence[Interceptor] = (),
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = settings.request_timeout if timeout is None else timeout
        self._interceptors: list[Interceptor] = list(interceptors)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={**_DEFAULT_HEADERS, **(headers or {})},
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> Transport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def add_interceptor(self, interceptor: Interceptor) -> None:
        self._interceptors.append(interceptor)

    # ------------------------------------------------------------------
    # Core exchange
    # ------------------------------------------------------------------
    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Send one request through the interceptor chain.

        Raises:
            TransportError: No response was received (``RequestTimeoutError`` on timeout).
            ApiStatusError: The response status was >= 400.
        """
        request = self._client.build_request(
            method, path, params=_clean_params(params), json=json
        )
        for interceptor in self._interceptors:
            interceptor.on_request(request)

        try:
            response = await self._client.send(request)
        except httpx.TimeoutException as exc:
            response = self._handle_error(
                RequestTimeoutError(f"{method} {request.url} timed out after {self.timeout}s"),
                cause=exc,
            )
        except httpx.HTTPError as exc:
            response = self._handle_error(
                TransportError(f"{method} {request.url} failed: {exc}"), cause=exc
            )
        else:
            logger.debug("%s %s -> %s", method, request.url, response.status_code)
            if response.is_error:
                response = self._handle_error(_status_error(response))

        for interceptor in reversed(self._interceptors):
            response = interceptor.on_response(response)
        return response

    def _handle_error(
        self, error: MeshApiError, cause: BaseException | None = None
    ) -> httpx.Response:
        if cause is not None:
            error.__cause__ = cause
        for interceptor in reversed(self._interceptors):
            recovered = interceptor.on_error(error)
            if recovered is not None:
                logger.debug("%s suppressed by %s", error, type(interceptor).__name__)
                return recovered
        raise error

    # ------------------------------------------------------------------
    # Verb helpers
    # ------------------------------------------------------------------
    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> httpx.Response:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> httpx.Response:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> httpx.Response:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> httpx.Response:
        return await self.request("DELETE", path)
