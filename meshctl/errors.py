"""Exception hierarchy for the control-plane client.

Failure categories
------------------
``TransportError``
    No response was obtained (DNS, connection refused, timeout).
``ApiStatusError``
    A response arrived with status >= 400.  ``AuthenticationError`` is the
    401 case.
``DecodeError``
    The body does not match the expected envelope/payload shape.
``ApplicationError``
    The envelope decoded with ``success: false``.  Only raised when the
    caller opts in via :meth:`meshctl.models.ApiResponse.unwrap`.
"""

from __future__ import annotations

from typing import Any


class MeshApiError(Exception):
    """Base class for every error surfaced by the client."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportError(MeshApiError):
    """The request never produced a response."""


class RequestTimeoutError(TransportError):
    """The request exceeded the configured timeout."""


class ApiStatusError(MeshApiError):
    """The server answered with an HTTP error status."""

    def __init__(self, status_code: int, body: Any = None) -> None:
        self.body = body
        self.error: str | None = None
        self.message: str | None = None
        if isinstance(body, dict):
            self.error = body.get("error") or None
            self.message = body.get("message") or None
        detail = self.error or self.message or "no detail"
        super().__init__(f"HTTP {status_code}: {detail}", status_code=status_code)


class AuthenticationError(ApiStatusError):
    """HTTP 401 — the stored credential was rejected or missing."""


class DecodeError(MeshApiError):
    """A response body could not be decoded into the expected type."""


class ApplicationError(MeshApiError):
    """The envelope reported ``success: false``."""

    def __init__(
        self,
        error: str | None = None,
        message: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.error = error
        self.message = message
        super().__init__(error or message or "request failed", status_code=status_code)
