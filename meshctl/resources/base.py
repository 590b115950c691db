"""Shared plumbing for the resource clients."""

from __future__ import annotations

from typing import TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from meshctl.errors import DecodeError
from meshctl.transport import Transport

M = TypeVar("M", bound=BaseModel)

# Only meaningful when the envelope reports success.
_PAYLOAD_FIELDS = ("data", "pagination")


def resource_path(*segments: str) -> str:
    """Join *segments* into an absolute path, percent-encoding each one."""
    return "/" + "/".join(quote(str(s), safe="") for s in segments)


def decode(response: httpx.Response, model: type[M]) -> M:
    """Validate *response*'s JSON body against *model*.

    When the envelope reports ``success: false`` the payload fields are
    dropped before validation, so leftover ``data`` never hides the
    ``error``/``message`` the server sent.

    Raises:
        DecodeError: The body is not JSON or does not match *model*.
    """
    if response.status_code == 204 and not response.content:
        return model.model_validate({"success": True})
    try:
        body = response.json()
    except ValueError as exc:
        raise DecodeError(
            f"Response body for {model.__name__} is not JSON",
            status_code=response.status_code,
        ) from exc
    if isinstance(body, dict) and body.get("success") is False:
        body = {k: v for k, v in body.items() if k not in _PAYLOAD_FIELDS}
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise DecodeError(
            f"Unexpected response body for {model.__name__}: "
            f"{exc.error_count()} validation error(s)",
            status_code=response.status_code,
        ) from exc


class ResourceClient:
    """Base for the stateless per-resource facades."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
