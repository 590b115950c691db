"""Shared state and plumbing for the meshctl CLI.

The bearer token lives in `~/.meshctl/credentials.json` (see
``settings.credentials_path``).  Every command talks to the control plane
through :func:`call_api`, which opens a :class:`MeshClient`, runs one
coroutine, and turns client errors into a message plus exit code 1.
"""

from __future__ import annotations

import asyncio
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

import typer
from pydantic import BaseModel, ValidationError

from meshctl.client import MeshClient
from meshctl.config import settings
from meshctl.credentials import FileCredentialStore
from meshctl.errors import AuthenticationError, MeshApiError
from meshctl.models import ApiResponse

T = TypeVar("T")
B = TypeVar("B", bound=BaseModel)


def get_store() -> FileCredentialStore:
    """Return the credential store backing the CLI."""
    return FileCredentialStore(settings.credentials_path)


def _on_auth_expired(login_path: str) -> None:
    typer.echo(f"❌ Session expired. Sign in again at {login_path}", err=True)
    typer.echo("Then run 'meshctl auth set-token <token>'.", err=True)


def build_client() -> MeshClient:
    return MeshClient(settings=settings, store=get_store(), on_auth_expired=_on_auth_expired)


def call_api(operation: Callable[[MeshClient], Awaitable[T]]) -> T:
    """Run *operation* against a fresh client and return its result.

    Aborts with exit code 1 on any :class:`MeshApiError`.  The 401 message
    has already been printed by the auth-expired callback.
    """

    async def _run() -> T:
        async with build_client() as mesh:
            return await operation(mesh)

    try:
        return asyncio.run(_run())
    except AuthenticationError:
        raise typer.Exit(code=1)
    except MeshApiError as exc:
        typer.echo(f"❌ {exc}", err=True)
        raise typer.Exit(code=1)


def expect_success(envelope: ApiResponse[Any]) -> Any:
    """Return the envelope payload, or abort if ``success`` is false."""
    if not envelope.success:
        detail = envelope.error or envelope.message or "request failed"
        typer.echo(f"❌ {detail}", err=True)
        raise typer.Exit(code=1)
    return envelope.data


def require_token(func: Callable) -> Callable:
    """Decorator for CLI commands that need a stored bearer token.

    Aborts execution if no token is stored.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not get_store().get(settings.token_key):
            typer.echo("❌ No auth token stored.")
            typer.echo("Run 'meshctl auth set-token <token>' first.")
            raise typer.Exit(code=1)
        return func(*args, **kwargs)

    return wrapper


def make_body(model: type[B], **fields: Any) -> B:
    """Build a request model from CLI options, aborting on invalid values."""
    try:
        return model(**fields)
    except ValidationError as exc:
        for err in exc.errors():
            loc = ".".join(str(part) for part in err["loc"])
            typer.echo(f"❌ {loc}: {err['msg']}", err=True)
        raise typer.Exit(code=1)
