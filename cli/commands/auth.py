"""Commands for managing the stored bearer token.

Acquiring a token is outside this tool; these commands only store, inspect,
and clear it.
"""

import typer

from meshctl.config import settings
from cli.context import get_store

auth_app = typer.Typer(help="Manage the stored API token.")


@auth_app.command("set-token")
def auth_set_token(
    token: str = typer.Argument(..., help="Bearer token issued by the control plane."),
) -> None:
    """Store a bearer token for subsequent commands."""
    token = token.strip()
    if not token:
        typer.echo("❌ Token must not be empty.")
        raise typer.Exit(code=1)
    get_store().set(settings.token_key, token)
    typer.echo(f"✅ Token saved to {settings.credentials_path}")


@auth_app.command("clear")
def auth_clear() -> None:
    """Forget the stored bearer token."""
    get_store().remove(settings.token_key)
    typer.echo("🔒 Token cleared.")


@auth_app.command("status")
def auth_status() -> None:
    """Show whether a token is stored (never prints the token itself)."""
    token = get_store().get(settings.token_key)
    if token:
        typer.echo(f"🔑 Token stored ({len(token)} chars) for {settings.api_url}")
    else:
        typer.echo("No token stored.")
