"""meshctl CLI — entry-point for all control-plane operations.

Usage:
    python cli/main.py --help

Command groups mirror the control-plane resources:
    auth      → stored bearer token
    nodes     → /nodes
    policies  → /policies
    topology, health, metrics → read-only dashboards
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from meshctl.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
import logging
from typing import Optional

import typer

from meshctl.config import settings
from cli.commands.auth import auth_app
from cli.commands.nodes import nodes_app
from cli.commands.policies import policies_app
from cli.context import call_api, expect_success
from cli.rendering import render_topology

app = typer.Typer(
    name="meshctl",
    help="Hub-and-spoke mesh control-plane CLI.",
    no_args_is_help=True,
)

app.add_typer(auth_app, name="auth")
app.add_typer(nodes_app, name="nodes")
app.add_typer(policies_app, name="policies")


@app.callback()
def main(
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Override MESH_API_URL."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request."),
) -> None:
    """Configure logging and the target control plane."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    if api_url:
        settings.api_url = api_url


# ---------------------------------------------------------------------------
# Read-only dashboards
# ---------------------------------------------------------------------------
@app.command("topology")
def topology() -> None:
    """Draw the mesh as a hub → spoke tree."""
    snapshot = expect_success(call_api(lambda mesh: mesh.topology.get()))
    typer.echo(render_topology(snapshot))


@app.command("health")
def health() -> None:
    """Show control-plane health and per-service status."""
    status = expect_success(call_api(lambda mesh: mesh.health.get()))
    typer.echo(f"[health] {status.status}  version={status.version}  at {status.timestamp}")
    for name, state in sorted(status.services.items()):
        typer.echo(f"  - {name}: {state}")


@app.command("metrics")
def metrics() -> None:
    """Show node/policy counters and traffic statistics."""
    m = expect_success(call_api(lambda mesh: mesh.metrics.get()))
    typer.echo(f"[metrics] Nodes    : {m.nodes_active}/{m.nodes_total} active")
    typer.echo(f"[metrics] Hubs     : {m.hubs_total}")
    typer.echo(f"[metrics] Spokes   : {m.spokes_total}")
    typer.echo(f"[metrics] Policies : {m.policies_total}")
    if m.traffic_stats:
        typer.echo("")
        typer.echo(json.dumps(m.traffic_stats, indent=2))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
