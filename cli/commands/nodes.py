"""Node commands: list, inspect, register, update, remove, fetch config."""

import json
from typing import List, Optional

import typer

from meshctl.errors import DecodeError
from meshctl.models import NodeCreate, NodeListParams, NodeUpdate
from meshctl.wireguard import render_wg_quick
from cli.context import call_api, expect_success, make_body, require_token
from cli.rendering import format_node

nodes_app = typer.Typer(help="Manage mesh nodes (hubs and spokes).")


def _updates(**fields) -> dict:
    return {k: v for k, v in fields.items() if v is not None}


@nodes_app.command("list")
def nodes_list(
    page: Optional[int] = typer.Option(None, help="Page number."),
    per_page: Optional[int] = typer.Option(None, "--per-page", help="Items per page."),
    node_type: Optional[str] = typer.Option(None, "--type", help="Filter: hub | spoke."),
    status: Optional[str] = typer.Option(None, help="Filter: pending | active | inactive | disabled."),
) -> None:
    """List nodes, one per line."""
    params = make_body(NodeListParams, **_updates(page=page, per_page=per_page, node_type=node_type, status=status))
    envelope = call_api(lambda mesh: mesh.nodes.list(params))
    nodes = expect_success(envelope) or []

    if not nodes:
        typer.echo("No nodes found.")
    for node in nodes:
        typer.echo(format_node(node))

    if envelope.pagination is not None:
        p = envelope.pagination
        typer.echo(f"Page {p.page}/{p.total_pages}  ({p.total} total)")


@nodes_app.command("show")
def nodes_show(node_id: str = typer.Argument(..., help="Node ID.")) -> None:
    """Print a node as JSON."""
    node = expect_success(call_api(lambda mesh: mesh.nodes.get(node_id)))
    typer.echo(node.model_dump_json(indent=2))


@nodes_app.command("create")
@require_token
def nodes_create(
    name: str = typer.Option(..., help="Display name."),
    node_type: str = typer.Option(..., "--type", help="hub | spoke."),
    public_key: str = typer.Option(..., "--public-key", help="WireGuard public key."),
    allocated_ip: str = typer.Option(..., "--allocated-ip", help="Mesh address."),
    endpoint: Optional[str] = typer.Option(None, help="Reachable host."),
    port: Optional[int] = typer.Option(None, help="Listen port."),
    allowed_ip: Optional[List[str]] = typer.Option(None, "--allowed-ip", help="Permitted range (repeatable)."),
    status: str = typer.Option("pending", help="Initial status."),
) -> None:
    """Register a new node."""
    body = make_body(
        NodeCreate,
        name=name,
        node_type=node_type,
        public_key=public_key,
        allocated_ip=allocated_ip,
        status=status,
        **_updates(endpoint=endpoint, port=port, allowed_ips=allowed_ip or None),
    )
    node = expect_success(call_api(lambda mesh: mesh.nodes.create(body)))
    typer.echo(f"✅ Node created: {node.id}  name={node.name!r}  ip={node.allocated_ip}")


@nodes_app.command("update")
@require_token
def nodes_update(
    node_id: str = typer.Argument(..., help="Node ID."),
    name: Optional[str] = typer.Option(None, help="New display name."),
    endpoint: Optional[str] = typer.Option(None, help="New reachable host."),
    port: Optional[int] = typer.Option(None, help="New listen port."),
    allowed_ip: Optional[List[str]] = typer.Option(None, "--allowed-ip", help="Replace permitted ranges."),
    status: Optional[str] = typer.Option(None, help="New status."),
) -> None:
    """Update selected fields of a node."""
    body = make_body(
        NodeUpdate,
        **_updates(name=name, endpoint=endpoint, port=port, allowed_ips=allowed_ip or None, status=status)
    )
    node = expect_success(call_api(lambda mesh: mesh.nodes.update(node_id, body)))
    typer.echo(f"✅ Node updated: {node.id}  status={node.status}")


@nodes_app.command("delete")
@require_token
def nodes_delete(node_id: str = typer.Argument(..., help="Node ID.")) -> None:
    """Remove a node."""
    envelope = call_api(lambda mesh: mesh.nodes.delete(node_id))
    expect_success(envelope)
    typer.echo(f"🗑️  {envelope.message or f'Node {node_id} deleted.'}")


@nodes_app.command("config")
def nodes_config(
    node_id: str = typer.Argument(..., help="Node ID."),
    wg: bool = typer.Option(False, "--wg", help="Render as a wg-quick file."),
) -> None:
    """Print the node's peer configuration."""
    config = expect_success(call_api(lambda mesh: mesh.nodes.get_config(node_id)))
    if not wg:
        typer.echo(json.dumps(config, indent=2))
        return
    try:
        typer.echo(render_wg_quick(config), nl=False)
    except DecodeError as exc:
        typer.echo(f"❌ {exc}", err=True)
        raise typer.Exit(code=1)
