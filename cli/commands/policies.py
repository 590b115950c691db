"""Policy commands: list, inspect, create, update, remove."""

from typing import Optional

import typer

from meshctl.models import PolicyCreate, PolicyListParams, PolicyUpdate
from cli.context import call_api, expect_success, make_body, require_token
from cli.rendering import format_policy

policies_app = typer.Typer(help="Manage connectivity policies.")


def _updates(**fields) -> dict:
    return {k: v for k, v in fields.items() if v is not None}


@policies_app.command("list")
def policies_list(
    page: Optional[int] = typer.Option(None, help="Page number."),
    per_page: Optional[int] = typer.Option(None, "--per-page", help="Items per page."),
) -> None:
    """List policies in server order."""
    params = make_body(PolicyListParams, **_updates(page=page, per_page=per_page))
    envelope = call_api(lambda mesh: mesh.policies.list(params))
    policies = expect_success(envelope) or []

    if not policies:
        typer.echo("No policies found.")
    for policy in policies:
        typer.echo(format_policy(policy))

    if envelope.pagination is not None:
        p = envelope.pagination
        typer.echo(f"Page {p.page}/{p.total_pages}  ({p.total} total)")


@policies_app.command("show")
def policies_show(policy_id: str = typer.Argument(..., help="Policy ID.")) -> None:
    """Print a policy as JSON."""
    policy = expect_success(call_api(lambda mesh: mesh.policies.get(policy_id)))
    typer.echo(policy.model_dump_json(indent=2))


@policies_app.command("create")
@require_token
def policies_create(
    name: str = typer.Option(..., help="Policy name."),
    action: str = typer.Option(..., help="allow | deny."),
    priority: int = typer.Option(100, help="Priority (ordering is server-defined)."),
    enabled: bool = typer.Option(True, "--enabled/--disabled", help="Whether the rule is active."),
    description: Optional[str] = typer.Option(None, help="Free-text description."),
    source_node: Optional[str] = typer.Option(None, "--source-node", help="Source node ID."),
    destination_node: Optional[str] = typer.Option(None, "--destination-node", help="Destination node ID."),
    source_cidr: Optional[str] = typer.Option(None, "--source-cidr", help="Source range."),
    destination_cidr: Optional[str] = typer.Option(None, "--destination-cidr", help="Destination range."),
    protocol: Optional[str] = typer.Option(None, help="tcp | udp | icmp ..."),
    port: Optional[int] = typer.Option(None, help="Destination port."),
) -> None:
    """Create a policy."""
    body = make_body(
        PolicyCreate,
        name=name,
        action=action,
        priority=priority,
        enabled=enabled,
        **_updates(
            description=description,
            source_node_id=source_node,
            destination_node_id=destination_node,
            source_cidr=source_cidr,
            destination_cidr=destination_cidr,
            protocol=protocol,
            port=port,
        ),
    )
    policy = expect_success(call_api(lambda mesh: mesh.policies.create(body)))
    typer.echo(f"✅ Policy created: {policy.id}  {policy.action} #{policy.priority} {policy.name!r}")


@policies_app.command("update")
@require_token
def policies_update(
    policy_id: str = typer.Argument(..., help="Policy ID."),
    name: Optional[str] = typer.Option(None, help="New name."),
    action: Optional[str] = typer.Option(None, help="allow | deny."),
    priority: Optional[int] = typer.Option(None, help="New priority."),
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Toggle the rule."),
    description: Optional[str] = typer.Option(None, help="New description."),
) -> None:
    """Update selected fields of a policy."""
    body = make_body(
        PolicyUpdate,
        **_updates(name=name, action=action, priority=priority, enabled=enabled, description=description)
    )
    policy = expect_success(call_api(lambda mesh: mesh.policies.update(policy_id, body)))
    typer.echo(f"✅ Policy updated: {policy.id}  enabled={policy.enabled}")


@policies_app.command("delete")
@require_token
def policies_delete(policy_id: str = typer.Argument(..., help="Policy ID.")) -> None:
    """Remove a policy."""
    envelope = call_api(lambda mesh: mesh.policies.delete(policy_id))
    expect_success(envelope)
    typer.echo(f"🗑️  {envelope.message or f'Policy {policy_id} deleted.'}")
