"""Utilities for rendering mesh data in the CLI."""

from __future__ import annotations

from typing import Dict, List, Tuple

from meshctl.models import Node, Policy, Topology, TopologyNode


def render_topology(topology: Topology) -> str:
    """Render a topology snapshot as an ASCII tree.

    Hubs are roots; every node linked from a hub is drawn beneath it with
    the link type.  Nodes not reachable from any hub are listed last.

    Args:
        topology: Snapshot returned by ``GET /topology``.

    Returns:
        String representation of the tree.
    """
    node_map = {n.id: n for n in topology.nodes}

    # Links are undirected for display purposes; hang spokes under hubs.
    adj: Dict[str, List[Tuple[str, str]]] = {}
    for link in topology.links:
        src, tgt = node_map.get(link.source), node_map.get(link.target)
        if tgt is not None and tgt.node_type == "hub" and (src is None or src.node_type != "hub"):
            parent, child = link.target, link.source
        else:
            parent, child = link.source, link.target
        adj.setdefault(parent, []).append((child, link.type))

    lines: List[str] = []
    visited = set()

    def _render_node(node_id: str, relation: str, prefix: str, is_last: bool, is_root: bool):
        if node_id in visited and not is_root:
            return
        visited.add(node_id)
        label = _label(node_map.get(node_id), node_id)

        if is_root:
            lines.append(label)
            child_prefix = ""
        else:
            connector = "└── " if is_last else "├── "
            lines.append(f"{prefix}{connector}[{relation}] {label}")
            child_prefix = prefix + ("    " if is_last else "│   ")

        children = [c for c in adj.get(node_id, []) if c[0] not in visited]
        count = len(children)
        for i, (child_id, rel) in enumerate(children):
            _render_node(child_id, rel, child_prefix, i == count - 1, False)

    for node in topology.nodes:
        if node.node_type == "hub" and node.id not in visited:
            _render_node(node.id, "", "", True, True)

    orphans = [n for n in topology.nodes if n.id not in visited]
    if orphans:
        lines.append("(unlinked)")
        for i, node in enumerate(orphans):
            connector = "└── " if i == len(orphans) - 1 else "├── "
            lines.append(f"{connector}{_label(node, node.id)}")

    if not lines:
        return "Topology is empty."
    return "\n".join(lines)


def _label(node: TopologyNode | None, node_id: str) -> str:
    if node is None:
        return f"Unknown({node_id[:8]})"
    marker = "●" if node.is_online else "○"
    return f"{marker} {_get_icon(node.node_type)} {node.name} {node.allocated_ip} ({node.status})"


def _get_icon(node_type: str) -> str:
    icons = {
        "hub": "🛰️",
        "spoke": "💻",
    }
    return icons.get(node_type, "📦")


def format_node(node: Node) -> str:
    """One-line summary of a node."""
    endpoint = f"  {node.endpoint}:{node.port}" if node.endpoint else ""
    return f"  {node.id}  [{node.node_type}] {node.name!r}  {node.allocated_ip}  {node.status}{endpoint}"


def format_policy(policy: Policy) -> str:
    """One-line summary of a policy."""
    src = policy.source_cidr or policy.source_node_id or "*"
    dst = policy.destination_cidr or policy.destination_node_id or "*"
    proto = policy.protocol or "any"
    port = f":{policy.port}" if policy.port is not None else ""
    state = "on" if policy.enabled else "off"
    return (
        f"  {policy.id}  #{policy.priority} {policy.action.upper()} {policy.name!r}  "
        f"{src} -> {dst} {proto}{port}  ({state})"
    )
