"""Render a node's configuration payload as a ``wg-quick`` file.

``GET /nodes/{id}/config`` returns an opaque blob; this module gives it a
shape only when the caller asks for a WireGuard rendering::

    {
      "interface": {"private_key": ..., "address": [...], "listen_port": 51820, "mtu": 1420},
      "peers": [{"public_key": ..., "allowed_ips": [...], "endpoint": ..., "persistent_keepalive": 25}],
      "generated_at": "..."
    }
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, JsonValue, ValidationError

from meshctl.errors import DecodeError


class WGInterface(BaseModel):
    private_key: str
    address: List[str]
    listen_port: int = 0
    mtu: int = 0


class WGPeer(BaseModel):
    public_key: str
    allowed_ips: List[str]
    endpoint: Optional[str] = None
    persistent_keepalive: Optional[int] = None


class NodeConfig(BaseModel):
    interface: WGInterface
    peers: List[WGPeer] = []
    generated_at: Optional[datetime] = None


def parse_node_config(payload: JsonValue) -> NodeConfig:
    """Validate an opaque config payload.

    Raises:
        DecodeError: *payload* is not a WireGuard node configuration.
    """
    try:
        return NodeConfig.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(f"Not a WireGuard node config: {exc.error_count()} error(s)") from exc


def render_wg_quick(payload: JsonValue) -> str:
    """Return *payload* as ``wg-quick`` INI text."""
    config = parse_node_config(payload)
    iface = config.interface

    lines = ["[Interface]", f"PrivateKey = {iface.private_key}"]
    if iface.address:
        lines.append(f"Address = {', '.join(iface.address)}")
    # Zero means "let the kernel pick" / "use the default".
    if iface.listen_port:
        lines.append(f"ListenPort = {iface.listen_port}")
    if iface.mtu:
        lines.append(f"MTU = {iface.mtu}")

    for peer in config.peers:
        lines.append("")
        lines.append("[Peer]")
        lines.append(f"PublicKey = {peer.public_key}")
        lines.append(f"AllowedIPs = {', '.join(peer.allowed_ips)}")
        if peer.endpoint:
            lines.append(f"Endpoint = {peer.endpoint}")
        if peer.persistent_keepalive:
            lines.append(f"PersistentKeepalive = {peer.persistent_keepalive}")

    return "\n".join(lines) + "\n"
