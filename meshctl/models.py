"""Typed payloads exchanged with the control plane.

These are frozen Pydantic models: the client never derives state from them,
it only shapes requests and unwraps responses.  Closed enumerations are
``Literal`` types so an unknown ``node_type``/``status``/``action`` fails
validation instead of slipping through.

Optional fields default to ``None`` and request bodies are serialised with
``exclude_unset=True``, so "not provided" never turns into an empty value.
Server timestamps stay as the RFC 3339 text the server sent; parsing them
would truncate nanosecond precision.
"""

from __future__ import annotations

from typing import Any, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, JsonValue

from meshctl.errors import ApplicationError

T = TypeVar("T")

NodeType = Literal["hub", "spoke"]
NodeStatus = Literal["pending", "active", "inactive", "disabled"]
PolicyAction = Literal["allow", "deny"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class _RequestBody(_Frozen):
    def to_json(self) -> dict[str, Any]:
        """Serialise only the fields the caller actually set."""
        return self.model_dump(mode="json", exclude_unset=True)


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

class Node(_Frozen):
    id: str
    name: str
    node_type: NodeType
    public_key: str
    allocated_ip: str
    endpoint: Optional[str] = None
    port: Optional[int] = None
    allowed_ips: Optional[List[str]] = None
    last_handshake: Optional[str] = None
    status: NodeStatus
    created_at: str
    updated_at: str


class NodeCreate(_RequestBody):
    name: str
    node_type: NodeType
    public_key: str
    allocated_ip: str
    endpoint: Optional[str] = None
    port: Optional[int] = None
    allowed_ips: Optional[List[str]] = None
    last_handshake: Optional[str] = None
    status: NodeStatus


class NodeUpdate(_RequestBody):
    name: Optional[str] = None
    node_type: Optional[NodeType] = None
    public_key: Optional[str] = None
    allocated_ip: Optional[str] = None
    endpoint: Optional[str] = None
    port: Optional[int] = None
    allowed_ips: Optional[List[str]] = None
    last_handshake: Optional[str] = None
    status: Optional[NodeStatus] = None


class NodeListParams(_RequestBody):
    page: Optional[int] = None
    per_page: Optional[int] = None
    node_type: Optional[NodeType] = None
    status: Optional[NodeStatus] = None


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------

class Policy(_Frozen):
    id: str
    name: str
    description: Optional[str] = None
    source_node_id: Optional[str] = None
    destination_node_id: Optional[str] = None
    source_cidr: Optional[str] = None
    destination_cidr: Optional[str] = None
    protocol: Optional[str] = None
    port: Optional[int] = None
    action: PolicyAction
    priority: int
    enabled: bool
    created_at: str
    updated_at: str


class PolicyCreate(_RequestBody):
    name: str
    description: Optional[str] = None
    source_node_id: Optional[str] = None
    destination_node_id: Optional[str] = None
    source_cidr: Optional[str] = None
    destination_cidr: Optional[str] = None
    protocol: Optional[str] = None
    port: Optional[int] = None
    action: PolicyAction
    priority: int
    enabled: bool


class PolicyUpdate(_RequestBody):
    name: Optional[str] = None
    description: Optional[str] = None
    source_node_id: Optional[str] = None
    destination_node_id: Optional[str] = None
    source_cidr: Optional[str] = None
    destination_cidr: Optional[str] = None
    protocol: Optional[str] = None
    port: Optional[int] = None
    action: Optional[PolicyAction] = None
    priority: Optional[int] = None
    enabled: Optional[bool] = None


class PolicyListParams(_RequestBody):
    page: Optional[int] = None
    per_page: Optional[int] = None


# ---------------------------------------------------------------------------
# Topology / health / metrics
# ---------------------------------------------------------------------------

class TopologyNode(_Frozen):
    id: str
    name: str
    node_type: NodeType
    status: str
    allocated_ip: str
    endpoint: Optional[str] = None
    is_online: bool


class TopologyLink(_Frozen):
    source: str
    target: str
    type: str


class Topology(_Frozen):
    nodes: List[TopologyNode]
    links: List[TopologyLink]


class HealthStatus(_Frozen):
    status: str
    version: str
    timestamp: str
    services: dict[str, str]


class Metrics(_Frozen):
    nodes_total: int
    nodes_active: int
    hubs_total: int
    spokes_total: int
    policies_total: int
    traffic_stats: dict[str, JsonValue]


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

class ApiResponse(_Frozen, Generic[T]):
    """Uniform ``{success, data?, error?, message?}`` wrapper.

    ``data`` must be treated as absent whenever ``success`` is false; use
    :attr:`payload` or :meth:`unwrap` rather than reading ``data`` directly.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None

    @property
    def payload(self) -> Optional[T]:
        return self.data if self.success else None

    def unwrap(self) -> Optional[T]:
        """Return ``data`` or raise :class:`ApplicationError` if ``success`` is false."""
        if not self.success:
            raise ApplicationError(self.error, self.message)
        return self.data


class Pagination(_Frozen):
    page: int
    per_page: int
    total: int
    total_pages: int


class PaginatedResponse(ApiResponse[List[T]], Generic[T]):
    pagination: Optional[Pagination] = None
