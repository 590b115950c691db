"""Node endpoints.

Routes
------
GET    /nodes                  Paginated list (?page, per_page, node_type, status)
GET    /nodes/{id}             Fetch a single node
POST   /nodes                  Register a node
PUT    /nodes/{id}             Partial update
DELETE /nodes/{id}             Remove a node
GET    /nodes/{id}/config      Opaque peer configuration blob
"""

from __future__ import annotations

from typing import Optional

from pydantic import JsonValue

from meshctl.models import (
    ApiResponse,
    Node,
    NodeCreate,
    NodeListParams,
    NodeUpdate,
    PaginatedResponse,
)
from meshctl.resources.base import ResourceClient, decode, resource_path


class NodeClient(ResourceClient):
    async def list(
        self, params: Optional[NodeListParams] = None
    ) -> PaginatedResponse[Node]:
        query = params.to_json() if params is not None else None
        response = await self._transport.get("/nodes", params=query)
        return decode(response, PaginatedResponse[Node])

    async def get(self, node_id: str) -> ApiResponse[Node]:
        response = await self._transport.get(resource_path("nodes", node_id))
        return decode(response, ApiResponse[Node])

    async def create(self, node: NodeCreate) -> ApiResponse[Node]:
        response = await self._transport.post("/nodes", json=node.to_json())
        return decode(response, ApiResponse[Node])

    async def update(self, node_id: str, updates: NodeUpdate) -> ApiResponse[Node]:
        response = await self._transport.put(
            resource_path("nodes", node_id), json=updates.to_json()
        )
        return decode(response, ApiResponse[Node])

    async def delete(self, node_id: str) -> ApiResponse[None]:
        response = await self._transport.delete(resource_path("nodes", node_id))
        return decode(response, ApiResponse[None])

    async def get_config(self, node_id: str) -> ApiResponse[JsonValue]:
        """Return the node's peer configuration; its shape is server-defined."""
        response = await self._transport.get(resource_path("nodes", node_id, "config"))
        return decode(response, ApiResponse[JsonValue])
