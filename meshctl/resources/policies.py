"""Policy endpoints.

Priority values are passed through exactly as the server sends them; the
ordering they imply is server-defined.
"""

from __future__ import annotations

from typing import Optional

from meshctl.models import (
    ApiResponse,
    PaginatedResponse,
    Policy,
    PolicyCreate,
    PolicyListParams,
    PolicyUpdate,
)
from meshctl.resources.base import ResourceClient, decode, resource_path


class PolicyClient(ResourceClient):
    async def list(
        self, params: Optional[PolicyListParams] = None
    ) -> PaginatedResponse[Policy]:
        query = params.to_json() if params is not None else None
        response = await self._transport.get("/policies", params=query)
        return decode(response, PaginatedResponse[Policy])

    async def get(self, policy_id: str) -> ApiResponse[Policy]:
        response = await self._transport.get(resource_path("policies", policy_id))
        return decode(response, ApiResponse[Policy])

    async def create(self, policy: PolicyCreate) -> ApiResponse[Policy]:
        response = await self._transport.post("/policies", json=policy.to_json())
        return decode(response, ApiResponse[Policy])

    async def update(self, policy_id: str, updates: PolicyUpdate) -> ApiResponse[Policy]:
        response = await self._transport.put(
            resource_path("policies", policy_id), json=updates.to_json()
        )
        return decode(response, ApiResponse[Policy])

    async def delete(self, policy_id: str) -> ApiResponse[None]:
        response = await self._transport.delete(resource_path("policies", policy_id))
        return decode(response, ApiResponse[None])
