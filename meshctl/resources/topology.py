"""Read-only mesh topology snapshot."""

from __future__ import annotations

from meshctl.models import ApiResponse, Topology
from meshctl.resources.base import ResourceClient, decode


class TopologyClient(ResourceClient):
    async def get(self) -> ApiResponse[Topology]:
        response = await self._transport.get("/topology")
        return decode(response, ApiResponse[Topology])
