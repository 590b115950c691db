"""Control-plane health check."""

from __future__ import annotations

from meshctl.models import ApiResponse, HealthStatus
from meshctl.resources.base import ResourceClient, decode


class HealthClient(ResourceClient):
    async def get(self) -> ApiResponse[HealthStatus]:
        response = await self._transport.get("/health")
        return decode(response, ApiResponse[HealthStatus])
