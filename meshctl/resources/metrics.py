"""Aggregate mesh counters and traffic statistics."""

from __future__ import annotations

from meshctl.models import ApiResponse, Metrics
from meshctl.resources.base import ResourceClient, decode


class MetricsClient(ResourceClient):
    async def get(self) -> ApiResponse[Metrics]:
        response = await self._transport.get("/metrics")
        return decode(response, ApiResponse[Metrics])
