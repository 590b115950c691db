"""Resource clients — one stateless facade per endpoint family."""

from meshctl.resources.health import HealthClient
from meshctl.resources.metrics import MetricsClient
from meshctl.resources.nodes import NodeClient
from meshctl.resources.policies import PolicyClient
from meshctl.resources.topology import TopologyClient

__all__ = ["NodeClient", "PolicyClient", "TopologyClient", "HealthClient", "MetricsClient"]
