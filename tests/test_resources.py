"""Tests for the five resource clients against mocked endpoints.

Each test checks the verb/path/body the client sends and how it decodes
what comes back.  Authentication behaviour lives in ``test_auth.py``.
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from meshctl.client import MeshClient
from meshctl.config import Settings
from meshctl.errors import ApiStatusError, DecodeError
from meshctl.models import (
    NodeCreate,
    NodeListParams,
    NodeUpdate,
    PolicyCreate,
    PolicyListParams,
    PolicyUpdate,
)
from meshctl.resources.base import resource_path

BASE_URL = "http://mesh.test/api/v1"
_STAMP = "2024-05-01T12:00:00Z"


def _node_json(**overrides) -> dict:
    node = {
        "id": "n1",
        "name": "hub-eu",
        "node_type": "hub",
        "public_key": "hubPublicKey=",
        "allocated_ip": "10.0.0.1",
        "endpoint": "hub.example.net",
        "port": 51820,
        "status": "active",
        "created_at": _STAMP,
        "updated_at": _STAMP,
    }
    node.update(overrides)
    return node


def _policy_json(**overrides) -> dict:
    policy = {
        "id": "p1",
        "name": "allow-ssh",
        "source_cidr": "10.0.1.0/24",
        "protocol": "tcp",
        "port": 22,
        "action": "allow",
        "priority": 10,
        "enabled": True,
        "created_at": _STAMP,
        "updated_at": _STAMP,
    }
    policy.update(overrides)
    return policy


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def api():
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        yield router


@pytest.fixture
async def mesh():
    async with MeshClient(settings=Settings(api_url=BASE_URL)) as client:
        yield client


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

class TestNodeClient:
    async def test_list_sends_query_and_decodes_page(self, api, mesh) -> None:
        route = api.get("/nodes").mock(return_value=httpx.Response(200, json={
            "success": True,
            "data": [_node_json(), _node_json(id="n2", node_type="spoke", endpoint=None, port=None)],
            "pagination": {"page": 1, "per_page": 20, "total": 2, "total_pages": 1},
        }))

        envelope = await mesh.nodes.list(NodeListParams(page=1, per_page=20, node_type="hub"))

        params = route.calls.last.request.url.params
        assert dict(params) == {"page": "1", "per_page": "20", "node_type": "hub"}
        assert envelope.success is True
        assert [n.id for n in envelope.data] == ["n1", "n2"]
        assert envelope.pagination.total == 2

    async def test_list_without_params_sends_no_query(self, api, mesh) -> None:
        route = api.get("/nodes").mock(
            return_value=httpx.Response(200, json={"success": True, "data": []})
        )
        await mesh.nodes.list()
        assert route.calls.last.request.url.query == b""

    async def test_list_preserves_server_order(self, api, mesh) -> None:
        ids = ["z", "a", "m"]
        api.get("/nodes").mock(return_value=httpx.Response(200, json={
            "success": True, "data": [_node_json(id=i) for i in ids],
        }))
        envelope = await mesh.nodes.list()
        assert [n.id for n in envelope.data] == ids

    async def test_get(self, api, mesh) -> None:
        api.get("/nodes/n1").mock(
            return_value=httpx.Response(200, json={"success": True, "data": _node_json()})
        )
        envelope = await mesh.nodes.get("n1")
        assert envelope.data.endpoint == "hub.example.net"
        assert envelope.data.created_at == _STAMP

    def test_identifier_is_percent_encoded(self) -> None:
        assert resource_path("nodes", "a/b", "config") == "/nodes/a%2Fb/config"
        assert resource_path("nodes", "abc") == "/nodes/abc"

    async def test_create_posts_writable_fields(self, api, mesh) -> None:
        route = api.post("/nodes").mock(
            return_value=httpx.Response(201, json={"success": True, "data": _node_json()})
        )
        body = NodeCreate(
            name="hub-eu", node_type="hub", public_key="hubPublicKey=",
            allocated_ip="10.0.0.1", endpoint="hub.example.net", port=51820, status="active",
        )

        envelope = await mesh.nodes.create(body)

        sent = json.loads(route.calls.last.request.content)
        assert "id" not in sent and "created_at" not in sent
        assert sent["port"] == 51820
        assert envelope.data.id == "n1"

    async def test_update_with_empty_fields(self, api, mesh) -> None:
        route = api.put("/nodes/n1").mock(
            return_value=httpx.Response(200, json={"success": True, "data": _node_json()})
        )
        envelope = await mesh.nodes.update("n1", NodeUpdate())

        assert json.loads(route.calls.last.request.content) == {}
        assert envelope.success

    async def test_update_sends_partial(self, api, mesh) -> None:
        route = api.put("/nodes/n1").mock(
            return_value=httpx.Response(200, json={"success": True, "data": _node_json(status="disabled")})
        )
        envelope = await mesh.nodes.update("n1", NodeUpdate(status="disabled"))

        assert json.loads(route.calls.last.request.content) == {"status": "disabled"}
        assert envelope.data.status == "disabled"

    async def test_delete_has_no_payload(self, api, mesh) -> None:
        api.delete("/nodes/n1").mock(return_value=httpx.Response(
            200, json={"success": True, "message": "Node deleted successfully"}
        ))
        envelope = await mesh.nodes.delete("n1")
        assert envelope.success
        assert envelope.data is None
        assert envelope.message == "Node deleted successfully"

    async def test_delete_accepts_204(self, api, mesh) -> None:
        api.delete("/nodes/n1").mock(return_value=httpx.Response(204))
        envelope = await mesh.nodes.delete("n1")
        assert envelope.success

    async def test_get_config_is_opaque(self, api, mesh) -> None:
        blob = {"interface": {"address": ["10.0.0.1"]}, "peers": [], "extra": [1, "two", None]}
        api.get("/nodes/n1/config").mock(
            return_value=httpx.Response(200, json={"success": True, "data": blob})
        )
        envelope = await mesh.nodes.get_config("n1")
        assert envelope.data == blob


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------

class TestPolicyClient:
    async def test_list(self, api, mesh) -> None:
        route = api.get("/policies").mock(return_value=httpx.Response(200, json={
            "success": True,
            "data": [_policy_json(), _policy_json(id="p2", action="deny", priority=5)],
            "pagination": {"page": 2, "per_page": 2, "total": 4, "total_pages": 2},
        }))
        envelope = await mesh.policies.list(PolicyListParams(page=2, per_page=2))

        assert dict(route.calls.last.request.url.params) == {"page": "2", "per_page": "2"}
        assert [p.priority for p in envelope.data] == [10, 5]

    async def test_get(self, api, mesh) -> None:
        api.get("/policies/p1").mock(
            return_value=httpx.Response(200, json={"success": True, "data": _policy_json()})
        )
        envelope = await mesh.policies.get("p1")
        assert envelope.data.source_cidr == "10.0.1.0/24"
        assert envelope.data.destination_cidr is None

    async def test_create(self, api, mesh) -> None:
        route = api.post("/policies").mock(
            return_value=httpx.Response(201, json={"success": True, "data": _policy_json()})
        )
        body = PolicyCreate(
            name="allow-ssh", source_cidr="10.0.1.0/24", protocol="tcp", port=22,
            action="allow", priority=10, enabled=True,
        )
        await mesh.policies.create(body)

        assert json.loads(route.calls.last.request.content) == {
            "name": "allow-ssh",
            "source_cidr": "10.0.1.0/24",
            "protocol": "tcp",
            "port": 22,
            "action": "allow",
            "priority": 10,
            "enabled": True,
        }

    async def test_update(self, api, mesh) -> None:
        route = api.put("/policies/p1").mock(
            return_value=httpx.Response(200, json={"success": True, "data": _policy_json(enabled=False)})
        )
        envelope = await mesh.policies.update("p1", PolicyUpdate(enabled=False))

        assert json.loads(route.calls.last.request.content) == {"enabled": False}
        assert envelope.data.enabled is False

    async def test_delete(self, api, mesh) -> None:
        api.delete("/policies/p1").mock(return_value=httpx.Response(200, json={"success": True}))
        assert (await mesh.policies.delete("p1")).success


# ---------------------------------------------------------------------------
# Topology / health / metrics
# ---------------------------------------------------------------------------

class TestReadOnlyClients:
    async def test_topology(self, api, mesh) -> None:
        api.get("/topology").mock(return_value=httpx.Response(200, json={
            "success": True,
            "data": {
                "nodes": [
                    {"id": "h", "name": "hub", "node_type": "hub", "status": "active",
                     "allocated_ip": "10.0.0.1", "endpoint": "hub.example.net", "is_online": True},
                    {"id": "s", "name": "spoke", "node_type": "spoke", "status": "inactive",
                     "allocated_ip": "10.0.1.2", "is_online": False},
                ],
                "links": [{"source": "h", "target": "s", "type": "hub-spoke"}],
            },
        }))
        topology = (await mesh.topology.get()).data
        assert [n.is_online for n in topology.nodes] == [True, False]
        assert topology.links[0].type == "hub-spoke"

    async def test_health(self, api, mesh) -> None:
        api.get("/health").mock(return_value=httpx.Response(200, json={
            "success": True,
            "data": {"status": "healthy", "version": "1.2.3", "timestamp": _STAMP,
                     "services": {"database": "healthy"}},
        }))
        health = (await mesh.health.get()).data
        assert health.version == "1.2.3"
        assert health.services == {"database": "healthy"}

    async def test_metrics(self, api, mesh) -> None:
        api.get("/metrics").mock(return_value=httpx.Response(200, json={
            "success": True,
            "data": {"nodes_total": 3, "nodes_active": 2, "hubs_total": 1, "spokes_total": 2,
                     "policies_total": 5, "traffic_stats": {"rx": 1024}},
        }))
        metrics = (await mesh.metrics.get()).data
        assert metrics.policies_total == 5
        assert metrics.traffic_stats == {"rx": 1024}


# ---------------------------------------------------------------------------
# Failure categories
# ---------------------------------------------------------------------------

class TestFailureCategories:
    async def test_unknown_enum_is_decode_error(self, api, mesh) -> None:
        api.get("/nodes/n1").mock(return_value=httpx.Response(
            200, json={"success": True, "data": _node_json(node_type="relay")}
        ))
        with pytest.raises(DecodeError) as info:
            await mesh.nodes.get("n1")
        assert info.value.status_code == 200

    async def test_non_json_body_is_decode_error(self, api, mesh) -> None:
        api.get("/health").mock(return_value=httpx.Response(200, text="<html>proxy</html>"))
        with pytest.raises(DecodeError):
            await mesh.health.get()

    async def test_missing_success_flag_is_decode_error(self, api, mesh) -> None:
        api.get("/metrics").mock(return_value=httpx.Response(200, json={"data": {}}))
        with pytest.raises(DecodeError):
            await mesh.metrics.get()

    async def test_application_failure_is_returned_not_raised(self, api, mesh) -> None:
        api.get("/nodes/n1").mock(return_value=httpx.Response(
            200, json={"success": False, "error": "Node is being provisioned"}
        ))
        envelope = await mesh.nodes.get("n1")
        assert envelope.success is False
        assert envelope.error == "Node is being provisioned"
        assert envelope.payload is None

    async def test_failure_envelope_ignores_leftover_data(self, api, mesh) -> None:
        api.get("/nodes/n1").mock(return_value=httpx.Response(
            200, json={"success": False, "data": {}, "error": "boom"}
        ))
        envelope = await mesh.nodes.get("n1")

        assert envelope.success is False
        assert envelope.error == "boom"
        assert envelope.data is None

    async def test_failure_envelope_ignores_leftover_page(self, api, mesh) -> None:
        api.get("/policies").mock(return_value=httpx.Response(200, json={
            "success": False,
            "data": [{"id": "p1"}],
            "pagination": {"page": "first"},
            "error": "Policy store unavailable",
            "message": "try again later",
        }))
        envelope = await mesh.policies.list()

        assert envelope.success is False
        assert (envelope.error, envelope.message) == ("Policy store unavailable", "try again later")
        assert envelope.data is None and envelope.pagination is None

    async def test_http_error_annotated_with_status(self, api, mesh) -> None:
        api.post("/policies").mock(return_value=httpx.Response(
            400, json={"success": False, "error": "Invalid request body"}
        ))
        with pytest.raises(ApiStatusError) as info:
            await mesh.policies.create(
                PolicyCreate(name="x", action="deny", priority=1, enabled=True)
            )
        assert info.value.status_code == 400
        assert info.value.error == "Invalid request body"
