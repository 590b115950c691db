"""``MeshClient`` — one configured transport shared by every resource client.

Usage::

    async with MeshClient(store=MemoryCredentialStore({"authToken": tok}),
                          on_auth_expired=redirect) as mesh:
        page = await mesh.nodes.list(NodeListParams(page=1, per_page=20))
"""

from __future__ import annotations

import httpx

from meshctl.auth import AuthExpiredCallback, AuthInterceptor
from meshctl.config import Settings, settings as default_settings
from meshctl.credentials import CredentialStore, MemoryCredentialStore
from meshctl.resources import (
    HealthClient,
    MetricsClient,
    NodeClient,
    PolicyClient,
    TopologyClient,
)
from meshctl.transport import Transport


class MeshClient:
    """Facade over the five resource clients.

    Args:
        settings: Base URL / timeout / credential names.  Defaults to the
            module-level ``meshctl.config.settings``.
        store: Where the bearer token is read from.  Defaults to an empty
            in-memory store.
        on_auth_expired: Called with the login path after a 401 has cleared
            the stored token.
        transport: Optional ``httpx`` transport used instead of the network.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: CredentialStore | None = None,
        on_auth_expired: AuthExpiredCallback | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.store = store if store is not None else MemoryCredentialStore()
        self.auth = AuthInterceptor(
            self.store,
            on_auth_expired=on_auth_expired,
            token_key=self.settings.token_key,
            login_path=self.settings.login_path,
        )
        self.transport = Transport(
            base_url=self.settings.api_url,
            timeout=self.settings.request_timeout,
            interceptors=[self.auth],
            transport=transport,
        )

        self.nodes = NodeClient(self.transport)
        self.policies = PolicyClient(self.transport)
        self.topology = TopologyClient(self.transport)
        self.health = HealthClient(self.transport)
        self.metrics = MetricsClient(self.transport)

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> MeshClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
