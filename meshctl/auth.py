"""Bearer-token interceptor.

Outgoing: attach ``Authorization: Bearer <token>`` when the credential store
holds a token.  Incoming: on HTTP 401, drop the stored token and notify the
host application (``on_auth_expired(login_path)``) before the original error
reaches the caller.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import httpx

from meshctl.config import settings
from meshctl.credentials import CredentialStore
from meshctl.errors import MeshApiError
from meshctl.transport import Interceptor

logger = logging.getLogger(__name__)

AuthExpiredCallback = Callable[[str], None]


class AuthInterceptor(Interceptor):
    def __init__(
        self,
        store: CredentialStore,
        on_auth_expired: Optional[AuthExpiredCallback] = None,
        token_key: str | None = None,
        login_path: str | None = None,
    ) -> None:
        self.store = store
        self.on_auth_expired = on_auth_expired
        self.token_key = token_key or settings.token_key
        self.login_path = login_path or settings.login_path

    def on_request(self, request: httpx.Request) -> None:
        token = self.store.get(self.token_key)
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    def on_error(self, error: MeshApiError) -> httpx.Response | None:
        if error.status_code != 401:
            return None

        self.store.remove(self.token_key)
        logger.warning("Authentication expired; redirecting to %s", self.login_path)
        if self.on_auth_expired is not None:
            try:
                self.on_auth_expired(self.login_path)
            except Exception:
                logger.exception("on_auth_expired callback failed")
        return None
