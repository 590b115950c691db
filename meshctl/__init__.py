"""meshctl — async client for the hub-and-spoke mesh control plane."""

from meshctl.auth import AuthInterceptor
from meshctl.client import MeshClient
from meshctl.credentials import CredentialStore, FileCredentialStore, MemoryCredentialStore
from meshctl.errors import (
    ApiStatusError,
    ApplicationError,
    AuthenticationError,
    DecodeError,
    MeshApiError,
    RequestTimeoutError,
    TransportError,
)
from meshctl.transport import Interceptor, Transport

__all__ = [
    "MeshClient",
    "Transport",
    "Interceptor",
    "AuthInterceptor",
    "CredentialStore",
    "MemoryCredentialStore",
    "FileCredentialStore",
    "MeshApiError",
    "TransportError",
    "RequestTimeoutError",
    "ApiStatusError",
    "AuthenticationError",
    "DecodeError",
    "ApplicationError",
]
