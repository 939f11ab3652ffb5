from __future__ import annotations

import httpx

from frext.application.auth import AuthApi
from frext.application.utils.connection import ApiConnectionMonitor
from frext.core.config import Settings, get_settings
from frext.infrastructure.clients.api_http import ClientConfig, FrextApiClient
from frext.infrastructure.storage.local_disk_adapter import LocalDiskStore


def build_client_config(settings: Settings | None = None) -> ClientConfig:
    s = settings or get_settings()
    return ClientConfig(
        base_url=s.API_BASE_URL,
        api_prefix=s.API_PREFIX,
        timeout_seconds=s.REQUEST_TIMEOUT_SECONDS,
        verify_ssl=s.VERIFY_SSL,
    )


def build_client(
    settings: Settings | None = None,
    *,
    token: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FrextApiClient:
    return FrextApiClient(build_client_config(settings), token=token, transport=transport)


def build_local_store(settings: Settings | None = None) -> LocalDiskStore:
    s = settings or get_settings()
    return LocalDiskStore(base_dir=s.STORAGE_DIR)


def build_auth_api(client: FrextApiClient, settings: Settings | None = None) -> AuthApi:
    return AuthApi(client, build_local_store(settings))


def build_connection_monitor(client: FrextApiClient, settings: Settings | None = None) -> ApiConnectionMonitor:
    s = settings or get_settings()
    return ApiConnectionMonitor(
        client,
        interval=s.CONNECTION_POLL_SECONDS,
        timeout=s.HEALTH_TIMEOUT_SECONDS,
    )
