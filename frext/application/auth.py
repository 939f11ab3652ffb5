"""Auth sub-client.

Two observable states: authenticated (token on the client and persisted in
the store) and unauthenticated.
"""

from __future__ import annotations

from frext.core.logging import get_logger
from frext.domain.constants import AUTH_TOKEN_KEY
from frext.domain.errors import StorageError
from frext.domain.models import ApiResponse, AuthSession, VerifiedUser
from frext.domain.ports.storage_port import KeyValueStore
from frext.infrastructure.clients.api_http import FrextApiClient

logger = get_logger(__name__)


class AuthApi:
    def __init__(self, client: FrextApiClient, store: KeyValueStore) -> None:
        self._client = client
        self._store = store

    @property
    def client(self) -> FrextApiClient:
        return self._client

    @property
    def is_authenticated(self) -> bool:
        return self._client.auth_token is not None

    def _persist_token(self, token: str) -> None:
        self._client.set_auth_token(token)
        try:
            self._store.set_item(AUTH_TOKEN_KEY, token)
        except StorageError as e:
            logger.error("auth_token_persist_failed", extra={"error": str(e)})

    def _forget_token(self) -> None:
        self._client.clear_auth_token()
        try:
            self._store.remove_item(AUTH_TOKEN_KEY)
        except StorageError as e:
            logger.error("auth_token_clear_failed", extra={"error": str(e)})

    def _accept_session(self, response: ApiResponse[AuthSession]) -> None:
        if response.success and response.data is not None and response.data.token:
            self._persist_token(response.data.token)
            logger.info("auth_authenticated", extra={"user_id": response.data.user.id})

    async def login(self, email: str, password: str) -> ApiResponse[AuthSession]:
        response = await self._client.post(
            "/auth/login",
            {"email": email, "password": password},
            response_type=AuthSession,
        )
        self._accept_session(response)
        return response

    async def signup(self, email: str, password: str, name: str) -> ApiResponse[AuthSession]:
        response = await self._client.post(
            "/auth/signup",
            {"email": email, "password": password, "name": name},
            response_type=AuthSession,
        )
        self._accept_session(response)
        return response

    async def logout(self) -> ApiResponse[None]:
        try:
            response = await self._client.post("/auth/logout")
        finally:
            # cleared whatever the server answered
            self._forget_token()
        logger.info("auth_logged_out", extra={"server_success": response.success})
        return response

    async def verify_token(self, token: str) -> ApiResponse[VerifiedUser]:
        self._client.set_auth_token(token)
        return await self._client.get("/auth/verify", response_type=VerifiedUser)

    async def auto_login(self) -> bool:
        """Restore the authenticated state from the persisted token."""
        try:
            saved = self._store.get_item(AUTH_TOKEN_KEY)
        except StorageError as e:
            logger.error("auth_token_read_failed", extra={"error": str(e)})
            self._forget_token()
            return False
        if not saved:
            return False

        response = await self.verify_token(saved)
        if not response.success:
            logger.info("auth_auto_login_rejected", extra={"code": response.code})
            self._forget_token()
            return False
        return True
