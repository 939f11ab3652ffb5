from __future__ import annotations

from frext.application import operations
from frext.application.state.base import StateHolder, StateModel
from frext.core.logging import get_logger
from frext.domain.models import Template, User
from frext.infrastructure.clients.api_http import FrextApiClient
from frext.observability.errors import message_for

logger = get_logger(__name__)


class TemplatesState(StateModel):
    templates: list[Template] = []
    loading: bool = False
    error: str | None = None


class TemplatesResource(StateHolder[TemplatesState]):
    """Template list; ``mount`` performs the initial fetch."""

    def __init__(self, client: FrextApiClient) -> None:
        super().__init__(TemplatesState())
        self._client = client

    async def fetch_templates(self) -> list[Template] | None:
        self._update(loading=True, error=None)
        response = await operations.get_templates(self._client)
        if response.success and response.data is not None:
            self._update(templates=list(response.data), loading=False)
            return self.state.templates
        error = response.error or message_for("TEMPLATES_FAILED")
        logger.warning("templates_fetch_failed", extra={"code": response.code, "error": error})
        self._update(error=error, loading=False)
        return None

    refetch = fetch_templates

    async def mount(self) -> list[Template] | None:
        return await self.fetch_templates()


class UserProfileState(StateModel):
    user: User | None = None
    loading: bool = False
    error: str | None = None


class UserProfileResource(StateHolder[UserProfileState]):
    def __init__(self, client: FrextApiClient) -> None:
        super().__init__(UserProfileState())
        self._client = client

    async def fetch_profile(self) -> User | None:
        self._update(loading=True, error=None)
        response = await operations.get_user_profile(self._client)
        if response.success and response.data is not None:
            self._update(user=response.data, loading=False)
            return response.data
        error = response.error or message_for("PROFILE_FAILED")
        logger.warning("profile_fetch_failed", extra={"code": response.code, "error": error})
        self._update(error=error, loading=False)
        return None

    refetch = fetch_profile
