from __future__ import annotations

from typing import Awaitable, Callable, Generic, TypeVar

from frext.application.state.base import StateHolder, StateModel
from frext.core.logging import get_logger
from frext.domain.models import ApiResponse
from frext.observability.errors import message_for

T = TypeVar("T")

logger = get_logger(__name__)


class ApiState(StateModel, Generic[T]):
    data: T | None = None
    loading: bool = False
    error: str | None = None


class ApiCall(StateHolder[ApiState[T]], Generic[T]):
    """Generic {data, loading, error} wrapper around a single API call."""

    def __init__(self) -> None:
        super().__init__(ApiState())

    @property
    def data(self) -> T | None:
        return self.state.data

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> str | None:
        return self.state.error

    async def execute(self, call: Callable[[], Awaitable[ApiResponse[T]]]) -> T | None:
        self._update(loading=True, error=None)
        try:
            response = await call()
        except Exception as e:
            error = str(e) or message_for("API_CALL_FAILED")
            logger.warning("api_call_raised", extra={"error_type": type(e).__name__, "error": error})
            self._set_state(ApiState(error=error))
            return None

        if response.success and response.data is not None:
            self._set_state(ApiState(data=response.data))
            return response.data

        error = response.error or message_for("API_CALL_FAILED")
        logger.warning("api_call_failed", extra={"code": response.code, "error": error})
        self._set_state(ApiState(error=error))
        return None
