from __future__ import annotations

import asyncio
from datetime import datetime

from frext.core.logging import get_logger
from frext.infrastructure.clients.api_http import FrextApiClient

logger = get_logger(__name__)


class ApiConnectionMonitor:
    """Polls the backend health endpoint and exposes a connectivity flag.

    Checks once on ``start``, then every ``interval`` seconds and whenever
    ``on_focus`` is called. No backoff.
    """

    def __init__(self, client: FrextApiClient, *, interval: float = 30.0, timeout: float = 5.0) -> None:
        self._client = client
        self._interval = interval
        self._timeout = timeout
        self._is_connected = True
        self._last_checked = datetime.now()
        self._task: asyncio.Task[None] | None = None

    @property
    def is_connected(self) -> bool:
        return self._is_connected

    @property
    def last_checked(self) -> datetime:
        return self._last_checked

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def check_connection(self) -> bool:
        connected = await self._client.ping(timeout=self._timeout)
        if connected != self._is_connected:
            logger.info("api_connection_changed", extra={"connected": connected})
        self._is_connected = connected
        self._last_checked = datetime.now()
        return connected

    async def _poll(self) -> None:
        while True:
            await self.check_connection()
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._poll())

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def on_focus(self) -> bool:
        return await self.check_connection()

    async def __aenter__(self) -> "ApiConnectionMonitor":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
