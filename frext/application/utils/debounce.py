from __future__ import annotations

import asyncio
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class Debounced(Generic[T]):
    """Propagate a changing value only after it has been stable for ``delay`` seconds.

    Each ``set`` cancels the pending propagation and schedules a new one on
    the running event loop.
    """

    def __init__(self, value: T, delay: float, on_change: Callable[[T], None] | None = None) -> None:
        self._value = value
        self._delay = delay
        self._on_change = on_change
        self._pending: asyncio.TimerHandle | None = None

    @property
    def value(self) -> T:
        return self._value

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def set(self, value: T, delay: float | None = None) -> None:
        if delay is not None:
            self._delay = delay
        self.cancel()
        loop = asyncio.get_running_loop()
        self._pending = loop.call_later(self._delay, self._commit, value)

    def _commit(self, value: T) -> None:
        self._pending = None
        self._value = value
        if self._on_change is not None:
            self._on_change(value)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
