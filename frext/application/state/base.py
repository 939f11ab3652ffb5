from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

S = TypeVar("S", bound=BaseModel)


class StateModel(BaseModel):
    """Immutable state snapshot handed to listeners."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class StateHolder(Generic[S]):
    """Holds one state snapshot and notifies listeners on every transition."""

    def __init__(self, initial: S) -> None:
        self._initial = initial
        self._state = initial
        self._listeners: list[Callable[[S], None]] = []

    @property
    def state(self) -> S:
        return self._state

    def subscribe(self, listener: Callable[[S], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: S) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _update(self, **changes: Any) -> None:
        self._set_state(self._state.model_copy(update=changes))

    def reset(self) -> None:
        self._set_state(self._initial)
