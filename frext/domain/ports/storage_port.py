"""KeyValueStore protocol for client-side persistence."""

from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """String key/value storage in the manner of browser web storage.

    Implementations live in the infrastructure layer. Any method may raise
    ``StorageError`` when the backing medium is unavailable.
    """

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...
