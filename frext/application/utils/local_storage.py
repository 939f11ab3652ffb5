from __future__ import annotations

import json
from typing import Callable, Generic, TypeVar, Union

from frext.core.logging import get_logger
from frext.domain.constants import LOCAL_STORAGE_PREFIX
from frext.domain.errors import StorageError
from frext.domain.ports.storage_port import KeyValueStore

T = TypeVar("T")

logger = get_logger(__name__)

_UNSET = object()


class LocalStorageValue(Generic[T]):
    """A JSON value mirrored to persistent storage under ``frext_<key>``.

    Read lazily on first access, written on every ``set``. Storage and JSON
    failures are logged and never raised; reads fall back to the default.
    """

    def __init__(self, store: KeyValueStore, key: str, initial: T) -> None:
        self._store = store
        self._key = key
        self._initial = initial
        self._value: object = _UNSET

    @property
    def storage_key(self) -> str:
        return f"{LOCAL_STORAGE_PREFIX}{self._key}"

    def _load(self) -> T:
        try:
            raw = self._store.get_item(self.storage_key)
            return json.loads(raw) if raw else self._initial
        except (StorageError, ValueError) as e:
            logger.error("local_storage_read_failed", extra={"key": self.storage_key, "error": str(e)})
            return self._initial

    @property
    def value(self) -> T:
        if self._value is _UNSET:
            self._value = self._load()
        return self._value  # type: ignore[return-value]

    def set(self, value: Union[T, Callable[[T], T]]) -> None:
        try:
            to_store = value(self.value) if callable(value) else value
            self._value = to_store
            self._store.set_item(self.storage_key, json.dumps(to_store, ensure_ascii=False))
        except (StorageError, TypeError, ValueError) as e:
            logger.error("local_storage_write_failed", extra={"key": self.storage_key, "error": str(e)})

    def remove(self) -> None:
        try:
            self._value = self._initial
            self._store.remove_item(self.storage_key)
        except StorageError as e:
            logger.error("local_storage_remove_failed", extra={"key": self.storage_key, "error": str(e)})
