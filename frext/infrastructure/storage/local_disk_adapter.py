"""Local disk key/value store implementing KeyValueStore."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from frext.domain.errors import StorageError
from frext.domain.ports.storage_port import KeyValueStore


class LocalDiskStore(KeyValueStore):
    """Persistent store backed by a single JSON object on disk.

    Layout: <base_dir>/storage.json -> {"<key>": "<string value>", ...}
    Every write rewrites the file through a temp file + rename.
    """

    def __init__(self, base_dir: Path, filename: str = "storage.json") -> None:
        self._base_dir = Path(base_dir)
        self._path = self._base_dir / filename

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Failed to read {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self._path} does not hold an object")
        return {str(k): str(v) for k, v in data.items()}

    def _write_all(self, items: dict[str, str]) -> None:
        tmp_name: str | None = None
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._base_dir, prefix=".storage-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write {self._path}: {exc}") from exc

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)
