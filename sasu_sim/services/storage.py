"""Durable key-value storage backends.

The store only needs string values under string keys, like browser local
storage. Two backends are provided: an in-memory one for tests and
throwaway sessions, and a JSON file holding a single ``{key: value}`` object.
"""

from __future__ import annotations

import contextlib
import json
import os
from pathlib import Path
from typing import Protocol

from sasu_sim.core.exceptions import ConfigurationError, StorageError
from sasu_sim.core.logging import get_logger
from sasu_sim.core.settings import AppSettings, get_settings

log = get_logger(__name__)


class KeyValueStorage(Protocol):
    """Minimal string key-value storage interface."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage backed by a dict."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._items


class JSONFileStorage:
    """Storage persisted as one JSON object in a file.

    Writes go through a temporary file and ``os.replace`` so a crash never
    leaves a half-written file; a failed write removes the temporary file. A
    corrupt file reads as empty.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            log.warning("storage_file_corrupt", path=str(self.path), error=str(e))
            return {}
        except OSError as e:
            raise StorageError(str(self.path), f"read failed: {e}") from e

        if not isinstance(payload, dict):
            log.warning("storage_file_wrong_shape", path=str(self.path), type=type(payload).__name__)
            return {}
        return {k: v for k, v in payload.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str], key: str) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise StorageError(key, f"write to {self.path} failed: {e}") from e

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items, key)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if items.pop(key, None) is not None:
            self._write_all(items, key)


def create_storage(settings: AppSettings | None = None) -> KeyValueStorage:
    """Build the storage backend selected in the settings.

    Raises:
        ConfigurationError: Unknown backend name.
    """
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return MemoryStorage()
    if settings.storage_backend == "file":
        log.debug("file_storage_selected", path=str(settings.storage_path))
        return JSONFileStorage(settings.storage_path)
    raise ConfigurationError(f"Unknown storage backend: {settings.storage_backend!r}")
