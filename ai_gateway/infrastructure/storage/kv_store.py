"""Namespaced key-value stores backing the durable queues.

The store only moves strings; callers own serialization and any size bound.
"""

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """get/set/remove scoped to a namespace."""

    namespace: str

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store, used in tests and when persistence is disabled."""

    def __init__(self, namespace: str = "default") -> None:
        self.namespace = namespace
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[self._key(key)] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(self._key(key), None)


class FileKeyValueStore:
    """One file per key under ``<base_dir>/<namespace>/``.

    Writes go through a temporary file and ``os.replace`` so a crash never
    leaves a half-written value behind.
    """

    def __init__(self, base_dir: str | Path, namespace: str = "default") -> None:
        self.namespace = namespace
        self._dir = Path(base_dir) / namespace
        self._dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in key)
        return self._dir / f"{safe}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        with self._lock:
            if not path.exists():
                return None
            return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        with self._lock:
            fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=f".{path.stem}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(value)
                os.replace(tmp, path)
            except OSError:
                Path(tmp).unlink(missing_ok=True)
                raise

    def remove(self, key: str) -> None:
        with self._lock:
            self._path(key).unlink(missing_ok=True)


def create_store(backend: str, base_dir: str | Path, namespace: str) -> KeyValueStore:
    """Build the store selected by settings."""
    if backend == "memory":
        logger.warning("Using in-memory store: queued audit entries will not survive a restart")
        return MemoryKeyValueStore(namespace)
    return FileKeyValueStore(base_dir, namespace)
