"""Persistent key-value stores.

Single-key reads and writes are atomic. There are no multi-key transactions.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Iterable, Optional

from ..analyzer.errors import StorageError


class KeyValueStore:
    """Minimal storage interface used by settings and results."""

    def get(self, keys: Iterable[str]) -> dict:
        """Return the subset of ``keys`` that are present."""
        data = self.get_all()
        return {k: data[k] for k in keys if k in data}

    def get_all(self) -> dict:
        raise NotImplementedError

    def set(self, items: dict) -> None:
        raise NotImplementedError

    def remove(self, keys: Iterable[str]) -> None:
        raise NotImplementedError

    def keys(self, prefix: str = "") -> list[str]:
        return [k for k in self.get_all() if k.startswith(prefix)]


class MemoryStore(KeyValueStore):
    """In-process store."""

    def __init__(self, initial: Optional[dict] = None):
        self._data = dict(initial or {})
        self._lock = threading.Lock()

    def get_all(self) -> dict:
        with self._lock:
            return dict(self._data)

    def set(self, items: dict) -> None:
        with self._lock:
            self._data.update(items)

    def remove(self, keys: Iterable[str]) -> None:
        with self._lock:
            for key in keys:
                self._data.pop(key, None)


class JSONFileStore(KeyValueStore):
    """Store backed by one JSON document on disk."""

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise StorageError(f"Cannot read store {self.path}: {e}") from e
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Corrupt store {self.path}: top level is not an object")
        return data

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise StorageError(f"Cannot write store {self.path}: {e}") from e

    def get_all(self) -> dict:
        with self._lock:
            return self._read()

    def set(self, items: dict) -> None:
        with self._lock:
            data = self._read()
            data.update(items)
            self._write(data)

    def remove(self, keys: Iterable[str]) -> None:
        with self._lock:
            data = self._read()
            for key in keys:
                data.pop(key, None)
            self._write(data)
