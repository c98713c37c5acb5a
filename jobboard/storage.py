"""Durable client-side key-value storage (JSON file with file locking)."""
from __future__ import annotations

import fcntl
import json
import os
from pathlib import Path

from jobboard.log import get_logger

log = get_logger(__name__)


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class MemoryStorage:
    """In-process store with the same interface as FileStorage."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set_many(self, values: dict[str, str]) -> None:
        self._data.update(values)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def items(self) -> dict[str, str]:
        return dict(self._data)


class FileStorage:
    """String values in one JSON object on disk.

    Every write replaces the whole file, so keys written together are
    cleared together. An unreadable file reads as empty.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                _lock(f, exclusive=False)
                text = f.read()
                _unlock(f)
        except OSError as exc:
            log.warning("Could not read %s: %s", self.path.name, exc)
            return {}
        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError:
            log.warning("Storage file %s is corrupt, treating as empty", self.path.name)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            _lock(f)
            json.dump(data, f)
            f.flush()
            _unlock(f)
        os.replace(tmp, self.path)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set_many(self, values: dict[str, str]) -> None:
        data = self._read()
        data.update(values)
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
        log.debug("Cleared %s", self.path.name)

    def items(self) -> dict[str, str]:
        return self._read()
