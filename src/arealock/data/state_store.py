"""Key-value persistence for progression state.

All progress lives in one flat namespace of string keys and string values.
Readers must treat a missing or malformed value as absent.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Dict, List

from .errors import StateStoreError

logger = logging.getLogger(__name__)


class StateStore:
    """Interface shared by the in-memory and file-backed stores."""

    def get(self, key: str) -> str | None:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def unset(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError

    def set_many(self, values: Dict[str, str]) -> None:
        for key, value in values.items():
            self.set(key, value)

    def unset_prefix(self, prefix: str) -> None:
        for key in self.keys():
            if key.startswith(prefix):
                self.unset(key)


class InMemoryStateStore(StateStore):
    """Store used by tests and throwaway sessions."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})
        self._lock = threading.RLock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def unset(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._values)

    def snapshot(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._values)


class JsonFileStateStore(StateStore):
    """Persists the namespace as one JSON object, rewritten atomically on change."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()
        self._values = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            if self._values.get(key) == value:
                return
            self._values[key] = value
            self._flush()

    def set_many(self, values: Dict[str, str]) -> None:
        with self._lock:
            self._values.update(values)
            self._flush()

    def unset(self, key: str) -> None:
        with self._lock:
            if self._values.pop(key, None) is not None:
                self._flush()

    def unset_prefix(self, prefix: str) -> None:
        with self._lock:
            doomed = [key for key in self._values if key.startswith(prefix)]
            for key in doomed:
                del self._values[key]
            if doomed:
                self._flush()

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._values)

    def _read(self) -> Dict[str, str]:
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable state file %s: %s", self._path, exc)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring state file %s: top level is not an object", self._path)
            return {}
        return {str(key): str(value) for key, value in raw.items() if isinstance(value, str)}

    def _flush(self) -> None:
        serialized = json.dumps(self._values, indent=2, sort_keys=True)
        temp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._path.parent,
                delete=False,
                suffix=".tmp",
            ) as temp_file:
                temp_file.write(serialized)
                temp_file.flush()
                os.fsync(temp_file.fileno())
                temp_path = Path(temp_file.name)
            os.replace(temp_path, self._path)
        except OSError as exc:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink()
            raise StateStoreError(f"Unable to write state file {self._path}: {exc}") from exc
