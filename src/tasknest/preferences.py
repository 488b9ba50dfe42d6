"""Persisted UI preferences: opaque string key/value pairs in YAML."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from loguru import logger

from .constants import PREFERENCES_FILENAME, PREFERENCES_LOCK_FILENAME
from .io_utils import FileLock, _atomic_write_yaml, _load_yaml_with_error

LAST_VIEW_KEY = "last_view"
THEME_KEY = "theme"


class Preferences:
    """Round-trips string values; no schema beyond that."""

    def __init__(self, state_dir: Path) -> None:
        self._path = state_dir / PREFERENCES_FILENAME
        self._lock = FileLock(state_dir / PREFERENCES_LOCK_FILENAME)
        self._thread_lock = threading.RLock()

    def _load(self) -> dict[str, str]:
        data, err = _load_yaml_with_error(self._path, {})
        if err:
            logger.warning("Ignoring unreadable preferences file: {}", err)
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def load(self) -> dict[str, str]:
        with self._thread_lock:
            with self._lock:
                return self._load()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.load().get(key, default)

    def set(self, key: str, value: Optional[str]) -> None:
        """Store *value* under *key*; ``None`` removes the key."""
        with self._thread_lock:
            with self._lock:
                data = self._load()
                if value is None:
                    data.pop(key, None)
                else:
                    data[key] = str(value)
                _atomic_write_yaml(self._path, data)
