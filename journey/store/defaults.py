"""
journey.store.defaults — Small persisted key-value store.

A YAML mapping of string keys to string values, used for settings-like
records such as the user profile.  Reads tolerate a missing or broken
file by returning nothing; writes lock the file for the whole
read-modify-write cycle.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from journey.core.filelock import FileLock

log = logging.getLogger(__name__)


class KeyValueStore:
    """File-backed string key → string value mapping."""

    def __init__(self, path: Path, lock_timeout: float = 5.0) -> None:
        self.path = Path(path)
        self.lock_timeout = lock_timeout
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._read().get(key)
        if value is None:
            return default
        return str(value)

    def set(self, key: str, value: str) -> None:
        with FileLock(self.path, timeout=self.lock_timeout):
            data = self._read()
            data[key] = value
            self._write(data)

    def remove(self, key: str) -> bool:
        with FileLock(self.path, timeout=self.lock_timeout):
            data = self._read()
            if key not in data:
                return False
            del data[key]
            self._write(data)
        return True

    def keys(self) -> List[str]:
        return sorted(self._read())

    # -- internals ----------------------------------------------------------

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except (yaml.YAMLError, OSError, UnicodeDecodeError) as exc:
            log.warning("Could not read %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring non-mapping content in %s", self.path)
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as fh:
                yaml.safe_dump(data, fh, default_flow_style=False, allow_unicode=True)
        except OSError:
            log.error("Could not write %s", self.path, exc_info=True)
