"""Key-value record stores."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from loan_origination.exceptions import ConfigurationError, CorruptRecordError, StoreError

if TYPE_CHECKING:
    from loan_origination.config import StoreConfig

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String-valued store addressed by key."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryStore:
    """Process-local store backed by a dict."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """Store persisted as a single JSON object on disk.

    Every write rewrites the file through a temporary file and an atomic
    rename.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize JSON file store.

        Parameters
        ----------
        path : str | Path
            JSON file holding all keys. Created on first write.
        """
        self.path = Path(path)
        self._data = self._load()

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def delete(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def keys(self) -> list[str]:
        return list(self._data)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CorruptRecordError(f"Store file {self.path} is not valid JSON") from e
        except OSError as e:
            raise StoreError(f"Cannot read store file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise CorruptRecordError(f"Store file {self.path} must contain a JSON object")
        logger.debug("Loaded %d keys from %s", len(data), self.path)
        return data

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StoreError(f"Cannot write store file {self.path}: {e}") from e


def build_store(config: "StoreConfig") -> KeyValueStore:
    """Create the store selected by ``config.backend``."""
    if config.backend == "memory":
        return InMemoryStore()
    if config.backend == "json":
        return JsonFileStore(config.path)
    raise ConfigurationError(f"Unknown store backend: {config.backend}")
