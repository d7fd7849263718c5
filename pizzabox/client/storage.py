"""
Durable Local Storage

String key/value storage for the client toolkit, the desktop counterpart of
browser `localStorage`. Entries live in one JSON file; every read-modify-write
cycle runs under a file lock so several processes can share the file.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from filelock import FileLock, Timeout

from pizzabox.core.config import get_settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a storage entry cannot be written."""


class LocalStorage:
    """File-backed, process-safe key/value storage."""

    def __init__(
        self,
        path: Union[str, Path, None] = None,
        lock_timeout: Optional[int] = None,
    ):
        settings = get_settings()
        self.path = Path(path) if path is not None else settings.storage_path
        self.lock_timeout = (
            lock_timeout if lock_timeout is not None else settings.storage_lock_timeout
        )
        self._lock = FileLock(str(self.path) + ".lock", timeout=self.lock_timeout)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _ensure_dir(self) -> None:
        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created storage directory: {self.path.parent}")

    def _read(self) -> dict[str, str]:
        """Load all entries. A missing or unreadable file reads as empty."""
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning(f"Error reading {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed storage file {self.path}")
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False, indent=2)
        tmp_path.replace(self.path)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None."""
        if not self.path.exists():
            return None
        try:
            with self._lock:
                return self._read().get(key)
        except Timeout:
            logger.warning(f"Timed out reading '{key}' from {self.path}")
            return None

    def set_item(self, key: str, value: str) -> None:
        """
        Store value under key.

        Raises:
            StorageError: If the file cannot be locked or written
        """
        try:
            self._ensure_dir()
            with self._lock:
                data = self._read()
                data[key] = value
                self._write(data)
        except Timeout as e:
            raise StorageError(f"Timed out locking {self.path}") from e
        except OSError as e:
            raise StorageError(f"Could not write '{key}' to {self.path}: {e}") from e

    def remove_item(self, key: str) -> None:
        """
        Delete key if present.

        Raises:
            StorageError: If the file cannot be locked or written
        """
        if not self.path.exists():
            return
        try:
            with self._lock:
                data = self._read()
                if data.pop(key, None) is not None:
                    self._write(data)
        except Timeout as e:
            raise StorageError(f"Timed out locking {self.path}") from e
        except OSError as e:
            raise StorageError(f"Could not remove '{key}' from {self.path}: {e}") from e

    def keys(self) -> list[str]:
        """All stored keys."""
        if not self.path.exists():
            return []
        try:
            with self._lock:
                return list(self._read().keys())
        except Timeout:
            logger.warning(f"Timed out listing keys of {self.path}")
            return []

    def clear(self) -> None:
        """Remove every entry."""
        if not self.path.exists():
            return
        try:
            with self._lock:
                self._write({})
        except Timeout as e:
            raise StorageError(f"Timed out locking {self.path}") from e
        except OSError as e:
            raise StorageError(f"Could not clear {self.path}: {e}") from e
