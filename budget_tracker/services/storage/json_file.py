"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON object file is used as the local store because:
1. No database setup required
2. Users can open and back up their data with any editor
3. It mirrors the browser local-storage model: string keys, string values

TRADEOFFS:
- The whole file is rewritten on every write (fine for personal use)
- No locking; one process owns the file

Writes go to a temporary file first and are moved into place, so a
crash mid-write never leaves a half-written store behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from budget_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store backed by one JSON object on disk.

    A missing file reads as an empty store. A corrupt file (not JSON,
    or not an object of strings) also reads as empty and is replaced
    on the next write.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("kv_store_unreadable", path=str(self._path), error=str(e))
            return {}

        if not isinstance(data, dict):
            logger.warning("kv_store_not_an_object", path=str(self._path))
            return {}

        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
