"""
JSON File Storage Implementation

DESIGN DECISION: The default local backend is a single JSON object on
disk because:
1. No database setup required
2. The user can open the file and read their data
3. It survives restarts, which is all the session cache needs

TRADEOFFS:
- Every write rewrites the whole file (fine for one person's ledger)
- Only one process should write the file at a time
"""

import json
import os
from pathlib import Path
from typing import Optional

from gofinances.services.storage.interface import (
    KeyValueStoreInterface,
    PersistenceError,
)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store persisted as one JSON object in a file.

    Writes go to a temporary sibling file which then replaces the
    original, so a crash mid-write never leaves a truncated store.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read store file {self._path}: {e}")

        if not isinstance(data, dict):
            raise PersistenceError(
                f"Store file {self._path} does not contain a JSON object"
            )
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise PersistenceError(f"Failed to write store file {self._path}: {e}")

    async def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    async def set(self, key: str, value: str) -> bool:
        data = self._read_all()
        data[key] = value
        self._write_all(data)
        return True

    async def remove(self, key: str) -> bool:
        data = self._read_all()
        if key not in data:
            return False
        del data[key]
        self._write_all(data)
        return True
