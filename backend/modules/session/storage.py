"""
Durable storage backends for the session store.

- InMemoryStorage: process-local dict, used by tests and the API server
- JsonFileStorage: a JSON document on disk, survives restarts (CLI)
- SupabaseStorage: a ``client_storage`` table, one row per client and key
"""

import json
import logging
from pathlib import Path
from typing import Optional

from supabase import Client

from shared.repository import BaseRepository

from .exceptions import StorageError

logger = logging.getLogger(__name__)


class InMemoryStorage:
    """Dict-backed storage."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    @property
    def items(self) -> dict[str, str]:
        return dict(self._items)

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """
    Storage persisted as a flat JSON object in a single file.

    The file is rewritten on every change; a missing file reads as empty.
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read session file {self._path}: {e}", backend="file")
        if not isinstance(data, dict):
            raise StorageError(f"Session file {self._path} is not a JSON object", backend="file")
        return data

    def _write(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot write session file {self._path}: {e}", backend="file")

    async def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    async def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    async def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class SupabaseStorage(BaseRepository[str]):
    """
    Storage rows in the Supabase ``client_storage`` table.

    Expected schema: ``client_id text, key text, value text``,
    unique on ``(client_id, key)``.
    """

    TABLE = "client_storage"

    def __init__(self, db: Client, client_id: str):
        super().__init__(db)
        self._client_id = client_id

    async def get_item(self, key: str) -> Optional[str]:
        result = (
            self._db.table(self.TABLE)
            .select("value")
            .eq("client_id", self._client_id)
            .eq("key", key)
            .execute()
        )
        if not result.data:
            return None
        return result.data[0]["value"]

    async def set_item(self, key: str, value: str) -> None:
        self._db.table(self.TABLE).upsert(
            {"client_id": self._client_id, "key": key, "value": value},
            on_conflict="client_id,key",
        ).execute()

    async def remove_item(self, key: str) -> None:
        (
            self._db.table(self.TABLE)
            .delete()
            .eq("client_id", self._client_id)
            .eq("key", key)
            .execute()
        )
