"""Ephemeral key-value record store.

Each collection is stored as one JSON array under ``app_<collection>`` in a
``StoragePort``.
"""

import logging
from typing import List, Optional

from app.backends.base import RecordStore
from app.backends.storage import MemoryStorage, StoragePort

logger = logging.getLogger(__name__)

KEY_PREFIX = "app_"


class KeyValueRecordStore(RecordStore):
    """Record store backed by a key-value storage port"""

    name = "key_value"

    def __init__(self, storage: Optional[StoragePort] = None):
        self.storage = storage if storage is not None else MemoryStorage()

    @staticmethod
    def storage_key(collection: str) -> str:
        return f"{KEY_PREFIX}{collection}"

    def _load(self, collection: str) -> List[dict]:
        data = self.storage.read(self.storage_key(collection), [])
        if not isinstance(data, list):
            logger.error("Corrupt collection payload, treating as empty",
                         extra={"collection": collection})
            return []
        return data

    def _save(self, collection: str, records: List[dict]) -> None:
        self.storage.write(self.storage_key(collection), records)

    async def list_records(self, collection: str) -> List[dict]:
        return self._load(collection)

    async def get_record(self, collection: str, record_id: str) -> Optional[dict]:
        for record in self._load(collection):
            if record.get("id") == record_id:
                return record
        return None

    async def put_record(self, collection: str, record: dict) -> dict:
        records = self._load(collection)
        for index, existing in enumerate(records):
            if existing.get("id") == record["id"]:
                records[index] = record
                break
        else:
            records.append(record)
        self._save(collection, records)
        return record

    async def delete_record(self, collection: str, record_id: str) -> bool:
        records = self._load(collection)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            return False
        self._save(collection, remaining)
        return True

    async def replace_collection(self, collection: str, records: List[dict]) -> None:
        self._save(collection, list(records))
