"""Record-store contract shared by every persistence backend.

Records are plain JSON-compatible dicts keyed by a string ``id`` inside a
named collection. Implementations raise ``BackendUnavailable`` when the
underlying store cannot be reached; a missing record is never an error
here (``get`` returns None, ``delete`` returns False).
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class RecordStore(ABC):
    """Collection-oriented CRUD over JSON records"""

    name = "abstract"

    @abstractmethod
    async def list_records(self, collection: str) -> List[dict]:
        """All records in the collection, in storage order"""

    @abstractmethod
    async def get_record(self, collection: str, record_id: str) -> Optional[dict]:
        """Record by id, or None"""

    @abstractmethod
    async def put_record(self, collection: str, record: dict) -> dict:
        """Insert or replace the record with ``record["id"]``; returns what was stored"""

    @abstractmethod
    async def delete_record(self, collection: str, record_id: str) -> bool:
        """Remove a record; False when it did not exist"""

    async def replace_collection(self, collection: str, records: List[dict]) -> None:
        """Overwrite a whole collection (used for seeding)"""
        for existing in await self.list_records(collection):
            await self.delete_record(collection, existing["id"])
        for record in records:
            await self.put_record(collection, record)

    async def close(self) -> None:
        """Release backend resources"""
