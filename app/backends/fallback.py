"""Try-primary-then-fallback backend selection.

Every operation goes to the primary store first; when it raises
``BackendUnavailable`` the same operation is served by the fallback store.
Callers never see which backend answered.
"""

import logging
from typing import Awaitable, Callable, List, Optional, TypeVar

from app.backends.base import RecordStore
from app.core.exceptions import BackendUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FallbackRecordStore(RecordStore):
    """Record store that fails over from a primary to a fallback store"""

    name = "fallback"

    def __init__(self, primary: RecordStore, fallback: RecordStore):
        self.primary = primary
        self.fallback = fallback

    async def _call(self, operation: str, collection: str,
                    fn: Callable[[RecordStore], Awaitable[T]]) -> T:
        try:
            return await fn(self.primary)
        except BackendUnavailable as e:
            logger.warning(
                "Primary store unavailable, using fallback",
                extra={
                    "operation": operation,
                    "collection": collection,
                    "primary": self.primary.name,
                    "fallback": self.fallback.name,
                    "error": str(e),
                },
            )
            return await fn(self.fallback)

    async def list_records(self, collection: str) -> List[dict]:
        return await self._call("list", collection, lambda s: s.list_records(collection))

    async def get_record(self, collection: str, record_id: str) -> Optional[dict]:
        return await self._call("get", collection, lambda s: s.get_record(collection, record_id))

    async def put_record(self, collection: str, record: dict) -> dict:
        return await self._call("put", collection, lambda s: s.put_record(collection, record))

    async def delete_record(self, collection: str, record_id: str) -> bool:
        return await self._call("delete", collection, lambda s: s.delete_record(collection, record_id))

    async def replace_collection(self, collection: str, records: List[dict]) -> None:
        await self._call("replace", collection, lambda s: s.replace_collection(collection, records))

    async def close(self) -> None:
        await self.primary.close()
        await self.fallback.close()
