"""Remote document store backed by async SQLAlchemy (Postgres JSONB in production)."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.backends.base import RecordStore
from app.core.exceptions import BackendUnavailable
from app.models.document import Document

logger = logging.getLogger(__name__)


class DocumentRecordStore(RecordStore):
    """Record store persisting each record as a JSON document row"""

    name = "document"

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Session scope that converts driver and connection failures to BackendUnavailable"""
        try:
            async with self._session_factory() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        except (SQLAlchemyError, OSError) as e:
            logger.error("Document store operation failed", extra={"error": str(e)})
            raise BackendUnavailable(f"Document store unavailable: {e}") from e

    async def list_records(self, collection: str) -> List[dict]:
        async with self._session() as session:
            result = await session.execute(
                select(Document)
                .where(Document.collection == collection)
                .order_by(Document.created_at, Document.id)
            )
            return [dict(doc.data) for doc in result.scalars().all()]

    async def get_record(self, collection: str, record_id: str) -> Optional[dict]:
        async with self._session() as session:
            doc = await session.get(Document, (collection, record_id))
            return dict(doc.data) if doc else None

    async def put_record(self, collection: str, record: dict) -> dict:
        async with self._session() as session:
            doc = await session.get(Document, (collection, record["id"]))
            if doc is None:
                session.add(Document(collection=collection, id=record["id"], data=dict(record)))
            else:
                # Assign a new object so the JSON column registers the change
                doc.data = dict(record)
        return record

    async def delete_record(self, collection: str, record_id: str) -> bool:
        async with self._session() as session:
            result = await session.execute(
                delete(Document).where(
                    Document.collection == collection,
                    Document.id == record_id,
                )
            )
            return result.rowcount > 0

    async def replace_collection(self, collection: str, records: List[dict]) -> None:
        async with self._session() as session:
            await session.execute(delete(Document).where(Document.collection == collection))
            for record in records:
                session.add(Document(collection=collection, id=record["id"], data=dict(record)))
