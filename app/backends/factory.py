"""Record store selection from settings.STORAGE_BACKEND"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from app.backends.base import RecordStore
from app.backends.document import DocumentRecordStore
from app.backends.fallback import FallbackRecordStore
from app.backends.key_value import KeyValueRecordStore
from app.backends.storage import StoragePort
from app.config import settings
from app.database import get_session_factory

logger = logging.getLogger(__name__)


def build_record_store(
    backend: Optional[str] = None,
    session_factory: Optional[async_sessionmaker] = None,
    storage: Optional[StoragePort] = None,
) -> RecordStore:
    """
    Build the configured record store.

    Args:
        backend: ``key_value``, ``document`` or ``document_with_fallback``; defaults to settings
        session_factory: Document-store sessions; defaults to the process-wide factory
        storage: Storage port for the key-value store

    Returns:
        RecordStore instance
    """
    backend = backend or settings.STORAGE_BACKEND

    if backend == "key_value":
        store: RecordStore = KeyValueRecordStore(storage)
    elif backend == "document":
        store = DocumentRecordStore(session_factory or get_session_factory())
    elif backend == "document_with_fallback":
        store = FallbackRecordStore(
            DocumentRecordStore(session_factory or get_session_factory()),
            KeyValueRecordStore(storage),
        )
    else:
        raise ValueError(f"Unknown storage backend: {backend}")

    logger.info("Record store selected", extra={"backend": backend})
    return store
