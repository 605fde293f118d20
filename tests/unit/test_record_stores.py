"""Unit tests for the record store backends and backend selection."""

import pytest
from unittest.mock import AsyncMock
from sqlalchemy.ext.asyncio import create_async_engine

from app.backends.document import DocumentRecordStore
from app.backends.factory import build_record_store
from app.backends.fallback import FallbackRecordStore
from app.backends.key_value import KeyValueRecordStore
from app.backends.storage import MemoryStorage
from app.core.exceptions import BackendUnavailable
from app.database import build_session_factory
from app.services.entity_service import EntityAccessor
from app.services.seed_data import COURSES, seed_demo_data


def test_memory_storage_isolates_values():
    storage = MemoryStorage()
    value = {"roles": ["student"]}
    storage.write("mock_user", value)
    value["roles"].append("admin")

    assert storage.read("mock_user") == {"roles": ["student"]}
    assert storage.read("missing", "fallback") == "fallback"
    storage.remove("mock_user")
    assert "mock_user" not in storage


def test_memory_storage_keys_and_clear():
    storage = MemoryStorage({"theme": "dark", "auth_token": "t"})

    assert sorted(storage.keys()) == ["auth_token", "theme"]
    storage.clear()
    assert list(storage.keys()) == []


@pytest.mark.asyncio
async def test_key_value_store_layout():
    storage = MemoryStorage()
    store = KeyValueRecordStore(storage)

    await store.put_record("courses", {"id": "c1", "course_code": "CS101"})
    await store.put_record("courses", {"id": "c1", "course_code": "CS102"})

    assert storage.read("app_courses") == [{"id": "c1", "course_code": "CS102"}]
    assert await store.delete_record("courses", "c1") is True
    assert await store.delete_record("courses", "c1") is False


@pytest.mark.asyncio
async def test_key_value_store_tolerates_corrupt_payload():
    storage = MemoryStorage({"app_students": {"not": "a list"}})
    store = KeyValueRecordStore(storage)

    assert await store.list_records("students") == []


@pytest.mark.asyncio
async def test_document_store_crud(document_store):
    await document_store.put_record("students", {"id": "s1", "full_name": "אבי"})
    await document_store.put_record("students", {"id": "s2", "full_name": "בני"})
    await document_store.put_record("lecturers", {"id": "s1", "full_name": "מרצה"})

    assert await document_store.get_record("students", "s1") == {"id": "s1", "full_name": "אבי"}
    assert [r["id"] for r in await document_store.list_records("students")] == ["s1", "s2"]

    await document_store.put_record("students", {"id": "s1", "full_name": "אבי כהן"})
    assert (await document_store.get_record("students", "s1"))["full_name"] == "אבי כהן"

    assert await document_store.delete_record("students", "s1") is True
    assert await document_store.delete_record("students", "s1") is False
    assert await document_store.get_record("students", "s1") is None
    assert await document_store.get_record("lecturers", "s1") is not None


@pytest.mark.asyncio
async def test_document_store_replace_collection(document_store):
    await document_store.put_record("courses", {"id": "old"})
    await document_store.replace_collection("courses", [{"id": "c1"}, {"id": "c2"}])

    assert sorted(r["id"] for r in await document_store.list_records("courses")) == ["c1", "c2"]


@pytest.mark.asyncio
async def test_document_store_without_table_is_unavailable():
    engine = create_async_engine("sqlite+aiosqlite://")
    store = DocumentRecordStore(build_session_factory(engine))
    try:
        with pytest.raises(BackendUnavailable):
            await store.list_records("students")
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_accessor_behaves_the_same_on_document_store(document_store):
    files = EntityAccessor("files", document_store)

    created = await files.create({"title": "סיכום"})

    assert await files.get(created["id"]) == created
    assert await files.delete(created["id"]) == {"success": True}
    assert await files.delete(created["id"]) == {"success": False}


@pytest.mark.asyncio
async def test_fallback_store_uses_fallback_when_primary_down():
    primary = AsyncMock(spec=DocumentRecordStore)
    primary.name = "document"
    primary.list_records.side_effect = BackendUnavailable("db down")
    primary.put_record.side_effect = BackendUnavailable("db down")
    fallback = KeyValueRecordStore()
    store = FallbackRecordStore(primary, fallback)

    await store.put_record("courses", {"id": "c1"})

    assert await store.list_records("courses") == [{"id": "c1"}]
    assert await fallback.get_record("courses", "c1") == {"id": "c1"}


@pytest.mark.asyncio
async def test_fallback_store_prefers_primary(document_store):
    fallback = KeyValueRecordStore()
    store = FallbackRecordStore(document_store, fallback)

    await store.put_record("courses", {"id": "c1"})

    assert await document_store.get_record("courses", "c1") == {"id": "c1"}
    assert await fallback.list_records("courses") == []


def test_build_record_store_by_name():
    assert isinstance(build_record_store("key_value"), KeyValueRecordStore)
    with pytest.raises(ValueError):
        build_record_store("s3")


@pytest.mark.asyncio
async def test_seed_only_fills_empty_collections(store):
    await store.put_record("students", {"id": "mine"})

    seeded = await seed_demo_data(store)

    assert "students" not in seeded
    assert "courses" in seeded
    assert len(await store.list_records("courses")) == len(COURSES)
    assert await store.list_records("students") == [{"id": "mine"}]
    assert await seed_demo_data(store) == []
