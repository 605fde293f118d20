"""Shared pytest fixtures for unit and integration tests."""

import os

from dotenv import load_dotenv

# Load .env first, then pin the settings the tests depend on
load_dotenv()
os.environ["AUTH_API_URL"] = ""
os.environ["STORAGE_BACKEND"] = "key_value"
os.environ["SEED_DEMO_DATA"] = "true"
os.environ["UNIQUENESS_FAIL_OPEN"] = "true"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.main import app
from app.config import settings
from app.api.deps import create_container
from app.backends.document import DocumentRecordStore
from app.backends.key_value import KeyValueRecordStore
from app.backends.storage import MemoryStorage
from app.database import build_session_factory, init_db
from app.services.auth_gateway import AuthGateway
from app.services.entity_service import build_accessors
from app.services.session_service import SessionManager
from app.services.theme_service import ThemeResolver


@pytest.fixture
def api_base() -> str:
    """Base URL for API requests."""
    return f"http://test{settings.API_V1_PREFIX}"


@pytest.fixture
def store() -> KeyValueRecordStore:
    """Empty key-value record store."""
    return KeyValueRecordStore()


@pytest.fixture
def accessors(store):
    return build_accessors(store)


@pytest.fixture
def offline_gateway() -> AuthGateway:
    """Primary auth backend that is not configured, so every call fails over."""
    return AuthGateway(base_url="")


@pytest.fixture
def durable() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def session_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def sessions(accessors, durable, session_storage, offline_gateway) -> SessionManager:
    return SessionManager(accessors, durable, session_storage, offline_gateway)


@pytest.fixture
def themes(sessions) -> ThemeResolver:
    """Theme resolver pinned to noon (automatic theme = light)."""
    return ThemeResolver(sessions, hour_provider=lambda: 12)


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with the document table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def document_store(db_engine) -> DocumentRecordStore:
    return DocumentRecordStore(build_session_factory(db_engine))


@pytest.fixture
async def async_client(api_base: str, offline_gateway: AuthGateway):
    """Async HTTP client against a fresh, seeded key-value container."""
    app.state.container = await create_container(KeyValueRecordStore(), offline_gateway)
    transport = ASGITransport(app=app)
    client = AsyncClient(transport=transport, base_url=api_base, timeout=30.0)
    yield client
    await client.aclose()
    del app.state.container


async def login_headers(client: AsyncClient, api_base: str, email: str,
                        password: str = "123456", client_id: str = "default") -> dict:
    """Log in through the API and return auth + client headers."""
    resp = await client.post(
        f"{api_base}/auth/login",
        json={"email": email, "password": password},
        headers={"X-Client-ID": client_id},
    )
    assert resp.status_code == 200, resp.text
    token = resp.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}", "X-Client-ID": client_id}


@pytest.fixture
async def admin_headers(async_client: AsyncClient, api_base: str) -> dict:
    return await login_headers(async_client, api_base, "admin@ono.ac.il")
