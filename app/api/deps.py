"""API Dependencies"""

from typing import Dict, Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.backends.base import RecordStore
from app.backends.factory import build_record_store
from app.backends.storage import MemoryStorage
from app.config import settings
from app.core.exceptions import NotAuthenticated, NotFound
from app.schemas.user import User
from app.services.auth_gateway import AuthGateway
from app.services.entity_service import EntityAccessor, build_accessors
from app.services.seed_data import seed_demo_data
from app.services.session_service import SessionManager
from app.services.theme_service import ThemeResolver

# Clients identify their local storage with this header (one browser profile each)
CLIENT_ID_HEADER = "X-Client-ID"
DEFAULT_CLIENT_ID = "default"

# Security scheme for bearer token
security = HTTPBearer(auto_error=False)


class ClientStorage:
    """Durable and session-scoped storage belonging to one client"""

    def __init__(self):
        self.durable = MemoryStorage()
        self.session = MemoryStorage()


class ServiceContainer:
    """Record store, accessors and per-client storage shared by all requests"""

    def __init__(self, store: RecordStore, gateway: Optional[AuthGateway] = None):
        self.store = store
        self.accessors: Dict[str, EntityAccessor] = build_accessors(store)
        self.gateway = gateway if gateway is not None else AuthGateway()
        self.clients: Dict[str, ClientStorage] = {}

    def client(self, client_id: str) -> ClientStorage:
        if client_id not in self.clients:
            self.clients[client_id] = ClientStorage()
        return self.clients[client_id]

    def session_manager(self, client_id: str) -> SessionManager:
        storage = self.client(client_id)
        return SessionManager(self.accessors, storage.durable, storage.session, self.gateway)

    async def close(self) -> None:
        await self.store.close()


async def create_container(store: Optional[RecordStore] = None,
                           gateway: Optional[AuthGateway] = None) -> ServiceContainer:
    """Build the container and seed demo data when enabled."""
    container = ServiceContainer(store or build_record_store(), gateway)
    if settings.SEED_DEMO_DATA:
        await seed_demo_data(container.store)
    return container


async def get_container(request: Request) -> ServiceContainer:
    """Container stored on app.state; built on first use when lifespan did not run."""
    container = getattr(request.app.state, "container", None)
    if container is None:
        container = await create_container()
        request.app.state.container = container
    return container


async def get_session_manager(
    container: ServiceContainer = Depends(get_container),
    client_id: Optional[str] = Header(default=None, alias=CLIENT_ID_HEADER),
) -> SessionManager:
    return container.session_manager(client_id or DEFAULT_CLIENT_ID)


async def get_theme_resolver(
    sessions: SessionManager = Depends(get_session_manager),
) -> ThemeResolver:
    return ThemeResolver(sessions)


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Session token from the Authorization header.

    Raises:
        NotAuthenticated: If no bearer token was sent
    """
    if credentials is None or not credentials.credentials:
        raise NotAuthenticated()
    return credentials.credentials


async def get_current_user(
    sessions: SessionManager = Depends(get_session_manager),
    token: str = Depends(get_bearer_token),
) -> User:
    """
    Get the session user for the presented token.

    Raises:
        NotAuthenticated: If the token does not belong to this client's session
    """
    return await sessions.me(token)


async def get_accessor(
    collection: str,
    container: ServiceContainer = Depends(get_container),
) -> EntityAccessor:
    accessor = container.accessors.get(collection)
    if accessor is None:
        raise NotFound(collection)
    return accessor
