"""Theme Service - three-layer theme resolution.

Layers, highest first:

1. session theme (session-scoped storage, cleared on logout)
2. permanent preference (``theme_preference`` on the user record, else the
   durable ``theme`` value)
3. automatic default by local hour (light during the day, dark at night)

Nothing is cached; every ``resolve()`` reads the layers again.
"""

import logging
from typing import Callable, Optional

from app.config import settings
from app.models.enums import Theme
from app.schemas.user import ThemeState
from app.services.session_service import PENDING_THEME_KEY, SESSION_THEME_KEY, THEME_KEY, SessionManager
from app.utils.time import local_hour

logger = logging.getLogger(__name__)

SOURCE_SESSION = "session"
SOURCE_USER = "user"
SOURCE_DEVICE = "device"
SOURCE_AUTO = "auto"


def _as_theme(value) -> Optional[Theme]:
    try:
        return Theme(value) if value else None
    except ValueError:
        return None


def automatic_theme(hour: int) -> Theme:
    """Light between THEME_DAY_START (inclusive) and THEME_DAY_END (exclusive)."""
    if settings.THEME_DAY_START <= hour < settings.THEME_DAY_END:
        return Theme.LIGHT
    return Theme.DARK


class ThemeResolver:
    """Resolves and updates the theme for one client session"""

    def __init__(self, sessions: SessionManager, hour_provider: Callable[[], int] = local_hour):
        self.sessions = sessions
        self.hour_provider = hour_provider

    @property
    def _durable(self):
        return self.sessions.durable

    @property
    def _session_storage(self):
        return self.sessions.session_storage

    def _user_preference(self) -> Optional[Theme]:
        if not self.sessions.is_authenticated():
            return None
        return _as_theme(self.sessions.cached_user().get("theme_preference"))

    def resolve(self) -> ThemeState:
        pending = bool(self._session_storage.read(PENDING_THEME_KEY))

        session_theme = _as_theme(self._session_storage.read(SESSION_THEME_KEY))
        if session_theme:
            return ThemeState(theme=session_theme, source=SOURCE_SESSION, pending_confirmation=pending)

        user_theme = self._user_preference()
        if user_theme:
            return ThemeState(theme=user_theme, source=SOURCE_USER)

        device_theme = _as_theme(self._durable.read(THEME_KEY))
        if device_theme:
            return ThemeState(theme=device_theme, source=SOURCE_DEVICE)

        return ThemeState(theme=automatic_theme(self.hour_provider()), source=SOURCE_AUTO)

    def set_theme(self, theme: Theme) -> ThemeState:
        """Apply ``theme`` for this session and offer it as the permanent preference."""
        theme = Theme(theme)
        self._session_storage.write(SESSION_THEME_KEY, theme.value)
        self._session_storage.write(PENDING_THEME_KEY, theme.value)
        return self.resolve()

    async def confirm_permanent(self) -> ThemeState:
        """
        Promote the pending session theme to the permanent preference.

        The choice is written to the durable cache and, when someone is
        logged in, to their user record; the session layer is then cleared.
        """
        theme = _as_theme(self._session_storage.read(PENDING_THEME_KEY)) or \
            _as_theme(self._session_storage.read(SESSION_THEME_KEY))
        if theme is None:
            return self.resolve()

        self._durable.write(THEME_KEY, theme.value)
        if self.sessions.is_authenticated():
            await self.sessions.update_my_user_data({"theme_preference": theme.value})

        self._session_storage.remove(SESSION_THEME_KEY)
        self._session_storage.remove(PENDING_THEME_KEY)
        logger.info("Theme preference saved", extra={"theme": theme.value})
        return self.resolve()

    def cancel_permanent(self) -> ThemeState:
        """Keep the session theme without making it permanent."""
        self._session_storage.remove(PENDING_THEME_KEY)
        return self.resolve()

    async def forget_preference(self) -> ThemeState:
        """Drop the permanent and session layers, back to the automatic default."""
        self._durable.remove(THEME_KEY)
        self._session_storage.remove(SESSION_THEME_KEY)
        self._session_storage.remove(PENDING_THEME_KEY)
        if self.sessions.is_authenticated():
            await self.sessions.update_my_user_data({"theme_preference": None})
        return self.resolve()
