"""Unit tests for theme resolution."""

import itertools

import pytest

from app.models.enums import Theme
from app.services.session_service import PENDING_THEME_KEY, SESSION_THEME_KEY, THEME_KEY, USER_KEY
from app.services.theme_service import ThemeResolver, automatic_theme


@pytest.mark.parametrize("hour,expected", [
    (6, Theme.LIGHT), (12, Theme.LIGHT), (21, Theme.LIGHT),
    (22, Theme.DARK), (0, Theme.DARK), (5, Theme.DARK),
])
def test_automatic_theme_by_hour(hour, expected):
    assert automatic_theme(hour) == expected


def test_auto_default_when_nothing_set(sessions):
    state = ThemeResolver(sessions, hour_provider=lambda: 23).resolve()
    assert state.theme == Theme.DARK
    assert state.source == "auto"


@pytest.mark.asyncio
@pytest.mark.parametrize("has_session,has_user,has_device",
                         list(itertools.product([True, False], repeat=3)))
async def test_layer_precedence(sessions, themes, durable, session_storage,
                                has_session, has_user, has_device):
    await sessions.login("student@ono.ac.il", "123456")
    if has_session:
        session_storage.write(SESSION_THEME_KEY, "dark")
    if has_user:
        durable.write(USER_KEY, {**durable.read(USER_KEY), "theme_preference": "light"})
    if has_device:
        durable.write(THEME_KEY, "dark")

    state = themes.resolve()

    if has_session:
        assert (state.source, state.theme) == ("session", Theme.DARK)
    elif has_user:
        assert (state.source, state.theme) == ("user", Theme.LIGHT)
    elif has_device:
        assert (state.source, state.theme) == ("device", Theme.DARK)
    else:
        assert (state.source, state.theme) == ("auto", Theme.LIGHT)


@pytest.mark.asyncio
async def test_user_preference_ignored_when_logged_out(sessions, themes, durable):
    await sessions.login("student@ono.ac.il", "123456")
    durable.write(USER_KEY, {**durable.read(USER_KEY), "theme_preference": "dark"})
    await sessions.logout()

    assert themes.resolve().source == "auto"


def test_set_theme_is_session_scoped_and_pending(themes, durable, session_storage):
    state = themes.set_theme(Theme.DARK)

    assert state.theme == Theme.DARK
    assert state.source == "session"
    assert state.pending_confirmation is True
    assert durable.read(THEME_KEY) is None


@pytest.mark.asyncio
async def test_confirm_permanent_persists_everywhere(sessions, themes, durable, session_storage, accessors):
    await sessions.login("student@ono.ac.il", "123456")
    themes.set_theme(Theme.DARK)

    state = await themes.confirm_permanent()

    assert state.theme == Theme.DARK
    assert state.source == "user"
    assert durable.read(THEME_KEY) == "dark"
    assert session_storage.read(SESSION_THEME_KEY) is None
    assert (await accessors["users"].get("user-001"))["theme_preference"] == "dark"


@pytest.mark.asyncio
async def test_confirm_permanent_anonymous_uses_device_layer(themes, durable):
    themes.set_theme(Theme.DARK)

    state = await themes.confirm_permanent()

    assert state.source == "device"
    assert durable.read(THEME_KEY) == "dark"


def test_cancel_keeps_session_theme(themes, session_storage):
    themes.set_theme(Theme.DARK)

    state = themes.cancel_permanent()

    assert state.theme == Theme.DARK
    assert state.pending_confirmation is False
    assert session_storage.read(PENDING_THEME_KEY) is None


@pytest.mark.asyncio
async def test_session_theme_dropped_on_logout(sessions, themes):
    await sessions.login("student@ono.ac.il", "123456")
    themes.set_theme(Theme.DARK)

    await sessions.logout()

    assert themes.resolve().source == "auto"


@pytest.mark.asyncio
async def test_forget_preference_returns_to_auto(sessions, themes, accessors):
    await sessions.login("student@ono.ac.il", "123456")
    themes.set_theme(Theme.DARK)
    await themes.confirm_permanent()

    state = await themes.forget_preference()

    assert state.source == "auto"
    assert state.theme == Theme.LIGHT
    assert (await accessors["users"].get("user-001"))["theme_preference"] is None
