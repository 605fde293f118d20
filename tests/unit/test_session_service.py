"""Unit tests for SessionManager."""

import httpx
import pytest

from app.core.exceptions import InvalidCredentials, NotAuthenticated, ValidationError
from app.core.security import decode_session_token
from app.services.auth_gateway import AuthGateway
from app.services.session_service import (
    SESSION_THEME_KEY,
    TOKEN_KEY,
    USER_KEY,
    SessionManager,
    default_role,
)


@pytest.mark.asyncio
async def test_fallback_login_demo_student(sessions):
    result = await sessions.login("student@ono.ac.il", "123456")

    assert "student" in result.user.roles
    assert result.user.current_role == "student"
    assert decode_session_token(result.token)["sub"] == "user-001"


@pytest.mark.asyncio
async def test_login_creates_user_record(sessions, accessors):
    await sessions.login("lecturer@ono.ac.il", "123456")

    record = await accessors["users"].get("user-002")
    assert record["email"] == "lecturer@ono.ac.il"
    assert "password" not in record


@pytest.mark.asyncio
async def test_login_unknown_email(sessions):
    with pytest.raises(InvalidCredentials) as exc_info:
        await sessions.login("nobody@ono.ac.il", "123456")
    assert exc_info.value.message == "משתמש לא נמצא במערכת"


@pytest.mark.asyncio
async def test_login_wrong_password(sessions):
    with pytest.raises(InvalidCredentials) as exc_info:
        await sessions.login("student@ono.ac.il", "654321")
    assert exc_info.value.message == "סיסמה שגויה"


@pytest.mark.asyncio
async def test_login_role_priority(sessions):
    result = await sessions.login("lecturer.admin@ono.ac.il", "123456")
    assert result.user.current_role == "lecturer"

    assert default_role(["student", "lecturer"]) == "lecturer"
    assert default_role(["student", "admin", "lecturer"]) == "admin"
    assert default_role([]) is None


@pytest.mark.asyncio
async def test_login_repairs_invalid_cached_role(sessions, durable):
    durable.write(USER_KEY, {"email": "student.lecturer@ono.ac.il", "current_role": "admin"})

    result = await sessions.login("student.lecturer@ono.ac.il", "123456")

    assert result.user.current_role == "lecturer"


@pytest.mark.asyncio
async def test_repeat_login_keeps_local_edits(sessions):
    await sessions.login("student@ono.ac.il", "123456")
    await sessions.update_my_user_data({"full_name": "אלי כהן"})
    await sessions.logout()

    result = await sessions.login("student@ono.ac.il", "123456")

    assert result.user.full_name == "אלי כהן"


@pytest.mark.asyncio
async def test_cached_copy_of_other_user_is_ignored(sessions, durable):
    durable.write(USER_KEY, {"email": "admin@ono.ac.il", "full_name": "אחר"})

    result = await sessions.login("student@ono.ac.il", "123456")

    assert result.user.full_name == "אליהו כהן"


@pytest.mark.asyncio
async def test_primary_backend_success_skips_demo_directory(accessors, durable, session_storage):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/auth/login"
        return httpx.Response(200, json={
            "user": {"id": "remote-1", "email": "remote@ono.ac.il", "roles": ["lecturer"]},
            "token": "remote-token",
        })

    gateway = AuthGateway(base_url="http://auth.test", transport=httpx.MockTransport(handler))
    sessions = SessionManager(accessors, durable, session_storage, gateway)

    result = await sessions.login("remote@ono.ac.il", "anything")

    assert result.token == "remote-token"
    assert result.user.current_role == "lecturer"


@pytest.mark.asyncio
async def test_primary_backend_error_falls_back(accessors, durable, session_storage):
    gateway = AuthGateway(
        base_url="http://auth.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(500)),
    )
    sessions = SessionManager(accessors, durable, session_storage, gateway)

    result = await sessions.login("admin@ono.ac.il", "123456")

    assert result.user.id == "user-003"


@pytest.mark.asyncio
async def test_malformed_primary_response_falls_back(accessors, durable, session_storage):
    gateway = AuthGateway(
        base_url="http://auth.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")),
    )
    sessions = SessionManager(accessors, durable, session_storage, gateway)

    result = await sessions.login("admin@ono.ac.il", "123456")

    assert result.user.current_role == "admin"


@pytest.mark.asyncio
async def test_me_requires_session(sessions):
    with pytest.raises(NotAuthenticated):
        await sessions.me()


@pytest.mark.asyncio
async def test_me_rejects_foreign_token(sessions):
    await sessions.login("student@ono.ac.il", "123456")
    with pytest.raises(NotAuthenticated):
        await sessions.me("some-other-token")


@pytest.mark.asyncio
async def test_switch_role_invariant(sessions):
    await sessions.login("all.roles@ono.ac.il", "123456")

    assert await sessions.switch_role("student") is True
    session = await sessions.session()
    assert session.current_role == "student"
    assert session.current_role in session.available_roles

    before = session.model_dump()
    single = await sessions.login("student@ono.ac.il", "123456")
    assert single.user.roles == ["student"]
    assert await sessions.switch_role("admin") is False
    after = await sessions.session()
    assert after.current_role == "student"
    assert before["user"]["id"] != after.user.id


@pytest.mark.asyncio
async def test_switch_role_writes_through(sessions, accessors):
    await sessions.login("student.lecturer@ono.ac.il", "123456")

    await sessions.switch_role("lecturer")

    assert (await accessors["users"].get("user-004"))["current_role"] == "lecturer"


@pytest.mark.asyncio
async def test_logout_preserves_cached_user(sessions, durable, session_storage):
    await sessions.login("student@ono.ac.il", "123456")
    session_storage.write(SESSION_THEME_KEY, "dark")

    await sessions.logout()

    assert durable.read(TOKEN_KEY) is None
    assert durable.read(USER_KEY)["email"] == "student@ono.ac.il"
    assert session_storage.read(SESSION_THEME_KEY) is None
    with pytest.raises(NotAuthenticated):
        await sessions.me()


@pytest.mark.asyncio
async def test_role_discovery(sessions, accessors, durable):
    await accessors["lecturers"].create({"full_name": "מרצה", "email": "x.admin@ono.ac.il"}, validate=False)

    assert await sessions.discover_roles("x.admin@ono.ac.il") == ["lecturer", "admin"]
    assert await sessions.discover_roles("plain@ono.ac.il") == []


@pytest.mark.asyncio
async def test_me_runs_discovery_when_roles_empty(sessions, accessors, durable):
    await sessions.login("student@ono.ac.il", "123456")
    await accessors["students"].create({"full_name": "אליהו כהן", "email": "student@ono.ac.il"}, validate=False)
    user = durable.read(USER_KEY)
    durable.write(USER_KEY, {**user, "roles": [], "current_role": None})
    await accessors["users"].update("user-001", {"roles": []})

    me = await sessions.me()

    assert me.roles == ["student"]
    assert me.current_role == "student"


@pytest.mark.asyncio
async def test_ensure_role_profiles_creates_missing_only(sessions, accessors):
    await sessions.login("student.lecturer@ono.ac.il", "123456")

    profiles = await sessions.ensure_role_profiles()
    again = await sessions.ensure_role_profiles()

    assert profiles["student"]["student_id"] == "PhD002"
    assert profiles["lecturer"]["academic_track_ids"] == ["cs-undergrad"]
    assert again["student"]["id"] == profiles["student"]["id"]
    assert len(await accessors["students"].list()) == 1
    assert len(await accessors["lecturers"].list()) == 1


@pytest.mark.asyncio
async def test_change_password_flow(sessions):
    await sessions.login("student@ono.ac.il", "123456")

    with pytest.raises(InvalidCredentials):
        await sessions.change_password("wrong", "N3w!Secret")
    with pytest.raises(ValidationError):
        await sessions.change_password("123456", "short")

    result = await sessions.change_password("123456", "N3w!Secret")
    assert result["success"] is True

    await sessions.logout()
    with pytest.raises(InvalidCredentials):
        await sessions.login("student@ono.ac.il", "123456")
    assert (await sessions.login("student@ono.ac.il", "N3w!Secret")).user.id == "user-001"


@pytest.mark.asyncio
async def test_update_my_user_data_requires_session(sessions):
    with pytest.raises(NotAuthenticated):
        await sessions.update_my_user_data({"full_name": "דוד"})


@pytest.mark.asyncio
async def test_update_my_user_data_cannot_grant_roles(sessions, accessors):
    await sessions.login("student@ono.ac.il", "123456")

    with pytest.raises(ValidationError) as exc_info:
        await sessions.update_my_user_data({"roles": ["admin"]})
    assert exc_info.value.field == "roles"

    assert await sessions.switch_role("admin") is False
    assert (await sessions.me()).roles == ["student"]
    assert (await accessors["users"].get("user-001"))["roles"] == ["student"]


@pytest.mark.asyncio
@pytest.mark.parametrize("field, value", [
    ("current_role", "admin"),
    ("id", "user-999"),
    ("email", "admin@ono.ac.il"),
])
async def test_update_my_user_data_rejects_identity_fields(sessions, field, value):
    await sessions.login("student@ono.ac.il", "123456")

    with pytest.raises(ValidationError) as exc_info:
        await sessions.update_my_user_data({field: value})

    assert exc_info.value.field == field
    me = await sessions.me()
    assert me.id == "user-001"
    assert me.email == "student@ono.ac.il"
    assert me.current_role == "student"


@pytest.mark.asyncio
async def test_update_my_user_data_cannot_set_password(sessions):
    await sessions.login("student@ono.ac.il", "123456")

    with pytest.raises(ValidationError) as exc_info:
        await sessions.update_my_user_data({"password": "1"})
    assert exc_info.value.field == "password"

    await sessions.logout()
    with pytest.raises(InvalidCredentials):
        await sessions.login("student@ono.ac.il", "1")
    assert (await sessions.login("student@ono.ac.il", "123456")).user.id == "user-001"


@pytest.mark.asyncio
async def test_update_my_user_data_validates_national_id(sessions, accessors):
    await sessions.login("student@ono.ac.il", "123456")

    with pytest.raises(ValidationError) as exc_info:
        await sessions.update_my_user_data({"national_id": "123456789"})
    assert exc_info.value.field == "national_id"
    assert exc_info.value.message == "תעודת זהות לא תקינה (ספרת ביקורת שגויה)"

    me = await sessions.update_my_user_data({"national_id": "123456782"})
    assert me.national_id == "123456782"
    record = await accessors["users"].get("user-001")
    assert record["national_id"] == "123456782"
    assert record["created_at"] is not None


@pytest.mark.asyncio
async def test_rejected_update_leaves_session_readable(sessions, durable):
    await sessions.login("student@ono.ac.il", "123456")
    cached = durable.read(USER_KEY)

    with pytest.raises(ValidationError) as exc_info:
        await sessions.update_my_user_data({"theme_preference": "purple"})

    assert exc_info.value.field == "theme_preference"
    assert durable.read(USER_KEY) == cached
    me = await sessions.me()
    assert me.theme_preference is None
    assert (await sessions.session()).current_role == "student"
