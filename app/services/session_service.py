"""Session Service - login, active role and session-user bookkeeping.

State lives in two injected storage ports:

* ``durable`` - survives logout: the cached user (``mock_user``), the
  session token, the derived session view and the permanent theme.
* ``session_storage`` - cleared on logout: the session-scoped theme.

The primary auth backend is tried first on login; when it fails for any
reason the demo directory answers instead.
"""

import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from app.core.exceptions import BackendUnavailable, InvalidCredentials, NotAuthenticated, ValidationError
from app.core.security import create_session_token
from app.backends.storage import StoragePort
from app.models.enums import ROLE_PRIORITY, ROLE_PROFILE_COLLECTIONS, Collection, ProfileStatus, Role
from app.schemas.user import LoginResult, Session, User
from app.services import validators
from app.services.auth_gateway import AuthGateway
from app.services.demo_directory import find_demo_user
from app.services.entity_service import EntityAccessor

logger = logging.getLogger(__name__)

USER_KEY = "mock_user"
TOKEN_KEY = "auth_token"
SESSION_KEY = "current_session"
THEME_KEY = "theme"
SESSION_THEME_KEY = "session_theme"
PENDING_THEME_KEY = "pending_theme"

UNKNOWN_USER_MESSAGE = "משתמש לא נמצא במערכת"
WRONG_PASSWORD_MESSAGE = "סיסמה שגויה"
WRONG_OLD_PASSWORD_MESSAGE = "הסיסמה הישנה אינה נכונה"
PASSWORD_UPDATED_MESSAGE = "הסיסמה עודכנה בהצלחה"
PROTECTED_FIELD_MESSAGE = "לא ניתן לעדכן שדה זה דרך עדכון פרטים אישיים"

# Owned by login, switch_role and change_password.
PROTECTED_USER_FIELDS = ("id", "email", "roles", "current_role", "password")
SELF_SERVICE_VALIDATORS = {
    "national_id": validators.validate_israeli_id,
    "phone": validators.validate_phone,
}


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _role_value(role: Any) -> str:
    return role.value if isinstance(role, Role) else str(role)


def default_role(roles: List[str]) -> Optional[str]:
    """Highest-priority role held: admin, then lecturer, then student."""
    for role in ROLE_PRIORITY:
        if role.value in roles:
            return role.value
    return roles[0] if roles else None


def merge_roles(*role_lists: Optional[List[str]]) -> List[str]:
    """Ordered union of role lists"""
    merged: List[str] = []
    for roles in role_lists:
        for role in roles or []:
            if role not in merged:
                merged.append(role)
    return merged


def public_record(user: Mapping[str, Any]) -> Dict[str, Any]:
    """User fields safe to persist outside the local cache"""
    return {k: v for k, v in user.items() if k != "password"}


class SessionManager:
    """Multi-role session bookkeeping for one client"""

    def __init__(
        self,
        accessors: Mapping[str, EntityAccessor],
        durable: StoragePort,
        session_storage: StoragePort,
        gateway: Optional[AuthGateway] = None,
    ):
        self.accessors = accessors
        self.durable = durable
        self.session_storage = session_storage
        self.gateway = gateway if gateway is not None else AuthGateway()

    @property
    def users(self) -> EntityAccessor:
        return self.accessors[Collection.USERS.value]

    # -- cached state -------------------------------------------------

    def cached_user(self) -> Optional[Dict[str, Any]]:
        user = self.durable.read(USER_KEY)
        return user if isinstance(user, dict) else None

    def token(self) -> Optional[str]:
        return self.durable.read(TOKEN_KEY)

    def is_authenticated(self) -> bool:
        return bool(self.token()) and self.cached_user() is not None

    def _build_views(self, user: Mapping[str, Any]) -> Tuple[User, Optional[Session]]:
        """Validated user view plus the derived session; None when no held role is active."""
        try:
            view = User(**public_record(user))
            if not view.roles or view.current_role not in view.roles:
                return view, None
            return view, Session(user=view, current_role=view.current_role, available_roles=view.roles)
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error.get("loc") else "user"
            raise ValidationError(field, error["msg"]) from e

    def _store_user(self, user: Dict[str, Any]) -> User:
        """Cache ``user`` and its session view; nothing is written when validation fails."""
        view, session = self._build_views(user)
        self.durable.write(USER_KEY, user)
        if session is None:
            self.durable.remove(SESSION_KEY)
        else:
            self.durable.write(SESSION_KEY, session.model_dump(mode="json"))
        return view

    def _require_user(self, token: Optional[str] = None) -> Dict[str, Any]:
        stored_token = self.token()
        user = self.cached_user()
        if not stored_token or user is None:
            raise NotAuthenticated()
        if token is not None and token != stored_token:
            raise NotAuthenticated("Session token does not match the active session")
        return user

    async def _write_through(self, view: User) -> None:
        """Update the users collection copy when one exists"""
        if await self.users.find(view.id) is None:
            return
        await self.users.update(view.id, view.to_record())

    # -- login / logout -----------------------------------------------

    def _fallback_login(self, email: str, password: str) -> Dict[str, Any]:
        user = find_demo_user(email)
        if user is None:
            raise InvalidCredentials(UNKNOWN_USER_MESSAGE)

        expected_password = settings.DEMO_PASSWORD
        cached = self.cached_user()
        if cached and cached.get("email") == user["email"]:
            user = {**user, **cached}
            if cached.get("password"):
                expected_password = cached["password"]

        if password != expected_password:
            raise InvalidCredentials(WRONG_PASSWORD_MESSAGE)
        return user

    async def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate and start a session.

        Args:
            email: Account e-mail
            password: Account password

        Returns:
            LoginResult with the merged user and an opaque session token

        Raises:
            InvalidCredentials: unknown e-mail or wrong password in the demo directory
        """
        email = (email or "").strip().lower()
        try:
            body = await self.gateway.login(email, password)
            user = dict(body["user"])
            token = str(body["token"])
        except BackendUnavailable as e:
            logger.warning("Primary auth unavailable, using demo directory",
                           extra={"email": email, "error": str(e)})
            user = self._fallback_login(email, password)
            token = None

        user["roles"] = merge_roles(user.get("roles"))
        if user.get("current_role") not in user["roles"]:
            user["current_role"] = default_role(user["roles"])
        if token is None:
            token = create_session_token(user["id"], user.get("current_role"))

        view, _ = self._build_views(user)
        existing = await self.users.find(view.id)
        if existing is None:
            await self.users.upsert(view.to_record())
            logger.info("User record created on first login", extra={"user_id": view.id})

        self.durable.write(TOKEN_KEY, token)
        self._store_user(user)
        logger.info("User logged in", extra={"user_id": view.id, "role": user.get("current_role")})
        return LoginResult(user=view, token=token)

    async def logout(self) -> None:
        """End the session; the cached user and permanent theme survive."""
        token = self.token()
        try:
            await self.gateway.logout(token)
        except BackendUnavailable:
            logger.info("Primary auth logout unavailable, clearing local session only")

        self.durable.remove(TOKEN_KEY)
        self.durable.remove(SESSION_KEY)
        self.session_storage.remove(SESSION_THEME_KEY)
        self.session_storage.remove(PENDING_THEME_KEY)

    # -- session reads ------------------------------------------------

    async def me(self, token: Optional[str] = None) -> User:
        """
        Current user, reconciled with the users collection.

        Raises:
            NotAuthenticated: no session token or no cached user
        """
        user = self._require_user(token)

        backend = await self.users.find(user["id"])
        if backend:
            user = {**backend, **user}
            user["roles"] = merge_roles(backend.get("roles"), user.get("roles"))

        discovered = not user.get("roles")
        if discovered:
            user["roles"] = await self.discover_roles(user["email"]) or [Role.STUDENT.value]

        if user.get("current_role") not in user["roles"]:
            user["current_role"] = default_role(user["roles"])

        view = self._store_user(user)
        if discovered:
            await self._write_through(view)
            logger.info("Roles discovered for user", extra={"user_id": view.id, "roles": user["roles"]})
        return view

    async def session(self, token: Optional[str] = None) -> Session:
        await self.me(token)
        return Session(**self.durable.read(SESSION_KEY))

    # -- session writes -----------------------------------------------

    async def update_my_user_data(self, data: Mapping[str, Any]) -> User:
        """
        Merge ``data`` onto the session user and write it through to the users collection.

        Identity, roles and the password are not self-service: ``switch_role``
        and ``change_password`` own those.

        Raises:
            ValidationError: a protected field is present or a value fails validation
        """
        user = self._require_user()
        data = dict(data)

        for field in PROTECTED_USER_FIELDS:
            if field in data:
                raise ValidationError(field, PROTECTED_FIELD_MESSAGE)

        for field, validator in SELF_SERVICE_VALIDATORS.items():
            if _is_blank(data.get(field)):
                continue
            result = validator(data[field])
            if not result.is_valid:
                raise ValidationError(field, result.error)

        updated = {**user, **data}
        view = self._store_user(updated)
        await self._write_through(view)
        logger.info("User data updated", extra={"user_id": view.id, "fields": sorted(data)})
        return view

    async def switch_role(self, role: Any) -> bool:
        """Activate another held role; False and no change when the role is not held."""
        user = self._require_user()
        role = _role_value(role)
        if role not in (user.get("roles") or []):
            logger.info("Role switch rejected", extra={"user_id": user["id"], "role": role})
            return False

        view = self._store_user({**user, "current_role": role})
        await self._write_through(view)
        logger.info("Role switched", extra={"user_id": user["id"], "role": role})
        return True

    async def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        user = self._require_user()
        stored = user.get("password") or settings.DEMO_PASSWORD
        if current_password != stored:
            raise InvalidCredentials(WRONG_OLD_PASSWORD_MESSAGE)

        result = validators.validate_password(new_password)
        if not result.is_valid:
            raise ValidationError("new_password", result.error)

        self._store_user({**user, "password": new_password})
        return {"success": True, "message": PASSWORD_UPDATED_MESSAGE}

    # -- role profiles ------------------------------------------------

    async def _profiles_for(self, collection: str, email: str) -> List[Dict[str, Any]]:
        return await self.accessors[collection].filter({"email": email})

    async def discover_roles(self, email: str) -> List[str]:
        """Infer roles from role profiles linked by e-mail plus the admin e-mail marker."""
        roles = []
        for role, collection in ROLE_PROFILE_COLLECTIONS.items():
            if await self._profiles_for(collection.value, email):
                roles.append(role.value)
        if settings.ADMIN_EMAIL_MARKER and settings.ADMIN_EMAIL_MARKER in email:
            roles.append(Role.ADMIN.value)
        return roles

    async def ensure_role_profiles(self) -> Dict[str, Dict[str, Any]]:
        """
        Create missing Student / Lecturer profiles for the roles the user holds.

        Returns:
            Mapping of role -> profile record
        """
        user = self._require_user()
        roles = user.get("roles") or []
        profiles: Dict[str, Dict[str, Any]] = {}

        if Role.STUDENT.value in roles:
            found = await self._profiles_for(Collection.STUDENTS.value, user["email"])
            if found:
                profiles[Role.STUDENT.value] = found[0]
            else:
                profiles[Role.STUDENT.value] = await self.accessors[Collection.STUDENTS.value].create(
                    {
                        "full_name": user.get("full_name", ""),
                        "student_id": user.get("student_id") or f"STU{int(time.time() * 1000)}",
                        "email": user["email"],
                        "academic_track": user.get("academic_track"),
                        "academic_track_ids": user.get("academic_track_ids") or [],
                        "year": 1,
                        "status": ProfileStatus.ACTIVE.value,
                    },
                    validate=False,
                )
                logger.info("Student profile provisioned", extra={"user_id": user["id"]})

        if Role.LECTURER.value in roles:
            found = await self._profiles_for(Collection.LECTURERS.value, user["email"])
            if found:
                profiles[Role.LECTURER.value] = found[0]
            else:
                profiles[Role.LECTURER.value] = await self.accessors[Collection.LECTURERS.value].create(
                    {
                        "full_name": user.get("full_name", ""),
                        "email": user["email"],
                        "academic_track_ids": user.get("lecturer_track_ids") or [],
                        "assigned_courses": [],
                        "department": user.get("department"),
                    },
                    validate=False,
                )
                logger.info("Lecturer profile provisioned", extra={"user_id": user["id"]})

        return profiles
