from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.api import deps
from app.core.exceptions import RecordValidationError
from app.schemas.responses import SuccessResponse
from app.schemas.user import LoginRequest, LoginResult, PasswordChange, RoleSwitchRequest, Session, User, UserUpdate
from app.services.form_validation import validate_login
from app.services.session_service import SessionManager

router = APIRouter()


@router.post("/login", response_model=SuccessResponse[LoginResult])
async def login(
    login_data: LoginRequest,
    sessions: SessionManager = Depends(deps.get_session_manager),
) -> Any:
    """
    Log in with e-mail and password.
    Uses the primary auth backend when reachable, otherwise the demo directory.
    """
    form = validate_login(login_data.model_dump())
    if not form.is_valid:
        raise RecordValidationError(form.errors)

    result = await sessions.login(login_data.email, login_data.password)
    return SuccessResponse(data=result, message="Login successful")


@router.get("/me", response_model=SuccessResponse[User])
async def read_me(
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Current user with roles reconciled"""
    return SuccessResponse(data=current_user, message="Profile retrieved")


@router.patch("/me", response_model=SuccessResponse[User])
async def update_me(
    data: UserUpdate,
    sessions: SessionManager = Depends(deps.get_session_manager),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Merge the provided fields onto the session user"""
    user = await sessions.update_my_user_data(data.model_dump(mode="json", exclude_unset=True))
    return SuccessResponse(data=user, message="Profile updated")


@router.get("/session", response_model=SuccessResponse[Session])
async def read_session(
    sessions: SessionManager = Depends(deps.get_session_manager),
    token: str = Depends(deps.get_bearer_token),
) -> Any:
    session = await sessions.session(token)
    return SuccessResponse(data=session, message="Session retrieved")


@router.post("/switch-role", response_model=SuccessResponse[Session])
async def switch_role(
    body: RoleSwitchRequest,
    sessions: SessionManager = Depends(deps.get_session_manager),
    token: str = Depends(deps.get_bearer_token),
) -> Any:
    """
    Activate another role the user holds.
    A role the user does not hold leaves the session unchanged.
    """
    await sessions.me(token)
    switched = await sessions.switch_role(body.role)
    session = await sessions.session(token)
    return SuccessResponse(
        success=switched,
        data=session,
        message="Role switched" if switched else "Role not available for this user",
    )


@router.post("/role-profiles", response_model=SuccessResponse[Dict[str, Dict[str, Any]]])
async def ensure_role_profiles(
    sessions: SessionManager = Depends(deps.get_session_manager),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Create missing student / lecturer profiles for the session user's roles"""
    profiles = await sessions.ensure_role_profiles()
    return SuccessResponse(data=profiles, message="Role profiles ready")


@router.post("/change-password", response_model=SuccessResponse[Dict[str, Any]])
async def change_password(
    body: PasswordChange,
    sessions: SessionManager = Depends(deps.get_session_manager),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    result = await sessions.change_password(body.current_password, body.new_password)
    return SuccessResponse(data=result, message=result["message"])


@router.post("/logout", response_model=SuccessResponse[Dict[str, bool]])
async def logout(
    sessions: SessionManager = Depends(deps.get_session_manager),
) -> Any:
    """Clear the session token and session theme; the cached user is kept"""
    await sessions.logout()
    return SuccessResponse(data={"logged_out": True}, message="Logged out")
