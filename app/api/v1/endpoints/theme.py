from typing import Any

from fastapi import APIRouter, Depends

from app.api import deps
from app.schemas.responses import SuccessResponse
from app.schemas.user import ThemeRequest, ThemeState
from app.services.theme_service import ThemeResolver

router = APIRouter()


@router.get("", response_model=SuccessResponse[ThemeState])
async def read_theme(
    themes: ThemeResolver = Depends(deps.get_theme_resolver),
) -> Any:
    """Resolved theme and the layer that supplied it"""
    return SuccessResponse(data=themes.resolve(), message="Theme resolved")


@router.post("", response_model=SuccessResponse[ThemeState])
async def set_theme(
    body: ThemeRequest,
    themes: ThemeResolver = Depends(deps.get_theme_resolver),
) -> Any:
    """Apply a theme for this session; it stays pending until confirmed"""
    return SuccessResponse(data=themes.set_theme(body.theme), message="Session theme applied")


@router.post("/confirm", response_model=SuccessResponse[ThemeState])
async def confirm_theme(
    themes: ThemeResolver = Depends(deps.get_theme_resolver),
) -> Any:
    state = await themes.confirm_permanent()
    return SuccessResponse(data=state, message="Theme preference saved")


@router.post("/cancel", response_model=SuccessResponse[ThemeState])
async def cancel_theme(
    themes: ThemeResolver = Depends(deps.get_theme_resolver),
) -> Any:
    return SuccessResponse(data=themes.cancel_permanent(), message="Theme kept for this session only")


@router.delete("", response_model=SuccessResponse[ThemeState])
async def forget_theme(
    themes: ThemeResolver = Depends(deps.get_theme_resolver),
) -> Any:
    state = await themes.forget_preference()
    return SuccessResponse(data=state, message="Theme preference cleared")
