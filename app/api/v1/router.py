"""API V1 Router"""

from fastapi import APIRouter

# Import endpoint routers
from app.api.v1.endpoints import auth, entities, theme, validation

# Create API v1 router
api_router = APIRouter()

# Include endpoint routers with prefixes and tags
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(theme.router, prefix="/theme", tags=["Theme"])
api_router.include_router(entities.router, prefix="/entities", tags=["Entities"])
api_router.include_router(validation.router, prefix="/validation", tags=["Validation"])
