"""Models Package - Export all models for easy imports"""

from app.models.enums import (
    ROLE_PRIORITY,
    ROLE_PROFILE_COLLECTIONS,
    Collection,
    ProfileStatus,
    Role,
    Theme,
)
from app.models.document import Document


__all__ = [
    # Enums
    "Role",
    "ROLE_PRIORITY",
    "Theme",
    "Collection",
    "ROLE_PROFILE_COLLECTIONS",
    "ProfileStatus",
    # Tables
    "Document",
]
