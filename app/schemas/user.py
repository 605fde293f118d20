"""User and session Pydantic Schemas"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.enums import Role, Theme


class User(BaseModel):
    """
    Identity record shared by every role an account holds.

    Role-specific extras (``student_id``, ``academic_track_ids``,
    ``lecturer_track_ids``...) are carried through as extra fields.
    """
    id: str
    full_name: str = ""
    email: str
    national_id: Optional[str] = None
    roles: List[Role] = Field(default_factory=list)
    current_role: Optional[Role] = None
    theme_preference: Optional[Theme] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = ConfigDict(extra="allow", use_enum_values=False)

    @field_validator("roles")
    @classmethod
    def dedupe_roles(cls, v: List[Role]) -> List[Role]:
        """Roles are an ordered set"""
        seen: List[Role] = []
        for role in v:
            if role not in seen:
                seen.append(role)
        return seen

    def to_record(self) -> dict:
        """JSON-safe dict of the fields that were provided, for persistence"""
        return self.model_dump(mode="json", exclude_unset=True)


class UserUpdate(BaseModel):
    """
    Partial update of the session user's own data.

    Extra fields are passed through so the session service can refuse
    identity, role and password changes by name.
    """
    full_name: Optional[str] = None
    national_id: Optional[str] = None
    phone: Optional[str] = None
    theme_preference: Optional[Theme] = None

    model_config = ConfigDict(extra="allow")


class Session(BaseModel):
    """In-memory view of the authenticated user and active role"""
    user: User
    current_role: Role
    available_roles: List[Role]


class LoginRequest(BaseModel):
    """Schema for user login"""
    email: EmailStr
    password: str


class LoginResult(BaseModel):
    """Authenticated identity plus opaque session token"""
    user: User
    token: str


class RoleSwitchRequest(BaseModel):
    role: Role


class PasswordChange(BaseModel):
    """Schema for changing the settings password"""
    current_password: str
    new_password: str


class ThemeRequest(BaseModel):
    theme: Theme


class ThemeState(BaseModel):
    """Resolved theme and the layer it came from"""
    theme: Theme
    source: str
    pending_confirmation: bool = False
