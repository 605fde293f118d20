"""Unit tests for user and session schemas."""

import pytest
from pydantic import ValidationError

from app.models.enums import Role
from app.schemas.user import Session, User


def test_user_roles_deduplicated_in_order():
    user = User(id="user-1", email="a@x.com", roles=["lecturer", "student", "lecturer"])
    assert user.roles == [Role.LECTURER, Role.STUDENT]


def test_user_keeps_role_specific_extras():
    user = User(id="user-1", email="a@x.com", student_id="STU001", academic_track_ids=["cs-undergrad"])
    record = user.to_record()
    assert record["student_id"] == "STU001"
    assert record["academic_track_ids"] == ["cs-undergrad"]


def test_user_record_omits_fields_never_provided():
    record = User(id="user-1", email="a@x.com", roles=["student"], theme_preference=None).to_record()

    assert record == {"id": "user-1", "email": "a@x.com", "roles": ["student"], "theme_preference": None}


def test_user_rejects_unknown_role():
    with pytest.raises(ValidationError):
        User(id="user-1", email="a@x.com", roles=["dean"])


def test_session_serializes_role_values():
    user = User(id="user-1", email="a@x.com", roles=["student", "admin"], current_role="admin")
    session = Session(user=user, current_role="admin", available_roles=user.roles)

    dumped = session.model_dump(mode="json")

    assert dumped["current_role"] == "admin"
    assert dumped["available_roles"] == ["student", "admin"]
