"""Validation result schemas"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    """Outcome of validating a single value"""
    is_valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(is_valid=False, error=error)


class FormValidationResult(BaseModel):
    """
    Outcome of validating a whole record.

    ``errors`` maps field -> reason; ``conflicts`` lists the fields whose
    value is already held by another record.
    """
    is_valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)
    conflicts: List[str] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: Dict[str, str], conflicts: Optional[List[str]] = None) -> "FormValidationResult":
        return cls(is_valid=not errors, errors=errors, conflicts=conflicts or [])


class FieldValidationRequest(BaseModel):
    """Request body for single-field validation"""
    name: str
    value: Any = None
