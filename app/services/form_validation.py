"""Record-level validation for student, lecturer and course forms.

Each field runs its shape validator first; a shape-valid field then goes
through its uniqueness check. Every field is evaluated so the caller gets
the full error map in one pass.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from app.backends.base import RecordStore
from app.models.enums import Collection
from app.schemas.validation import FormValidationResult, ValidationResult
from app.services import validators
from app.services.uniqueness import UNVERIFIED_MESSAGE, check_unique

logger = logging.getLogger(__name__)

REQUIRED_NATIONAL_ID_MESSAGE = "תעודת זהות היא שדה חובה"
REQUIRED_PASSWORD_MESSAGE = "סיסמה היא שדה חובה"
UNIQUENESS_ERROR_MESSAGE = "אירעה שגיאה בבדיקת ייחודיות, נסה שוב"

FormValidatorFn = Callable[[Mapping[str, Any], RecordStore, Optional[str]], Awaitable[FormValidationResult]]


async def _check_field(
    errors: Dict[str, str],
    data: Mapping[str, Any],
    field: str,
    shape: Callable[[Any], ValidationResult],
    store: Optional[RecordStore] = None,
    collection: Optional[str] = None,
    exclude_id: Optional[str] = None,
    conflicts: Optional[List[str]] = None,
) -> None:
    """
    Run the shape validator, then the uniqueness check when ``store`` is given.

    Fields held by another record are also appended to ``conflicts``.
    """
    value = data.get(field)
    result = shape(value)
    if not result.is_valid:
        errors[field] = result.error
        return
    if store is None:
        return

    try:
        unique = await check_unique(value, field, collection, store, exclude_id)
    except Exception as e:
        logger.error(
            "Uniqueness check failed",
            extra={"collection": collection, "field": field, "error": str(e)},
        )
        errors[field] = UNIQUENESS_ERROR_MESSAGE
        return
    if not unique.is_valid:
        errors[field] = unique.error
        if conflicts is not None and unique.error != UNVERIFIED_MESSAGE:
            conflicts.append(field)


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


async def validate_student_form(
    data: Mapping[str, Any],
    store: RecordStore,
    exclude_id: Optional[str] = None,
) -> FormValidationResult:
    """
    Validate a student record before it is written.

    Args:
        data: Student fields (full_name, student_id, national_id, email, phone, academic_track_ids)
        store: Record store used for uniqueness checks
        exclude_id: Id of the record being updated

    Returns:
        FormValidationResult with one Hebrew message per failing field
    """
    collection = Collection.STUDENTS.value
    errors: Dict[str, str] = {}
    conflicts: List[str] = []

    await _check_field(errors, data, "full_name", validators.validate_hebrew_name)
    await _check_field(errors, data, "student_id", validators.validate_student_id,
                       store, collection, exclude_id, conflicts)

    if _is_blank(data.get("national_id")):
        errors["national_id"] = REQUIRED_NATIONAL_ID_MESSAGE
    else:
        await _check_field(errors, data, "national_id", validators.validate_israeli_id,
                           store, collection, exclude_id, conflicts)

    await _check_field(errors, data, "email", validators.validate_email,
                       store, collection, exclude_id, conflicts)
    await _check_field(errors, data, "phone", validators.validate_phone)
    await _check_field(errors, data, "academic_track_ids", validators.validate_academic_tracks)

    return FormValidationResult.from_errors(errors, conflicts)


async def validate_lecturer_form(
    data: Mapping[str, Any],
    store: RecordStore,
    exclude_id: Optional[str] = None,
) -> FormValidationResult:
    """Validate a lecturer record; national id is optional for lecturers."""
    collection = Collection.LECTURERS.value
    errors: Dict[str, str] = {}
    conflicts: List[str] = []

    await _check_field(errors, data, "full_name", validators.validate_hebrew_name)
    await _check_field(errors, data, "employee_id", validators.validate_employee_id,
                       store, collection, exclude_id, conflicts)

    if not _is_blank(data.get("national_id")):
        await _check_field(errors, data, "national_id", validators.validate_israeli_id,
                           store, collection, exclude_id, conflicts)

    await _check_field(errors, data, "email", validators.validate_email,
                       store, collection, exclude_id, conflicts)
    await _check_field(errors, data, "phone", validators.validate_phone)
    await _check_field(errors, data, "academic_track_ids", validators.validate_academic_tracks)

    return FormValidationResult.from_errors(errors, conflicts)


async def validate_course_form(
    data: Mapping[str, Any],
    store: RecordStore,
    exclude_id: Optional[str] = None,
) -> FormValidationResult:
    """Validate a course record; course codes are unique across the catalog."""
    collection = Collection.COURSES.value
    errors: Dict[str, str] = {}
    conflicts: List[str] = []

    await _check_field(errors, data, "course_name", validators.validate_hebrew_name)
    await _check_field(errors, data, "course_code", validators.validate_course_code,
                       store, collection, exclude_id, conflicts)
    await _check_field(errors, data, "academic_track_ids", validators.validate_academic_tracks)

    return FormValidationResult.from_errors(errors, conflicts)


def validate_login(data: Mapping[str, Any]) -> FormValidationResult:
    errors: Dict[str, str] = {}

    email_result = validators.validate_email(data.get("email"))
    if not email_result.is_valid:
        errors["email"] = email_result.error

    if _is_blank(data.get("password")):
        errors["password"] = REQUIRED_PASSWORD_MESSAGE

    return FormValidationResult.from_errors(errors)


FORM_VALIDATORS: Dict[str, FormValidatorFn] = {
    Collection.STUDENTS.value: validate_student_form,
    Collection.LECTURERS.value: validate_lecturer_form,
    Collection.COURSES.value: validate_course_form,
}
