"""Uniqueness checks against the active record store.

A check loads the target collection and looks for another record holding
the same value. When the store cannot be read the check fails open by
default (the write is allowed and a warning is logged); set
``UNIQUENESS_FAIL_OPEN=false`` to reject instead.
"""

import logging
from typing import Any, Optional

from app.backends.base import RecordStore
from app.config import settings
from app.core.exceptions import BackendUnavailable
from app.models.enums import Collection
from app.schemas.validation import ValidationResult

logger = logging.getLogger(__name__)

ENTITY_LABELS = {
    Collection.STUDENTS.value: "סטודנט",
    Collection.LECTURERS.value: "מרצה",
    Collection.COURSES.value: "קורס",
    Collection.USERS.value: "משתמש",
}

UNVERIFIED_MESSAGE = "לא ניתן לאמת ייחודיות כרגע, נסה שוב מאוחר יותר"


def _conflict_message(field: str, collection: str) -> str:
    entity = ENTITY_LABELS.get(collection, "רשומה")
    if field == "email":
        return f"כתובת אימייל זו כבר בשימוש אצל {entity} אחר"
    if field == "national_id":
        return f"כבר קיים {entity} עם תעודת זהות זו במערכת"
    if field in ("student_id", "employee_id", "course_code"):
        return f"כבר קיים {entity} עם מספר זה במערכת"
    return f"כבר קיים {entity} עם ערך זה במערכת"


def _normalize(field: str, value: Any) -> str:
    text = str(value).strip()
    return text.casefold() if field == "email" else text


async def check_unique(
    value: Any,
    field: str,
    collection: str,
    store: RecordStore,
    exclude_id: Optional[str] = None,
    *,
    fail_open: Optional[bool] = None,
) -> ValidationResult:
    """
    Check that no record in ``collection`` other than ``exclude_id`` holds ``value`` in ``field``.

    Args:
        value: Candidate value
        field: Record field to compare (e-mail comparison is case-insensitive)
        collection: Collection name
        store: Record store to read from
        exclude_id: Record being updated, ignored in the scan
        fail_open: Override of the UNIQUENESS_FAIL_OPEN policy

    Returns:
        ValidationResult naming the conflicting entity type on failure
    """
    collection = collection.value if isinstance(collection, Collection) else collection
    if fail_open is None:
        fail_open = settings.UNIQUENESS_FAIL_OPEN

    try:
        records = await store.list_records(collection)
    except BackendUnavailable as e:
        logger.warning(
            "Uniqueness check could not read store",
            extra={"collection": collection, "field": field, "fail_open": fail_open, "error": str(e)},
        )
        return ValidationResult.ok() if fail_open else ValidationResult.fail(UNVERIFIED_MESSAGE)

    wanted = _normalize(field, value)
    for record in records:
        if exclude_id is not None and record.get("id") == exclude_id:
            continue
        existing = record.get(field)
        if existing is None:
            continue
        if _normalize(field, existing) == wanted:
            return ValidationResult.fail(_conflict_message(field, collection))

    return ValidationResult.ok()
