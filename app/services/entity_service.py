"""Entity Service - uniform CRUD over any record collection"""

import logging
import re
import unicodedata
from typing import Any, Dict, List, Mapping, Optional

from app.backends.base import RecordStore
from app.core.exceptions import NotFound, RecordValidationError, UniquenessConflict, ValidationError
from app.core.security import generate_record_id
from app.models.enums import Collection
from app.services.form_validation import FORM_VALIDATORS, FormValidatorFn
from app.utils.time import utc_now_iso

logger = logging.getLogger(__name__)

READ_ONLY_COLLECTIONS = {Collection.ACADEMIC_TRACKS.value}
TRACK_COLLECTIONS = {Collection.STUDENTS.value, Collection.LECTURERS.value}
NAME_FIELDS = ("full_name", "course_name", "name")

_FINAL_LETTERS = str.maketrans({"ך": "כ", "ם": "מ", "ן": "נ", "ף": "פ", "ץ": "צ"})
_IGNORED_PUNCTUATION_RE = re.compile(r"[\"'׳״.\-־]")


def hebrew_sort_key(text: str) -> str:
    """
    Primary-level collation key for Hebrew display names.

    Final letter forms sort with their base letters, quote and hyphen marks
    are ignored, Latin text is case-folded.
    """
    text = unicodedata.normalize("NFC", text or "")
    text = _IGNORED_PUNCTUATION_RE.sub("", text)
    return " ".join(text.translate(_FINAL_LETTERS).casefold().split())


def display_name(record: Mapping[str, Any]) -> Optional[str]:
    for field in NAME_FIELDS:
        value = record.get(field)
        if value:
            return str(value)
    return None


def normalize_record(collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
    """Fill ``academic_track_ids`` from a legacy ``academic_track`` and drop duplicates."""
    if collection not in TRACK_COLLECTIONS:
        return record

    track_ids = record.get("academic_track_ids")
    if not track_ids:
        legacy = record.get("academic_track")
        track_ids = [legacy] if legacy else []
    elif isinstance(track_ids, str):
        track_ids = [track_ids]

    record["academic_track_ids"] = list(dict.fromkeys(track_ids))
    return record


def _matches(record: Mapping[str, Any], criteria: Mapping[str, Any]) -> bool:
    for key, expected in criteria.items():
        actual = record.get(key)
        if isinstance(actual, list) and not isinstance(expected, list):
            if expected not in actual:
                return False
        elif actual != expected:
            return False
    return True


class EntityAccessor:
    """
    CRUD for one collection over a record store.

    Writes to collections with a form validator are validated before
    anything is persisted; a failing form raises ``RecordValidationError``.
    """

    def __init__(
        self,
        collection: str,
        store: RecordStore,
        validator: Optional[FormValidatorFn] = None,
        read_only: bool = False,
    ):
        self.collection = collection.value if isinstance(collection, Collection) else collection
        self.store = store
        self.validator = validator
        self.read_only = read_only

    def _normalize(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return normalize_record(self.collection, dict(record))

    def _ensure_writable(self) -> None:
        if self.read_only:
            raise ValidationError("collection", f"Collection {self.collection} is read-only")

    async def _validate(self, data: Mapping[str, Any], exclude_id: Optional[str] = None) -> None:
        if self.validator is None:
            return
        result = await self.validator(data, self.store, exclude_id)
        if not result.is_valid:
            logger.info(
                "Record rejected by form validation",
                extra={"collection": self.collection, "fields": sorted(result.errors)},
            )
            if len(result.errors) == 1 and result.conflicts:
                field = result.conflicts[0]
                raise UniquenessConflict(field, result.errors[field])
            raise RecordValidationError(result.errors)

    async def list(self) -> List[Dict[str, Any]]:
        records = [self._normalize(r) for r in await self.store.list_records(self.collection)]
        if any(display_name(r) for r in records):
            records.sort(key=lambda r: hebrew_sort_key(display_name(r) or ""))
        return records

    async def find(self, record_id: str) -> Optional[Dict[str, Any]]:
        record = await self.store.get_record(self.collection, record_id)
        return self._normalize(record) if record is not None else None

    async def get(self, record_id: str) -> Dict[str, Any]:
        record = await self.store.get_record(self.collection, record_id)
        if record is None:
            raise NotFound(self.collection, record_id)
        return self._normalize(record)

    async def create(self, data: Mapping[str, Any], *, validate: bool = True) -> Dict[str, Any]:
        """
        Validate and store a new record.

        Args:
            data: Record fields; any ``id`` / timestamps in it are replaced
            validate: False for system-provisioned records that skip form validation

        Returns:
            The stored record
        """
        self._ensure_writable()
        if validate:
            await self._validate(data)

        now = utc_now_iso()
        record = self._normalize({
            **data,
            "id": generate_record_id(self.collection),
            "created_at": now,
            "updated_at": now,
        })
        stored = await self.store.put_record(self.collection, record)
        logger.info("Record created", extra={"collection": self.collection, "record_id": record["id"]})
        return stored

    async def update(self, record_id: str, data: Mapping[str, Any],
                     *, validate: bool = True) -> Optional[Dict[str, Any]]:
        """Merge ``data`` onto an existing record; None when the id does not exist."""
        self._ensure_writable()
        existing = await self.store.get_record(self.collection, record_id)
        if existing is None:
            return None

        merged = {**existing, **data, "id": record_id}
        if validate:
            await self._validate(merged, exclude_id=record_id)

        merged["updated_at"] = utc_now_iso()
        return await self.store.put_record(self.collection, self._normalize(merged))

    async def upsert(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Write a system-provisioned record under its own id, without form validation."""
        now = utc_now_iso()
        stored = self._normalize({"created_at": now, **record, "updated_at": now})
        return await self.store.put_record(self.collection, stored)

    async def delete(self, record_id: str) -> Dict[str, bool]:
        self._ensure_writable()
        deleted = await self.store.delete_record(self.collection, record_id)
        if deleted:
            logger.info("Record deleted", extra={"collection": self.collection, "record_id": record_id})
        return {"success": deleted}

    async def filter(self, criteria: Mapping[str, Any]) -> List[Dict[str, Any]]:
        return [r for r in await self.list() if _matches(r, criteria)]


def build_accessors(
    store: RecordStore,
    validators: Optional[Mapping[str, FormValidatorFn]] = None,
) -> Dict[str, EntityAccessor]:
    """One accessor per known collection, all bound to ``store``."""
    validators = FORM_VALIDATORS if validators is None else validators
    return {
        c.value: EntityAccessor(
            c.value,
            store,
            validator=validators.get(c.value),
            read_only=c.value in READ_ONLY_COLLECTIONS,
        )
        for c in Collection
    }
