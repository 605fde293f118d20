"""Field validators.

Pure functions: each takes a raw value and returns a ``ValidationResult``
with a Hebrew, user-facing reason. They never raise. Every validator first
rejects empty input, then checks shape, then domain rules.
"""

import logging
import re
from typing import Any, Callable, Dict, Optional, Sequence

from app.config import settings
from app.schemas.validation import ValidationResult
from app.utils.time import get_utc_now

logger = logging.getLogger(__name__)

_HEBREW_NAME_RE = re.compile(r"^[\u0590-\u05FF\s'\-\"\.]+$")
_DOUBLE_SPACE_RE = re.compile(r"\s{2,}")

_EMAIL_RE = re.compile(
    r"^[a-z0-9](?:[a-z0-9._-]*[a-z0-9])?@[a-z0-9](?:[a-z0-9.-]*[a-z0-9])?\.[a-z]{2,6}$"
)
_EMAIL_DOUBLED_SEPARATORS = ("..", "__", "--")

_PHONE_CHARS_RE = re.compile(r"^[\d\s\-\(\)\+]+$")
_PHONE_STRIP_RE = re.compile(r"[\s\-\(\)\+]")
_MOBILE_RE = re.compile(r"^05\d{8}$")
_LANDLINE_RE = re.compile(r"^0\d\d{7,8}$")
_INTERNATIONAL_RE = re.compile(r"^972[2-9]\d{7,8}$")
VALID_MOBILE_PREFIXES = tuple(f"05{d}" for d in range(10))
VALID_AREA_CODES = ("02", "03", "04", "08", "09")

_STUDENT_ID_RE = re.compile(r"^[A-Z0-9]+$")
_RUN_OF_FOUR_RE = re.compile(r"(.)\1{3,}")
STUDENT_ID_BLACKLIST = tuple(str(d) * 4 for d in range(10)) + ("AAAA", "BBBB")

EMPLOYEE_ID_PREFIX = "EMP"
_EMPLOYEE_ID_RE = re.compile(rf"^{EMPLOYEE_ID_PREFIX}\d{{4,6}}$")

_COURSE_CODE_RE = re.compile(r"^([A-Z]{2,4})(\d{3,4})$")
COMMON_SUBJECTS = {
    "CS", "CSE", "IT", "IS",
    "MATH", "STAT", "CALC",
    "PHYS", "CHEM", "BIO",
    "ENG", "HEB", "ARAB",
    "ECON", "BUS", "MGT", "FIN",
    "PSY", "SOC", "PHIL", "POL",
    "LAW", "HIST", "GEO",
    "ART", "MUS", "LIT", "THR",
}

_PASSWORD_SYMBOL_RE = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")
WEAK_PASSWORD_PATTERNS = ("123456", "password", "qwerty", "abc123", "111111", "000000")

_ACADEMIC_YEAR_RE = re.compile(r"^(\d{4})[-/](\d{4})$")
ACADEMIC_YEAR_MIN = 2000
ACADEMIC_YEAR_LOOKAHEAD = 5
ACADEMIC_LEVELS = ("תואר ראשון", "תואר שני", "תואר שלישי", "דיפלומה", "תעודה")
STUDY_YEAR_RANGE = (1, 7)
SEMESTERS = ("סמסטר א'", "סמסטר ב'", "סמסטר קיץ")


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def national_id_check_digit(first_eight: str) -> int:
    """Check digit for the first 8 digits of an Israeli national id."""
    total = 0
    for i, ch in enumerate(first_eight):
        product = int(ch) * ((i % 2) + 1)
        if product > 9:
            product = product // 10 + product % 10
        total += product
    return (10 - (total % 10)) % 10


def validate_israeli_id(value: Optional[str]) -> ValidationResult:
    if _is_blank(value):
        return ValidationResult.fail("תעודת זהות היא שדה חובה")

    trimmed = str(value).strip()
    if len(trimmed) != 9 or not trimmed.isascii() or not trimmed.isdigit():
        return ValidationResult.fail("תעודת זהות חייבת להכיל בדיוק 9 ספרות")

    if national_id_check_digit(trimmed[:8]) != int(trimmed[8]):
        return ValidationResult.fail("תעודת זהות לא תקינה (ספרת ביקורת שגויה)")

    return ValidationResult.ok()


def validate_hebrew_name(value: Optional[str]) -> ValidationResult:
    if _is_blank(value):
        return ValidationResult.fail("שם הוא שדה חובה")

    name = str(value)
    trimmed = name.strip()

    if len(trimmed) < 2:
        return ValidationResult.fail("שם חייב להכיל לפחות 2 תווים")
    if len(trimmed) > 50:
        return ValidationResult.fail("שם ארוך מדי (מקסימום 50 תווים)")
    if not _HEBREW_NAME_RE.match(trimmed):
        return ValidationResult.fail("שם חייב להכיל רק אותיות עבריות, רווחים וסימני פיסוק בסיסיים")
    if trimmed != name or _DOUBLE_SPACE_RE.search(trimmed):
        return ValidationResult.fail("שם לא יכול להתחיל או להסתיים ברווח, ולא יכול להכיל רווחים כפולים")

    return ValidationResult.ok()


def validate_email(value: Optional[str]) -> ValidationResult:
    if _is_blank(value):
        return ValidationResult.fail("כתובת אימייל היא שדה חובה")

    email = str(value).strip().lower()

    if len(email) > 254:
        return ValidationResult.fail("כתובת אימייל ארוכה מדי (מקסימום 254 תווים)")
    if len(email) < 5:
        return ValidationResult.fail("כתובת אימייל קצרה מדי (מינימום 5 תווים)")
    if not _EMAIL_RE.match(email):
        return ValidationResult.fail("כתובת אימייל לא תקינה - בדוק את הפורמט (example@domain.com)")
    if any(sep in email for sep in _EMAIL_DOUBLED_SEPARATORS):
        return ValidationResult.fail("כתובת אימייל מכילה תווים עוקבים לא חוקיים")

    local_part, domain = email.split("@", 1)
    if len(local_part) > 64:
        return ValidationResult.fail("החלק המקומי של האימייל ארוך מדי (מקסימום 64 תווים)")
    if local_part.startswith(".") or local_part.endswith("."):
        return ValidationResult.fail("החלק המקומי של האימייל לא יכול להתחיל או להסתיים בנקודה")
    if len(domain) > 253:
        return ValidationResult.fail("חלק הדומיין ארוך מדי (מקסימום 253 תווים)")
    if any(len(label) == 0 or len(label) > 63 for label in domain.split(".")):
        return ValidationResult.fail("מבנה הדומיין לא תקין")

    return ValidationResult.ok()


def validate_phone(value: Optional[str]) -> ValidationResult:
    """Phone is optional: empty input is valid."""
    if _is_blank(value):
        return ValidationResult.ok()

    trimmed = str(value).strip()
    if not _PHONE_CHARS_RE.match(trimmed):
        return ValidationResult.fail("מספר טלפון יכול להכיל רק ספרות, רווחים, מקפים וסוגריים")

    digits = _PHONE_STRIP_RE.sub("", trimmed)
    if not digits:
        return ValidationResult.fail("מספר טלפון חייב להכיל לפחות ספרה אחת")

    if _MOBILE_RE.match(digits):
        if digits[:3] not in VALID_MOBILE_PREFIXES:
            return ValidationResult.fail("קידומת הנייד לא תקינה (050-059)")
        return ValidationResult.ok()

    if _LANDLINE_RE.match(digits):
        if digits[:2] not in VALID_AREA_CODES:
            return ValidationResult.fail("קוד אזור לא תקין (02, 03, 04, 08, 09)")
        return ValidationResult.ok()

    if _INTERNATIONAL_RE.match(digits):
        return ValidationResult.ok()

    return ValidationResult.fail(
        "מספר טלפון לא תקין. פורמטים תקינים: 05x-xxxxxxx (נייד), 0x-xxxxxxx (קווי), או +972-x-xxxxxxx"
    )


def validate_student_id(value: Optional[str]) -> ValidationResult:
    if _is_blank(value):
        return ValidationResult.fail("מספר סטודנט הוא שדה חובה")

    student_id = str(value).strip().upper()

    if not 4 <= len(student_id) <= 15:
        return ValidationResult.fail("מספר סטודנט חייב להכיל 4-15 תווים")
    if not student_id.isascii() or not _STUDENT_ID_RE.match(student_id):
        return ValidationResult.fail("מספר סטודנט יכול להכיל רק אותיות אנגליות ומספרים")
    if not any(ch.isalnum() for ch in student_id):
        return ValidationResult.fail("מספר סטודנט חייב להכיל לפחות תו אחד")
    if _RUN_OF_FOUR_RE.search(student_id):
        return ValidationResult.fail("מספר סטודנט לא יכול להכיל יותר מ-3 תווים זהים ברצף")
    if any(pattern in student_id for pattern in STUDENT_ID_BLACKLIST):
        return ValidationResult.fail("מספר סטודנט לא יכול להכיל רצף של תווים זהים")

    return ValidationResult.ok()


def validate_employee_id(value: Optional[str]) -> ValidationResult:
    if _is_blank(value):
        return ValidationResult.fail("מספר עובד הוא שדה חובה")

    employee_id = str(value).strip().upper()

    if not 7 <= len(employee_id) <= 10:
        return ValidationResult.fail("מספר עובד חייב להכיל 7-10 תווים")
    if not employee_id.isascii() or not _EMPLOYEE_ID_RE.match(employee_id):
        return ValidationResult.fail(
            f"מספר עובד חייב להיות בפורמט {EMPLOYEE_ID_PREFIX} + 4-6 ספרות (לדוגמה: EMP1001)"
        )

    numeric_part = employee_id[len(EMPLOYEE_ID_PREFIX):]
    if not 1000 <= int(numeric_part) <= 999999:
        return ValidationResult.fail("מספר העובד חייב להיות בין 1000 ל-999999")
    if _RUN_OF_FOUR_RE.search(numeric_part):
        return ValidationResult.fail("מספר עובד לא יכול להכיל יותר מ-3 ספרות זהות ברצף")

    return ValidationResult.ok()


def validate_course_code(value: Optional[str]) -> ValidationResult:
    if _is_blank(value):
        return ValidationResult.fail("קוד קורס הוא שדה חובה")

    code = str(value).strip().upper()

    if not 5 <= len(code) <= 8:
        return ValidationResult.fail("קוד קורס חייב להכיל 5-8 תווים")

    match = _COURSE_CODE_RE.match(code) if code.isascii() else None
    if not match:
        return ValidationResult.fail(
            "קוד קורס חייב להיות בפורמט: 2-4 אותיות אנגליות + 3-4 ספרות (לדוגמה: CS101, MATH201)"
        )

    subject, number = match.groups()
    if not 100 <= int(number) <= 9999:
        return ValidationResult.fail("מספר הקורס חייב להיות בין 100 ל-9999")

    if subject not in COMMON_SUBJECTS:
        logger.info("Course code uses uncommon subject abbreviation",
                    extra={"course_code": code, "subject": subject})

    return ValidationResult.ok()


def validate_password(value: Optional[str]) -> ValidationResult:
    if _is_blank(value):
        return ValidationResult.fail("סיסמה היא שדה חובה")

    password = str(value)

    if len(password) < 8:
        return ValidationResult.fail("סיסמה חייבת להכיל לפחות 8 תווים")
    if len(password) > 128:
        return ValidationResult.fail("סיסמה ארוכה מדי (מקסימום 128 תווים)")
    if not re.search(r"[a-zA-Z]", password):
        return ValidationResult.fail("סיסמה חייבת להכיל לפחות אות אחת")
    if not re.search(r"[0-9]", password):
        return ValidationResult.fail("סיסמה חייבת להכיל לפחות ספרה אחת")
    if not _PASSWORD_SYMBOL_RE.search(password):
        return ValidationResult.fail("סיסמה חייבת להכיל לפחות תו מיוחד אחד")

    lowered = password.lower()
    if any(pattern in lowered for pattern in WEAK_PASSWORD_PATTERNS):
        return ValidationResult.fail("סיסמה מכילה דפוס נפוץ ולא בטוח")

    return ValidationResult.ok()


def validate_academic_tracks(value: Optional[Sequence[str]]) -> ValidationResult:
    if not value:
        return ValidationResult.fail("חייב לבחור לפחות מסלול אקדמי אחד")

    limit = settings.MAX_ACADEMIC_TRACKS
    if len(value) > limit:
        return ValidationResult.fail(f"ניתן לבחור עד {limit} מסלולים אקדמיים")

    return ValidationResult.ok()


def validate_academic_year(value: Optional[str]) -> ValidationResult:
    """Academic year such as ``2023-2024`` (or ``2023/2024``); the end year follows the start year."""
    if _is_blank(value):
        return ValidationResult.fail("שנת לימודים היא שדה חובה")

    match = _ACADEMIC_YEAR_RE.match(str(value).strip())
    if not match:
        return ValidationResult.fail(
            "שנת לימודים חייבת להיות בפורמט: YYYY-YYYY או YYYY/YYYY (לדוגמה: 2023-2024)"
        )

    start_year, end_year = int(match.group(1)), int(match.group(2))
    if start_year < ACADEMIC_YEAR_MIN or start_year > get_utc_now().year + ACADEMIC_YEAR_LOOKAHEAD:
        return ValidationResult.fail("שנת התחלה לא סבירה (בין 2000 לעוד 5 שנים)")
    if end_year != start_year + 1:
        return ValidationResult.fail("שנת הסיום חייבת להיות השנה שאחרי שנת ההתחלה")

    return ValidationResult.ok()


def validate_academic_level(value: Optional[str]) -> ValidationResult:
    if _is_blank(value):
        return ValidationResult.fail("שלב אקדמי הוא שדה חובה")
    if str(value).strip() not in ACADEMIC_LEVELS:
        return ValidationResult.fail(f"שלב אקדמי לא תקין. אפשרויות: {', '.join(ACADEMIC_LEVELS)}")
    return ValidationResult.ok()


def validate_study_year(value: Any) -> ValidationResult:
    if value is None or (isinstance(value, str) and not value.strip()):
        return ValidationResult.fail("שנת לימודים היא שדה חובה")

    if isinstance(value, bool):
        return ValidationResult.fail("שנת לימודים חייבת להיות מספר")
    try:
        year = value if isinstance(value, int) else int(str(value).strip())
    except ValueError:
        return ValidationResult.fail("שנת לימודים חייבת להיות מספר")

    low, high = STUDY_YEAR_RANGE
    if not low <= year <= high:
        return ValidationResult.fail(f"שנת לימודים חייבת להיות בין {low} ל-{high}")

    return ValidationResult.ok()


def validate_semester(value: Optional[str]) -> ValidationResult:
    if _is_blank(value):
        return ValidationResult.fail("סמסטר הוא שדה חובה")
    if str(value).strip() not in SEMESTERS:
        return ValidationResult.fail(f"סמסטר לא תקין. אפשרויות: {', '.join(SEMESTERS)}")
    return ValidationResult.ok()


_FIELD_VALIDATORS: Dict[str, Callable[[Any], ValidationResult]] = {
    "full_name": validate_hebrew_name,
    "firstName": validate_hebrew_name,
    "lastName": validate_hebrew_name,
    "courseName": validate_hebrew_name,
    "course_name": validate_hebrew_name,
    "email": validate_email,
    "phone": validate_phone,
    "national_id": validate_israeli_id,
    "id": validate_israeli_id,
    "student_id": validate_student_id,
    "studentId": validate_student_id,
    "employee_id": validate_employee_id,
    "employeeId": validate_employee_id,
    "courseCode": validate_course_code,
    "course_code": validate_course_code,
    "password": validate_password,
    "academic_track_ids": validate_academic_tracks,
    "academicTracks": validate_academic_tracks,
    "academic_year": validate_academic_year,
    "academicYear": validate_academic_year,
    "academic_level": validate_academic_level,
    "academicLevel": validate_academic_level,
    "year": validate_study_year,
    "study_year": validate_study_year,
    "studyYear": validate_study_year,
    "semester": validate_semester,
}


def validate_field(name: str, value: Any) -> ValidationResult:
    """Validate one field by name for live form feedback; unknown fields pass."""
    validator = _FIELD_VALIDATORS.get(name)
    if validator is None:
        return ValidationResult.ok()
    return validator(value)
