"""Demo account directory used when the primary auth backend is unreachable.

Every account accepts the shared ``DEMO_PASSWORD`` unless the cached user
carries its own password override.
"""

import copy
from typing import Any, Dict, Optional

DEMO_USERS: Dict[str, Dict[str, Any]] = {
    "student@ono.ac.il": {
        "id": "user-001",
        "email": "student@ono.ac.il",
        "full_name": "אליהו כהן",
        "roles": ["student"],
        "current_role": "student",
        "student_id": "STU001",
        "academic_track_ids": ["cs-undergrad"],
    },
    "lecturer@ono.ac.il": {
        "id": "user-002",
        "email": "lecturer@ono.ac.il",
        "full_name": "פרופ׳ מיכאל כהן",
        "roles": ["lecturer"],
        "current_role": "lecturer",
        "academic_track_ids": [],
    },
    "admin@ono.ac.il": {
        "id": "user-003",
        "email": "admin@ono.ac.il",
        "full_name": "משה אדמיניסטרטור",
        "roles": ["admin"],
        "current_role": "admin",
    },
    "student.lecturer@ono.ac.il": {
        "id": "user-004",
        "email": "student.lecturer@ono.ac.il",
        "full_name": "מיכל דוקטורנטית",
        "roles": ["student", "lecturer"],
        "current_role": "student",
        "student_id": "PhD002",
        "lecturer_track_ids": ["cs-undergrad"],
        "academic_track_ids": ["cs-grad"],
    },
    "lecturer.admin@ono.ac.il": {
        "id": "user-005",
        "email": "lecturer.admin@ono.ac.il",
        "full_name": "פרופ׳ דוד ראש המחלקה",
        "roles": ["lecturer", "admin"],
        "current_role": "lecturer",
        "academic_track_ids": ["law-undergrad", "business-undergrad", "business-grad"],
    },
    "all.roles@ono.ac.il": {
        "id": "user-006",
        "email": "all.roles@ono.ac.il",
        "full_name": 'ד"ר רונה סופר יוזר',
        "roles": ["student", "lecturer", "admin"],
        "current_role": "admin",
        "student_id": "MBA003",
        "academic_track_ids": ["business-grad"],
        "lecturer_track_ids": [],
    },
}


def find_demo_user(email: str) -> Optional[Dict[str, Any]]:
    """Fresh copy of the demo account for ``email`` (exact, trimmed, lower-cased match)."""
    user = DEMO_USERS.get((email or "").strip().lower())
    return copy.deepcopy(user) if user else None
