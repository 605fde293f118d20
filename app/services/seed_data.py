"""Demo catalog seeded into empty collections on startup"""

import logging
from typing import Dict, List

from app.backends.base import RecordStore
from app.models.enums import Collection

logger = logging.getLogger(__name__)

ACADEMIC_TRACKS: List[dict] = [
    {"id": "cs-undergrad", "name": "מדעי המחשב - תואר ראשון", "degree": "undergraduate", "department": "מדעים והנדסה"},
    {"id": "swe-undergrad", "name": "הנדסת תוכנה - תואר ראשון", "degree": "undergraduate", "department": "מדעים והנדסה"},
    {"id": "math-undergrad", "name": "מתמטיקה - תואר ראשון", "degree": "undergraduate", "department": "מדעים והנדסה"},
    {"id": "physics-undergrad", "name": "פיזיקה - תואר ראשון", "degree": "undergraduate", "department": "מדעים והנדסה"},
    {"id": "law-undergrad", "name": "משפטים - תואר ראשון", "degree": "undergraduate", "department": "משפטים"},
    {"id": "business-undergrad", "name": "מנהל עסקים - תואר ראשון", "degree": "undergraduate", "department": "כלכלה ועסקים"},
    {"id": "business-grad", "name": "מנהל עסקים - תואר שני", "degree": "graduate", "department": "כלכלה ועסקים"},
    {"id": "psychology-undergrad", "name": "פסיכולוגיה - תואר ראשון", "degree": "undergraduate", "department": "מדעי החברה"},
    {"id": "education-grad", "name": "חינוך - תואר שני", "degree": "graduate", "department": "מדעי החברה"},
    {"id": "cs-grad", "name": "מדעי המחשב - תואר שני", "degree": "graduate", "department": "מדעים והנדסה"},
]

COURSES: List[dict] = [
    {"id": "course-001", "course_name": "מבוא למדעי המחשב", "course_code": "CS101", "lecturer_id": "lecturer-001",
     "academic_track_ids": ["cs-undergrad", "swe-undergrad"],
     "description": "קורס יסודות המציג עקרונות בסיסיים בתכנות, אלגוריתמיקה ומבנה המחשב."},
    {"id": "course-002", "course_name": "מבני נתונים", "course_code": "CS201", "lecturer_id": "lecturer-002",
     "academic_track_ids": ["cs-undergrad", "swe-undergrad"],
     "description": "קורס מתקדם הבוחן דרכים יעילות לארגון וניהול נתונים."},
    {"id": "course-003", "course_name": "אלגברה לינארית", "course_code": "MA101", "lecturer_id": "lecturer-003",
     "academic_track_ids": ["math-undergrad", "cs-undergrad", "swe-undergrad"],
     "description": "עקרונות מתמטיים חיוניים למדעי המחשב וההנדסה."},
    {"id": "course-004", "course_name": "מבוא למשפט חוקתי", "course_code": "LAW101", "lecturer_id": "lecturer-004",
     "academic_track_ids": ["law-undergrad"],
     "description": "יסודות המשפט הציבורי והחוקתי בישראל."},
    {"id": "course-005", "course_name": "מיקרו כלכלה", "course_code": "ECO101", "lecturer_id": "lecturer-005",
     "academic_track_ids": ["business-undergrad"],
     "description": "ניתוח התנהגות צרכנים ופירמות בשוק."},
    {"id": "course-006", "course_name": "אסטרטגיה עסקית", "course_code": "BUS700", "lecturer_id": "lecturer-005",
     "academic_track_ids": ["business-grad"],
     "description": "קורס מתקדם בפיתוח ויישום אסטרטגיות עסקיות."},
    {"id": "course-007", "course_name": "פסיכולוגיה קוגניטיבית", "course_code": "PSY202", "lecturer_id": "lecturer-006",
     "academic_track_ids": ["psychology-undergrad", "cs-grad"],
     "description": "חקר תהליכי עיבוד המידע במוח האנושי."},
    {"id": "course-008", "course_name": "למידת מכונה", "course_code": "CS550", "lecturer_id": "lecturer-001",
     "academic_track_ids": ["cs-grad"],
     "description": "אלגוריתמים המאפשרים למערכות ללמוד מנתונים."},
]

LECTURERS: List[dict] = [
    {"id": "lecturer-001", "full_name": 'ד"ר שרה לוי', "email": "sarah.levy@ono.ac.il",
     "academic_track_ids": ["cs-undergrad", "swe-undergrad", "cs-grad"]},
    {"id": "lecturer-002", "full_name": "פרופ׳ מיכאל כהן", "email": "michael.cohen@ono.ac.il",
     "academic_track_ids": []},
    {"id": "lecturer-003", "full_name": 'ד"ר רחל אברמס', "email": "rachel.abrams@ono.ac.il",
     "academic_track_ids": ["math-undergrad"]},
    {"id": "lecturer-004", "full_name": 'עו"ד דוד רוזנברג', "email": "david.rosenberg@ono.ac.il",
     "academic_track_ids": ["law-undergrad"]},
    {"id": "lecturer-005", "full_name": 'ד"ר מיכל גולדשטיין', "email": "michal.goldstein@ono.ac.il",
     "academic_track_ids": ["business-undergrad", "business-grad"]},
    {"id": "lecturer-006", "full_name": 'ד"ר יעל שחר', "email": "yael.shahar@ono.ac.il",
     "academic_track_ids": ["psychology-undergrad", "education-grad"]},
]

STUDENTS: List[dict] = [
    {"id": "student-001", "full_name": "אליהו כהן", "student_id": "STU001", "email": "eli.cohen@mail.com",
     "academic_track_ids": ["cs-undergrad"]},
    {"id": "student-002", "full_name": "שרה ישראלי", "student_id": "STU002", "email": "sara.israeli@mail.com",
     "academic_track_ids": ["law-undergrad", "business-undergrad"]},
    {"id": "student-003", "full_name": "יוסי חיים", "student_id": "STU003", "email": "yossi.haim@mail.com",
     "academic_track_ids": []},
    {"id": "student-004", "full_name": "רונית גולד", "student_id": "STU004", "email": "ronit.gold@mail.com",
     "academic_track_ids": ["business-grad"]},
    {"id": "student-005", "full_name": "דניאל לוי", "student_id": "STU005", "email": "daniel.levi@mail.com",
     "academic_track_ids": ["psychology-undergrad"]},
]

SEED_COLLECTIONS: Dict[str, List[dict]] = {
    Collection.ACADEMIC_TRACKS.value: ACADEMIC_TRACKS,
    Collection.COURSES.value: COURSES,
    Collection.LECTURERS.value: LECTURERS,
    Collection.STUDENTS.value: STUDENTS,
}


async def seed_demo_data(store: RecordStore) -> List[str]:
    """
    Seed each demo collection that is currently empty.

    Returns:
        Names of the collections that were seeded
    """
    seeded = []
    for collection, records in SEED_COLLECTIONS.items():
        if await store.list_records(collection):
            continue
        await store.replace_collection(collection, [dict(r) for r in records])
        seeded.append(collection)

    if seeded:
        logger.info("Seeded demo data", extra={"collections": seeded, "store": store.name})
    return seeded
