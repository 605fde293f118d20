"""Role profile and catalog form schemas.

Field rules live in app.services.validators; these models only shape the
request bodies of the validation endpoints.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class StudentForm(BaseModel):
    full_name: str = ""
    student_id: str = ""
    national_id: Optional[str] = None
    email: str = ""
    phone: Optional[str] = None
    academic_track_ids: List[str] = Field(default_factory=list)
    year: Optional[int] = None
    status: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class LecturerForm(BaseModel):
    full_name: str = ""
    employee_id: str = ""
    national_id: Optional[str] = None
    email: str = ""
    phone: Optional[str] = None
    academic_track_ids: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


class CourseForm(BaseModel):
    course_name: str = ""
    course_code: str = ""
    lecturer_id: Optional[str] = None
    academic_track_ids: List[str] = Field(default_factory=list)
    description: Optional[str] = None

    model_config = ConfigDict(extra="allow")
