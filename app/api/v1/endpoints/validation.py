from typing import Any, Optional

from fastapi import APIRouter, Depends

from app.api import deps
from app.schemas.profile import CourseForm, LecturerForm, StudentForm
from app.schemas.responses import SuccessResponse
from app.schemas.validation import FieldValidationRequest, FormValidationResult, ValidationResult
from app.services import form_validation
from app.services.validators import validate_field

router = APIRouter()


@router.post("/field", response_model=SuccessResponse[ValidationResult])
async def check_field(body: FieldValidationRequest) -> Any:
    """Live validation of a single form field"""
    return SuccessResponse(data=validate_field(body.name, body.value), message="Field validated")


@router.post("/students", response_model=SuccessResponse[FormValidationResult])
async def check_student_form(
    form: StudentForm,
    exclude_id: Optional[str] = None,
    container: deps.ServiceContainer = Depends(deps.get_container),
) -> Any:
    """
    Validate a student form without saving it.
    Pass ``exclude_id`` when editing so the record does not collide with itself.
    """
    result = await form_validation.validate_student_form(
        form.model_dump(exclude_unset=True), container.store, exclude_id
    )
    return SuccessResponse(data=result, message="Form validated")


@router.post("/lecturers", response_model=SuccessResponse[FormValidationResult])
async def check_lecturer_form(
    form: LecturerForm,
    exclude_id: Optional[str] = None,
    container: deps.ServiceContainer = Depends(deps.get_container),
) -> Any:
    result = await form_validation.validate_lecturer_form(
        form.model_dump(exclude_unset=True), container.store, exclude_id
    )
    return SuccessResponse(data=result, message="Form validated")


@router.post("/courses", response_model=SuccessResponse[FormValidationResult])
async def check_course_form(
    form: CourseForm,
    exclude_id: Optional[str] = None,
    container: deps.ServiceContainer = Depends(deps.get_container),
) -> Any:
    result = await form_validation.validate_course_form(
        form.model_dump(exclude_unset=True), container.store, exclude_id
    )
    return SuccessResponse(data=result, message="Form validated")
