from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from app.api import deps
from app.core.exceptions import NotFound
from app.schemas.responses import SuccessResponse
from app.schemas.user import User
from app.services.entity_service import EntityAccessor

router = APIRouter()


@router.get("/{collection}", response_model=SuccessResponse[List[Dict[str, Any]]])
async def list_records(
    accessor: EntityAccessor = Depends(deps.get_accessor),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """All records of a collection, sorted by display name where records have one"""
    records = await accessor.list()
    return SuccessResponse(data=records, message=f"{len(records)} records")


@router.post("/{collection}/filter", response_model=SuccessResponse[List[Dict[str, Any]]])
async def filter_records(
    criteria: Dict[str, Any],
    accessor: EntityAccessor = Depends(deps.get_accessor),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Records matching every key of the criteria.
    A list-valued record field matches when it contains the value.
    """
    records = await accessor.filter(criteria)
    return SuccessResponse(data=records, message=f"{len(records)} records")


@router.get("/{collection}/{record_id}", response_model=SuccessResponse[Dict[str, Any]])
async def get_record(
    record_id: str,
    accessor: EntityAccessor = Depends(deps.get_accessor),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    return SuccessResponse(data=await accessor.get(record_id), message="Record retrieved")


@router.post("/{collection}", response_model=SuccessResponse[Dict[str, Any]],
             status_code=status.HTTP_201_CREATED)
async def create_record(
    data: Dict[str, Any],
    accessor: EntityAccessor = Depends(deps.get_accessor),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Validate and create a record; validation failures return every field error at once"""
    record = await accessor.create(data)
    return SuccessResponse(data=record, message="Record created")


@router.patch("/{collection}/{record_id}", response_model=SuccessResponse[Dict[str, Any]])
async def update_record(
    record_id: str,
    data: Dict[str, Any],
    accessor: EntityAccessor = Depends(deps.get_accessor),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    record = await accessor.update(record_id, data)
    if record is None:
        raise NotFound(accessor.collection, record_id)
    return SuccessResponse(data=record, message="Record updated")


@router.delete("/{collection}/{record_id}", response_model=SuccessResponse[Dict[str, bool]])
async def delete_record(
    record_id: str,
    accessor: EntityAccessor = Depends(deps.get_accessor),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Delete a record; ``success`` is false when it did not exist"""
    result = await accessor.delete(record_id)
    return SuccessResponse(
        success=result["success"],
        data=result,
        message="Record deleted" if result["success"] else "Record not found",
    )
