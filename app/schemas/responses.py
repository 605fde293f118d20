"""Standardized API Response Schemas"""

from typing import Dict, Generic, Optional, TypeVar
from pydantic import BaseModel


T = TypeVar('T')


class SuccessResponse(BaseModel, Generic[T]):
    """
    Standard success response envelope.

    Example:
        {
            "success": true,
            "data": {...},
            "message": "Operation successful"
        }
    """
    success: bool = True
    data: T
    message: str = "Operation successful"


class ErrorDetail(BaseModel):
    """Error details structure; ``fields`` maps offending field -> reason"""
    code: str
    message: str
    fields: Optional[Dict[str, str]] = None


class ErrorResponse(BaseModel):
    """
    Standard error response envelope.

    Example:
        {
            "success": false,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "הנתונים שהוזנו אינם תקינים",
                "fields": {"national_id": "תעודת זהות לא תקינה (ספרת ביקורת שגויה)"}
            }
        }
    """
    success: bool = False
    error: ErrorDetail
