"""Response envelopes shared by every endpoint"""

import math
from typing import Any, Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field


T = TypeVar('T')


class SuccessResponse(BaseModel, Generic[T]):
    """
    Example:
        {
            "success": true,
            "data": {...},
            "message": "สำเร็จ"
        }
    """
    success: bool = True
    data: T
    message: str = "สำเร็จ"


class ErrorDetail(BaseModel):
    code: str
    message: str
    # Field-level problems from request validation
    details: Optional[List[Any]] = None


class ErrorResponse(BaseModel):
    """
    Example:
        {
            "success": false,
            "error": {
                "code": "CONFLICT",
                "message": "การชำระเงินนี้ได้รับการตรวจสอบแล้ว"
            }
        }
    """
    success: bool = False
    error: ErrorDetail


class PaginationMeta(BaseModel):
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1, le=100)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit))


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    data: list[T]
    meta: PaginationMeta
    message: str = "สำเร็จ"
