"""User management endpoints (admin)"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.api import deps
from billmate.models.enums import UserRole
from billmate.models.user import User
from billmate.schemas.responses import PaginatedResponse, PaginationMeta, SuccessResponse
from billmate.schemas.user import UserCreate, UserResponse
from billmate.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    role: Optional[UserRole] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    users, total = await UserService.get_users(db, role=role, skip=(page - 1) * limit, limit=limit)
    return PaginatedResponse(
        data=[UserResponse.model_validate(u) for u in users],
        meta=PaginationMeta.build(page, limit, total),
    )


@router.post("", response_model=SuccessResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: UserCreate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    user = await UserService.create_user(
        db,
        email=user_in.email,
        password=user_in.password,
        name=user_in.name,
        role=user_in.role,
        phone=user_in.phone,
    )
    return SuccessResponse(data=UserResponse.model_validate(user), message="สร้างผู้ใช้สำเร็จ")
