"""Authentication endpoints - login and first admin bootstrap"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.api import deps
from billmate.core import security
from billmate.core.rate_limit import limiter
from billmate.schemas.responses import SuccessResponse
from billmate.schemas.user import AdminBootstrap, LoginRequest, Token, UserResponse
from billmate.services.user_service import UserService

router = APIRouter()


@router.post("/login", response_model=SuccessResponse[Token])
@limiter.limit("10/minute")
async def login(
    request: Request,
    login_data: LoginRequest,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Exchange email and password for a JWT access token."""
    user = await UserService.authenticate_user(db, email=login_data.email, password=login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="อีเมลหรือรหัสผ่านไม่ถูกต้อง",
        )

    access_token = security.create_user_token(user.id, user.role.value)
    return SuccessResponse(
        data=Token(access_token=access_token, role=user.role, user_id=str(user.id)),
        message="เข้าสู่ระบบสำเร็จ",
    )


@router.post("/init-admin", response_model=SuccessResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def init_admin(
    admin_in: AdminBootstrap,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Create the first admin account. Returns 409 once an admin exists."""
    user = await UserService.bootstrap_admin(
        db, admin_in.email, admin_in.password, admin_in.name, admin_in.phone
    )
    return SuccessResponse(data=UserResponse.model_validate(user), message="สร้างผู้ดูแลระบบสำเร็จ")
