"""Profile endpoints for the signed-in user"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.api import deps
from billmate.models.user import User
from billmate.schemas.responses import SuccessResponse
from billmate.schemas.user import (
    NotificationPreferences,
    PasswordChange,
    ProfileUpdate,
    UserResponse,
)
from billmate.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=SuccessResponse[UserResponse])
async def get_profile(current_user: User = Depends(deps.get_current_user)) -> Any:
    return SuccessResponse(data=UserResponse.model_validate(current_user))


@router.put("", response_model=SuccessResponse[UserResponse])
async def update_profile(
    profile_in: ProfileUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    user = await UserService.update_profile(db, current_user, profile_in)
    return SuccessResponse(data=UserResponse.model_validate(user), message="อัปเดตข้อมูลส่วนตัวสำเร็จ")


@router.put("/password", response_model=SuccessResponse)
async def change_password(
    body: PasswordChange,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    await UserService.change_password(db, current_user, body.current_password, body.new_password)
    return SuccessResponse(data=None, message="เปลี่ยนรหัสผ่านสำเร็จ")


@router.get("/notifications", response_model=SuccessResponse[NotificationPreferences])
async def get_notification_preferences(current_user: User = Depends(deps.get_current_user)) -> Any:
    prefs = UserService.get_notification_preferences(current_user)
    return SuccessResponse(data=NotificationPreferences.model_validate(prefs))


@router.put("/notifications", response_model=SuccessResponse[NotificationPreferences])
async def update_notification_preferences(
    prefs_in: NotificationPreferences,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    prefs = await UserService.update_notification_preferences(db, current_user.id, prefs_in)
    return SuccessResponse(
        data=NotificationPreferences.model_validate(prefs),
        message="บันทึกการตั้งค่าการแจ้งเตือนสำเร็จ",
    )
