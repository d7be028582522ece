"""Notification endpoints - tenant inbox, admin stats, manual sends and templates"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.api import deps
from billmate.jobs import scheduler
from billmate.models.user import User
from billmate.schemas.notification import (
    ManualSendRequest,
    NotificationList,
    NotificationResponse,
    NotificationStats,
    TemplateResponse,
    TemplateUpsert,
)
from billmate.schemas.responses import SuccessResponse
from billmate.services.notification_service import NotificationService

router = APIRouter()

# Manual send type -> scheduled job
_MANUAL_JOBS = {
    "reminder_5days": "payment-reminder-5-days",
    "reminder_1day": "payment-reminder-1-day",
    "overdue": "overdue-notifications",
}


@router.get("", response_model=SuccessResponse[NotificationList])
async def list_notifications(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Latest 50 notifications for the signed-in user and the unread count."""
    notifications, unread = await NotificationService.list_for_user(db, current_user.id)
    return SuccessResponse(
        data=NotificationList(
            notifications=[NotificationResponse.model_validate(n) for n in notifications],
            unread_count=unread,
        )
    )


@router.put("/mark-all-read", response_model=SuccessResponse)
async def mark_all_read(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    updated = await NotificationService.mark_all_read(db, current_user.id)
    return SuccessResponse(data={"updated": updated}, message="ทำเครื่องหมายอ่านทั้งหมดแล้ว")


@router.get("/stats", response_model=SuccessResponse[NotificationStats])
async def notification_stats(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return SuccessResponse(data=NotificationStats(**await NotificationService.get_stats(db)))


@router.post("/send", response_model=SuccessResponse)
async def send_notifications(
    body: ManualSendRequest,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Run one of the reminder jobs now instead of waiting for its schedule."""
    sent = await scheduler.run_job(db, _MANUAL_JOBS[body.type])
    return SuccessResponse(data={"sent": sent}, message=f"ส่งการแจ้งเตือน {sent} รายการ")


# --- Templates ---
@router.get("/templates", response_model=SuccessResponse[list[TemplateResponse]])
async def list_templates(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    templates = await NotificationService.list_templates(db)
    return SuccessResponse(data=[TemplateResponse.model_validate(t) for t in templates])


@router.post("/templates", response_model=SuccessResponse[TemplateResponse])
async def save_template(
    template_in: TemplateUpsert,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Create the template for a type, or replace it (the version goes up by one)."""
    template = await NotificationService.upsert_template(db, template_in, current_user.id)
    return SuccessResponse(data=TemplateResponse.model_validate(template), message="บันทึกเทมเพลตสำเร็จ")


@router.post("/templates/init", response_model=SuccessResponse)
async def init_templates(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    created = await NotificationService.init_default_templates(db, current_user.id)
    return SuccessResponse(data={"created": created}, message=f"สร้างเทมเพลตเริ่มต้น {created} รายการ")


# --- Single notification ---
@router.get("/{notification_id}", response_model=SuccessResponse[NotificationResponse])
async def get_notification(
    notification_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    notification = await NotificationService.get_notification(db, notification_id, current_user)
    return SuccessResponse(data=NotificationResponse.model_validate(notification))


@router.put("/{notification_id}/read", response_model=SuccessResponse[NotificationResponse])
async def mark_read(
    notification_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    notification = await NotificationService.mark_read(db, notification_id, current_user)
    return SuccessResponse(data=NotificationResponse.model_validate(notification))


@router.delete("/{notification_id}", response_model=SuccessResponse)
async def delete_notification(
    notification_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    await NotificationService.delete_notification(db, notification_id, current_user)
    return SuccessResponse(data=None, message="ลบการแจ้งเตือนสำเร็จ")
