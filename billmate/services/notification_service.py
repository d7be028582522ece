"""Notification Service - in-app notifications, templates and email fan-out"""

import asyncio
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.core.exceptions import NotFoundError, PermissionDeniedError
from billmate.models.billing import Bill
from billmate.models.communication import Notification, NotificationTemplate
from billmate.models.enums import NotificationChannel, NotificationType
from billmate.models.user import User
from billmate.schemas.notification import TemplateUpsert
from billmate.services import email_service
from billmate.utils.time import format_thai_date, get_utc_now, local_day_bounds, local_today

logger = logging.getLogger(__name__)

# Wording used when no active template exists for a type; also the seed for
# ``init_default_templates``.
DEFAULT_TEMPLATES: Dict[NotificationType, Dict[str, Any]] = {
    NotificationType.PAYMENT_REMINDER: {
        "name": "แจ้งเตือนการชำระเงิน",
        "subject": "แจ้งเตือนการชำระค่าเช่า - ห้อง {{room_number}}",
        "email_body": (
            "เรียน คุณ{{user_name}}\n"
            "นี่คือการแจ้งเตือนเกี่ยวกับการชำระค่าเช่าสำหรับห้อง {{room_number}}\n"
            "จำนวนเงิน: {{amount}} บาท\n"
            "วันครบกำหนด: {{due_date}}\n"
            "กรุณาชำระเงินภายในวันครบกำหนดเพื่อหลีกเลี่ยงค่าปรับ"
        ),
        "in_app_title": "แจ้งเตือนการชำระเงิน {{days_before}} วัน",
        "in_app_message": "กรุณาชำระค่าเช่าห้อง {{room_number}} จำนวน {{amount}} บาท ภายในวันที่ {{due_date}}",
        "variables": ["user_name", "room_number", "amount", "due_date", "days_before"],
    },
    NotificationType.PAYMENT_VERIFIED: {
        "name": "ยืนยันการชำระเงิน",
        "subject": "ยืนยันการชำระเงินเรียบร้อย - ห้อง {{room_number}}",
        "email_body": (
            "เรียน คุณ{{user_name}}\n"
            "เราได้รับและยืนยันการชำระเงินของคุณเรียบร้อยแล้ว\n"
            "ห้อง: {{room_number}}\n"
            "จำนวนเงิน: {{amount}} บาท\n"
            "วันที่ชำระ: {{payment_date}}"
        ),
        "in_app_title": "ยืนยันการชำระเงินเรียบร้อย",
        "in_app_message": "เราได้รับและยืนยันการชำระเงินของคุณสำหรับห้อง {{room_number}} จำนวน {{amount}} บาท",
        "variables": ["user_name", "room_number", "amount", "payment_date"],
    },
    NotificationType.PAYMENT_REJECTED: {
        "name": "ปฏิเสธการชำระเงิน",
        "subject": "ไม่สามารถยืนยันการชำระเงิน - ห้อง {{room_number}}",
        "email_body": (
            "เรียน คุณ{{user_name}}\n"
            "เราไม่สามารถยืนยันการชำระเงินของคุณได้\n"
            "ห้อง: {{room_number}}\n"
            "จำนวนเงิน: {{amount}} บาท\n"
            "เหตุผล: {{reason}}\n"
            "กรุณาติดต่อเจ้าหน้าที่เพื่อแก้ไขปัญหา"
        ),
        "in_app_title": "ไม่สามารถยืนยันการชำระได้",
        "in_app_message": "ไม่สามารถยืนยันการชำระเงินสำหรับห้อง {{room_number}} ได้ เพราะ {{reason}}",
        "variables": ["user_name", "room_number", "amount", "reason"],
    },
    NotificationType.OVERDUE: {
        "name": "แจ้งเตือนเกินกำหนดชำระ",
        "subject": "แจ้งเตือนเกินกำหนดชำระ - ห้อง {{room_number}}",
        "email_body": (
            "เรียน คุณ{{user_name}}\n"
            "การชำระค่าเช่าของคุณได้เกินกำหนดแล้ว\n"
            "ห้อง: {{room_number}}\n"
            "จำนวนเงิน: {{amount}} บาท\n"
            "วันครบกำหนด: {{due_date}}\n"
            "จำนวนวันที่เกินกำหนด: {{days_overdue}} วัน\n"
            "กรุณาชำระเงินโดยเร็วที่สุดเพื่อหลีกเลี่ยงค่าปรับเพิ่มเติม"
        ),
        "in_app_title": "เตือนการชำระเงินเกินกำหนด",
        "in_app_message": "กรุณาชำระค่าเช่าห้อง {{room_number}} จำนวน {{amount}} บาท ซึ่งเกินกำหนดวันที่ {{due_date}} แล้ว",
        "variables": ["user_name", "room_number", "amount", "due_date", "days_overdue"],
    },
    NotificationType.BILL_GENERATED: {
        "name": "สร้างบิลใหม่",
        "subject": "บิลค่าเช่าเดือน {{month}}/{{year}} - ห้อง {{room_number}}",
        "email_body": (
            "เรียน คุณ{{user_name}}\n"
            "บิลค่าเช่าของคุณสำหรับเดือน {{month}}/{{year}} ได้สร้างเรียบร้อยแล้ว\n"
            "ห้อง: {{room_number}}\n"
            "ค่าเช่า: {{rent_amount}} บาท\n"
            "ค่าน้ำ: {{water_amount}} บาท\n"
            "ค่าไฟ: {{electricity_amount}} บาท\n"
            "รวมทั้งหมด: {{total_amount}} บาท\n"
            "วันครบกำหนด: {{due_date}}\n"
            "กรุณาชำระเงินภายในวันครบกำหนด"
        ),
        "in_app_title": "บิลค่าเช่าใหม่",
        "in_app_message": "บิลค่าเช่าเดือน {{month}}/{{year}} สำหรับห้อง {{room_number}} จำนวน {{total_amount}} บาท ได้สร้างเรียบร้อยแล้ว",
        "variables": [
            "user_name", "room_number", "month", "year", "rent_amount",
            "water_amount", "electricity_amount", "total_amount", "due_date",
        ],
    },
}


def format_baht(value: Any) -> str:
    return f"{Decimal(str(value)):,.2f}"


def bill_variables(user: User, bill: Bill) -> Dict[str, Any]:
    """Placeholder values shared by every bill-related message."""
    return {
        "user_name": user.name,
        "room_number": bill.room.room_number if bill.room else "-",
        "amount": format_baht(bill.total_amount),
        "total_amount": format_baht(bill.total_amount),
        "rent_amount": format_baht(bill.rent_amount),
        "water_amount": format_baht(bill.water_amount),
        "electricity_amount": format_baht(bill.electricity_amount),
        "month": bill.month,
        "year": bill.year,
        "due_date": format_thai_date(bill.due_date),
    }


class NotificationService:
    """Service layer for notifications"""

    # --- Delivery ---
    @staticmethod
    async def get_active_template(
        db: AsyncSession, notification_type: NotificationType
    ) -> Optional[NotificationTemplate]:
        result = await db.execute(
            select(NotificationTemplate).where(
                NotificationTemplate.type == notification_type,
                NotificationTemplate.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def dispatch(
        db: AsyncSession,
        user: User,
        notification_type: NotificationType,
        variables: Dict[str, Any],
        bill_id: Optional[UUID] = None,
        now: Optional[datetime] = None,
    ) -> Notification:
        """
        Record the in-app notification and email the user when their email
        preferences allow it. The inbox record is written regardless of the
        in-app flags.

        The notification is added to the session but not committed; the
        caller owns the transaction.
        """
        now = now or get_utc_now()
        template = await NotificationService.get_active_template(db, notification_type)
        if template is None:
            template = NotificationTemplate(type=notification_type, **DEFAULT_TEMPLATES[notification_type])
        rendered = template.render(variables)

        notification = Notification(
            user_id=user.id,
            bill_id=bill_id,
            type=notification_type,
            title=rendered["in_app_title"],
            message=rendered["in_app_message"],
            read=False,
            sent_at=now,
        )
        db.add(notification)
        await db.flush()

        if user.should_send_notification(NotificationChannel.EMAIL, notification_type, now):
            await asyncio.to_thread(
                email_service.send_email, user.email, rendered["subject"], rendered["email_body"]
            )
        else:
            logger.debug(
                "Email suppressed by preferences",
                extra={"user_id": str(user.id), "type": notification_type.value},
            )
        return notification

    @staticmethod
    async def notify_payment_reminder(
        db: AsyncSession, user: User, bill: Bill, days_before: int, now: Optional[datetime] = None
    ) -> Notification:
        variables = bill_variables(user, bill)
        variables["days_before"] = days_before
        return await NotificationService.dispatch(
            db, user, NotificationType.PAYMENT_REMINDER, variables, bill.id, now
        )

    @staticmethod
    async def notify_overdue(
        db: AsyncSession, user: User, bill: Bill, now: Optional[datetime] = None
    ) -> Notification:
        now = now or get_utc_now()
        variables = bill_variables(user, bill)
        variables["days_overdue"] = max((now - bill.due_date).days, 0)
        return await NotificationService.dispatch(
            db, user, NotificationType.OVERDUE, variables, bill.id, now
        )

    @staticmethod
    async def notify_payment_verified(
        db: AsyncSession, user: User, bill: Bill, now: Optional[datetime] = None
    ) -> Notification:
        now = now or get_utc_now()
        variables = bill_variables(user, bill)
        variables["payment_date"] = format_thai_date(now)
        return await NotificationService.dispatch(
            db, user, NotificationType.PAYMENT_VERIFIED, variables, bill.id, now
        )

    @staticmethod
    async def notify_payment_rejected(
        db: AsyncSession, user: User, bill: Bill, reason: str, now: Optional[datetime] = None
    ) -> Notification:
        variables = bill_variables(user, bill)
        variables["reason"] = reason
        return await NotificationService.dispatch(
            db, user, NotificationType.PAYMENT_REJECTED, variables, bill.id, now
        )

    @staticmethod
    async def notify_bill_generated(
        db: AsyncSession, user: User, bill: Bill, now: Optional[datetime] = None
    ) -> Notification:
        return await NotificationService.dispatch(
            db, user, NotificationType.BILL_GENERATED, bill_variables(user, bill), bill.id, now
        )

    # --- Inbox ---
    @staticmethod
    async def list_for_user(
        db: AsyncSession, user_id: UUID, limit: int = 50
    ) -> Tuple[List[Notification], int]:
        """Latest notifications for a user and their unread count."""
        result = await db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.sent_at.desc())
            .limit(limit)
        )
        unread = await db.scalar(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id, Notification.read.is_(False)
            )
        )
        return list(result.scalars().all()), unread or 0

    @staticmethod
    async def get_notification(db: AsyncSession, notification_id: UUID, user: User) -> Notification:
        notification = await db.get(Notification, notification_id)
        if not notification:
            raise NotFoundError("ไม่พบการแจ้งเตือน")
        if notification.user_id != user.id and not user.is_admin:
            raise PermissionDeniedError("ไม่มีสิทธิ์เข้าถึงการแจ้งเตือนนี้")
        return notification

    @staticmethod
    async def mark_read(db: AsyncSession, notification_id: UUID, user: User) -> Notification:
        notification = await NotificationService.get_notification(db, notification_id, user)
        notification.mark_read()
        await db.commit()
        await db.refresh(notification)
        return notification

    @staticmethod
    async def mark_all_read(db: AsyncSession, user_id: UUID) -> int:
        result = await db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True, read_at=get_utc_now())
        )
        await db.commit()
        return result.rowcount or 0

    @staticmethod
    async def delete_notification(db: AsyncSession, notification_id: UUID, user: User) -> None:
        notification = await NotificationService.get_notification(db, notification_id, user)
        await db.delete(notification)
        await db.commit()

    @staticmethod
    async def get_stats(db: AsyncSession, now: Optional[datetime] = None) -> Dict[str, Any]:
        today_start, _ = local_day_bounds(local_today(now))
        week_start = today_start - timedelta(days=7)

        async def count(*criteria) -> int:
            return await db.scalar(select(func.count(Notification.id)).where(*criteria)) or 0

        sent_today = await count(Notification.sent_at >= today_start)
        sent_this_week = await count(Notification.sent_at >= week_start)
        unread = await count(Notification.read.is_(False))
        total_read = await count(Notification.read.is_(True))
        total = await count()

        by_type = {t.value: 0 for t in NotificationType}
        rows = await db.execute(
            select(Notification.type, func.count(Notification.id)).group_by(Notification.type)
        )
        for notification_type, type_count in rows.all():
            by_type[notification_type.value] = type_count

        return {
            "sent_today": sent_today,
            "sent_this_week": sent_this_week,
            "unread": unread,
            "total_read": total_read,
            "total": total,
            "read_rate": round(total_read / total * 100) if total else 0,
            "by_type": by_type,
        }

    # --- Templates ---
    @staticmethod
    async def list_templates(db: AsyncSession) -> List[NotificationTemplate]:
        result = await db.execute(select(NotificationTemplate).order_by(NotificationTemplate.type))
        return list(result.scalars().all())

    @staticmethod
    async def upsert_template(
        db: AsyncSession, template_in: TemplateUpsert, modified_by: UUID
    ) -> NotificationTemplate:
        """Create the template for a type, or overwrite it and bump its version."""
        result = await db.execute(
            select(NotificationTemplate).where(NotificationTemplate.type == template_in.type)
        )
        template = result.scalar_one_or_none()
        data = template_in.model_dump()

        if template is None:
            template = NotificationTemplate(**data, version=1, last_modified_by=modified_by)
            db.add(template)
        else:
            for field, value in data.items():
                setattr(template, field, value)
            template.version = (template.version or 0) + 1
            template.last_modified_by = modified_by

        await db.commit()
        await db.refresh(template)
        logger.info(
            "Notification template saved",
            extra={"type": template.type.value, "version": template.version},
        )
        return template

    @staticmethod
    async def init_default_templates(db: AsyncSession, modified_by: Optional[UUID] = None) -> int:
        """Insert the default template for every type that has none. Returns how many were created."""
        existing = set((await db.execute(select(NotificationTemplate.type))).scalars().all())
        created = 0
        for notification_type, defaults in DEFAULT_TEMPLATES.items():
            if notification_type in existing:
                continue
            db.add(NotificationTemplate(type=notification_type, last_modified_by=modified_by, **defaults))
            created += 1
        await db.commit()
        return created

    @staticmethod
    async def delete_for_bill(db: AsyncSession, bill_id: UUID) -> None:
        await db.execute(delete(Notification).where(Notification.bill_id == bill_id))
