"""Scheduled notification jobs: due-date reminders, overdue sweep, cleanup.

Every job takes an open session and an optional ``now`` so a run can be
replayed for a given instant. Records are processed one at a time with their
own commit; a failure is logged and the job moves on to the next record.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.config import settings
from billmate.models.billing import Bill
from billmate.models.communication import Notification
from billmate.models.enums import BillStatus, NotificationType
from billmate.models.user import User
from billmate.services.notification_service import NotificationService
from billmate.utils.time import get_utc_now, local_day_bounds, local_today

logger = logging.getLogger(__name__)

REMINDER_STATUSES = (BillStatus.PENDING, BillStatus.PAID)
OVERDUE_STATUSES = (BillStatus.PENDING, BillStatus.PAID, BillStatus.OVERDUE)


async def send_payment_reminders(
    db: AsyncSession, days_before: int, now: Optional[datetime] = None
) -> int:
    """
    Remind tenants whose bill falls due exactly ``days_before`` local days from today.

    Returns the number of reminders sent.
    """
    now = now or get_utc_now()
    start, end = local_day_bounds(local_today(now) + timedelta(days=days_before))

    result = await db.execute(
        select(Bill.id, Bill.tenant_id).where(
            Bill.status.in_(REMINDER_STATUSES),
            Bill.due_date >= start,
            Bill.due_date < end,
        )
    )
    targets = result.all()

    sent = 0
    for bill_id, tenant_id in targets:
        try:
            bill = await db.get(Bill, bill_id)
            tenant = await db.get(User, tenant_id)
            if tenant is None:
                continue
            await NotificationService.notify_payment_reminder(db, tenant, bill, days_before, now)
            await db.commit()
            sent += 1
        except Exception:
            await db.rollback()
            db.expunge_all()
            logger.exception("Payment reminder failed", extra={"bill_id": str(bill_id)})

    logger.info(
        "Sent %d payment reminders (%d days before due)",
        sent,
        days_before,
        extra={"count": sent, "days_before": days_before},
    )
    return sent


async def send_overdue_notifications(db: AsyncSession, now: Optional[datetime] = None) -> int:
    """
    Notify tenants of every unsettled bill past its due date.

    A tenant gets at most one overdue notice per bill within the dedup
    window. Pending bills are moved to ``overdue`` on the way.
    """
    now = now or get_utc_now()
    dedup_since = now - timedelta(hours=settings.OVERDUE_DEDUP_HOURS)

    result = await db.execute(
        select(Bill.id, Bill.tenant_id).where(
            Bill.status.in_(OVERDUE_STATUSES),
            Bill.due_date < now,
        )
    )
    targets = result.all()

    sent = 0
    for bill_id, tenant_id in targets:
        try:
            recent = await db.scalar(
                select(Notification.id)
                .where(
                    Notification.user_id == tenant_id,
                    Notification.bill_id == bill_id,
                    Notification.type == NotificationType.OVERDUE,
                    Notification.sent_at >= dedup_since,
                )
                .limit(1)
            )
            if recent is not None:
                continue

            bill = await db.get(Bill, bill_id)
            tenant = await db.get(User, tenant_id)
            if tenant is None:
                continue
            if bill.status == BillStatus.PENDING:
                bill.status = BillStatus.OVERDUE
            await NotificationService.notify_overdue(db, tenant, bill, now)
            await db.commit()
            sent += 1
        except Exception:
            await db.rollback()
            db.expunge_all()
            logger.exception("Overdue notification failed", extra={"bill_id": str(bill_id)})

    logger.info("Sent %d overdue notifications", sent, extra={"count": sent})
    return sent


async def cleanup_read_notifications(db: AsyncSession, now: Optional[datetime] = None) -> int:
    """Delete read notifications whose read time is past the retention window."""
    now = now or get_utc_now()
    cutoff = now - timedelta(days=settings.NOTIFICATION_RETENTION_DAYS)

    result = await db.execute(
        delete(Notification)
        .where(Notification.read.is_(True), Notification.read_at < cutoff)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    deleted = result.rowcount or 0
    logger.info("Cleaned up %d old notifications", deleted, extra={"count": deleted})
    return deleted
