"""Payment Service - slip upload, amount matching and admin review"""

import logging
from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.config import settings
from billmate.core.exceptions import (
    ConflictError,
    DomainValidationError,
    NotFoundError,
    PermissionDeniedError,
)
from billmate.models.billing import Bill, Payment
from billmate.models.enums import BillStatus, PaymentStatus
from billmate.models.user import User
from billmate.schemas.billing import AmountCheckResponse, OcrData, PaymentUpload
from billmate.services import storage_service
from billmate.services.notification_service import NotificationService
from billmate.utils.time import get_utc_now, to_local

logger = logging.getLogger(__name__)


def _as_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except ArithmeticError:
        return None


def evaluate_amount(
    ocr_data: Optional[Dict[str, Any]],
    qr_data: Optional[Dict[str, Any]],
    bill_amount: Any,
) -> AmountCheckResponse:
    """
    Compare the amount read from a slip with the bill total.

    The OCR amount wins when present; otherwise the QR amount is used and
    the source is reported as "qr". With neither, the result is
    "cannot_verify", which is not the same as a mismatch.
    """
    bill_total = Decimal(str(bill_amount))
    effective = _as_decimal((ocr_data or {}).get("amount"))
    source = "ocr"
    if effective is None:
        effective = _as_decimal((qr_data or {}).get("amount"))
        source = "qr"

    if effective is None:
        return AmountCheckResponse(bill_amount=bill_total, result="cannot_verify")

    difference = effective - bill_total
    is_match = abs(difference) < Decimal(str(settings.AMOUNT_MATCH_TOLERANCE))
    return AmountCheckResponse(
        effective_amount=effective,
        source=source,
        bill_amount=bill_total,
        difference=difference,
        is_match=is_match,
        result="match" if is_match else "mismatch",
    )


class PaymentService:
    """Service layer for payments"""

    @staticmethod
    def check_amount(payment: Payment, bill: Bill) -> AmountCheckResponse:
        return evaluate_amount(payment.ocr_data, payment.qr_data, bill.total_amount)

    @staticmethod
    async def upload_payment(db: AsyncSession, user: User, upload_in: PaymentUpload) -> Payment:
        """
        Store the slip and open a pending payment for the bill.

        Raises:
            NotFoundError: Bill does not exist
            PermissionDeniedError: A tenant uploading against someone else's bill
            ConflictError: Bill already verified
        """
        bill = await db.get(Bill, upload_in.bill_id)
        if not bill:
            raise NotFoundError("ไม่พบบิลที่ระบุ")
        if not user.is_admin and bill.tenant_id != user.id:
            raise PermissionDeniedError("ไม่มีสิทธิ์ชำระบิลนี้")
        if bill.status == BillStatus.VERIFIED:
            raise ConflictError("บิลนี้ได้รับการยืนยันการชำระแล้ว")

        content, ext = storage_service.decode_slip(upload_in.slip_image_base64, upload_in.content_type)
        slip_url = await storage_service.upload(
            f"slips/{bill.id}", ext, content, upload_in.content_type
        )

        payment = Payment(
            bill_id=bill.id,
            user_id=bill.tenant_id,
            slip_image_url=slip_url,
            ocr_data=upload_in.ocr_data.model_dump(exclude_none=True),
            qr_data=upload_in.qr_data.model_dump(exclude_none=True),
            status=PaymentStatus.PENDING,
        )
        db.add(payment)
        bill.status = BillStatus.PAID

        await db.commit()
        await db.refresh(payment)
        logger.info(
            "Payment slip uploaded",
            extra={"payment_id": str(payment.id), "bill_id": str(bill.id)},
        )
        return payment

    @staticmethod
    async def list_payments(
        db: AsyncSession,
        user: User,
        status: Optional[PaymentStatus] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Payment], int]:
        """Tenants only see their own payments; admins see all."""
        criteria = []
        if not user.is_admin:
            criteria.append(Payment.user_id == user.id)
        if status is not None:
            criteria.append(Payment.status == status)

        total = await db.scalar(select(func.count(Payment.id)).where(*criteria)) or 0
        result = await db.execute(
            select(Payment)
            .where(*criteria)
            .order_by(Payment.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def get_payment(db: AsyncSession, payment_id: UUID, user: Optional[User] = None) -> Payment:
        payment = await db.get(Payment, payment_id)
        if not payment:
            raise NotFoundError("ไม่พบข้อมูลการชำระเงิน")
        if user is not None and not user.is_admin and payment.user_id != user.id:
            raise PermissionDeniedError("ไม่มีสิทธิ์เข้าถึงข้อมูลการชำระเงินนี้")
        return payment

    @staticmethod
    async def verify_payment(
        db: AsyncSession,
        payment_id: UUID,
        admin: User,
        approved: bool,
        rejection_reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[Payment, AmountCheckResponse]:
        """
        Approve or reject a pending payment.

        Approval never depends on the amount check; the check is returned so
        the caller can show a mismatch warning.

        Raises:
            DomainValidationError: Rejection without a reason
            NotFoundError: Unknown payment
            ConflictError: Payment already reviewed
        """
        reason = (rejection_reason or "").strip()
        if not approved and not reason:
            raise DomainValidationError("กรุณาระบุเหตุผลในการปฏิเสธ")

        now = now or get_utc_now()
        payment = await PaymentService.get_payment(db, payment_id)
        if payment.status != PaymentStatus.PENDING:
            raise ConflictError("การชำระเงินนี้ได้รับการตรวจสอบแล้ว")

        new_status = PaymentStatus.VERIFIED if approved else PaymentStatus.REJECTED
        # Conditional update so two reviewers racing on the same payment
        # cannot both win.
        result = await db.execute(
            update(Payment)
            .where(Payment.id == payment_id, Payment.status == PaymentStatus.PENDING)
            .values(
                status=new_status,
                verified_by=admin.id,
                verified_at=now,
                rejection_reason=None if approved else reason,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await db.rollback()
            raise ConflictError("การชำระเงินนี้ได้รับการตรวจสอบแล้ว")
        await db.refresh(payment)

        bill = await db.get(Bill, payment.bill_id)
        tenant = await db.get(User, payment.user_id)
        check = PaymentService.check_amount(payment, bill)

        if approved:
            bill.status = BillStatus.VERIFIED
            if tenant is not None:
                await NotificationService.notify_payment_verified(db, tenant, bill, now)
        else:
            bill.status = await PaymentService._status_after_reject(db, bill, now)
            if tenant is not None:
                await NotificationService.notify_payment_rejected(db, tenant, bill, reason, now)

        await db.commit()
        await db.refresh(payment)
        logger.info(
            "Payment reviewed",
            extra={
                "payment_id": str(payment.id),
                "status": new_status.value,
                "amount_check": check.result,
            },
        )
        return payment, check

    @staticmethod
    async def _status_after_reject(db: AsyncSession, bill: Bill, now: datetime) -> BillStatus:
        """
        Bill status once a slip is rejected. Another verified slip keeps the
        bill verified and another pending slip keeps it paid; otherwise the
        bill reopens.
        """
        if bill.status == BillStatus.VERIFIED:
            return BillStatus.VERIFIED
        remaining = await db.execute(
            select(Payment.status).where(
                Payment.bill_id == bill.id,
                Payment.status.in_([PaymentStatus.PENDING, PaymentStatus.VERIFIED]),
            )
        )
        statuses = set(remaining.scalars().all())
        if PaymentStatus.VERIFIED in statuses:
            return BillStatus.VERIFIED
        if PaymentStatus.PENDING in statuses:
            return BillStatus.PAID
        return BillStatus.OVERDUE if bill.due_date < now else BillStatus.PENDING

    @staticmethod
    async def update_ocr_data(db: AsyncSession, payment_id: UUID, ocr_in: OcrData) -> Payment:
        """
        Apply an admin correction to the slip fields. Fields left out of the
        request keep their stored value.
        """
        payment = await PaymentService.get_payment(db, payment_id)
        if payment.status != PaymentStatus.PENDING:
            raise ConflictError("แก้ไขข้อมูลได้เฉพาะการชำระเงินที่รอตรวจสอบ")

        merged = dict(payment.ocr_data or {})
        merged.update(ocr_in.model_dump(exclude_unset=True))
        payment.ocr_data = merged

        await db.commit()
        await db.refresh(payment)
        logger.info("OCR data corrected", extra={"payment_id": str(payment.id)})
        return payment

    @staticmethod
    async def get_analytics(db: AsyncSession) -> Dict[str, Any]:
        status_counts = {s.value: 0 for s in PaymentStatus}
        rows = await db.execute(
            select(Payment.status, func.count(Payment.id)).group_by(Payment.status)
        )
        for payment_status, count in rows.all():
            status_counts[payment_status.value] = count

        verified_rows = await db.execute(
            select(Payment.verified_at, Bill.total_amount)
            .join(Bill, Bill.id == Payment.bill_id)
            .where(Payment.status == PaymentStatus.VERIFIED)
        )

        total_revenue = Decimal("0")
        monthly: Dict[Tuple[int, int], Decimal] = defaultdict(Decimal)
        for verified_at, amount in verified_rows.all():
            total_revenue += Decimal(amount)
            if verified_at is not None:
                local = to_local(verified_at)
                monthly[(local.year, local.month)] += Decimal(amount)

        monthly_revenue = [
            {"year": year, "month": month, "revenue": float(revenue)}
            for (year, month), revenue in sorted(monthly.items(), reverse=True)[:12]
        ]
        return {
            "total_revenue": float(total_revenue),
            "payment_stats": status_counts,
            "monthly_revenue": monthly_revenue,
        }
