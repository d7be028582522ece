"""Payment endpoints - slip upload, review and analytics"""

from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.api import deps
from billmate.models.enums import PaymentStatus
from billmate.models.user import User
from billmate.schemas.billing import (
    OcrDataUpdate,
    PaymentDetail,
    PaymentResponse,
    PaymentUpload,
    PaymentVerifyRequest,
)
from billmate.schemas.responses import PaginatedResponse, PaginationMeta, SuccessResponse
from billmate.services.payment_service import PaymentService

router = APIRouter()


def _detail(payment, check=None) -> PaymentDetail:
    detail = PaymentDetail.model_validate(payment)
    if check is None and payment.bill is not None:
        check = PaymentService.check_amount(payment, payment.bill)
    detail.amount_check = check
    return detail


@router.post("/upload", response_model=SuccessResponse[PaymentResponse], status_code=status.HTTP_201_CREATED)
async def upload_payment(
    upload_in: PaymentUpload,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Submit a transfer slip for a bill. The bill moves to ``paid`` until reviewed."""
    payment = await PaymentService.upload_payment(db, current_user, upload_in)
    return SuccessResponse(
        data=PaymentResponse.model_validate(payment),
        message="อัปโหลดสลิปสำเร็จ รอการตรวจสอบ",
    )


@router.get("", response_model=PaginatedResponse[PaymentResponse])
async def list_payments(
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    payments, total = await PaymentService.list_payments(
        db, current_user, status_filter, skip=(page - 1) * limit, limit=limit
    )
    return PaginatedResponse(
        data=[PaymentResponse.model_validate(p) for p in payments],
        meta=PaginationMeta.build(page, limit, total),
    )


@router.get("/analytics", response_model=SuccessResponse)
async def payment_analytics(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return SuccessResponse(data=await PaymentService.get_analytics(db))


@router.get("/{payment_id}", response_model=SuccessResponse[PaymentDetail])
async def get_payment(
    payment_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Payment with its bill and the slip-vs-bill amount check."""
    payment = await PaymentService.get_payment(db, payment_id, current_user)
    return SuccessResponse(data=_detail(payment))


@router.put("/{payment_id}/ocr", response_model=SuccessResponse[PaymentDetail])
async def update_ocr_data(
    payment_id: UUID,
    body: OcrDataUpdate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    payment = await PaymentService.update_ocr_data(db, payment_id, body.ocr_data)
    return SuccessResponse(data=_detail(payment), message="แก้ไขข้อมูลสลิปสำเร็จ")


@router.put("/{payment_id}/verify", response_model=SuccessResponse[PaymentDetail])
async def verify_payment(
    payment_id: UUID,
    body: PaymentVerifyRequest,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Approve or reject a pending payment.

    Approval goes through even when the slip amount does not match the bill;
    ``amount_check`` in the response carries the warning.
    """
    payment, check = await PaymentService.verify_payment(
        db, payment_id, current_user, body.approved, body.rejection_reason
    )
    if body.approved:
        message = "ยืนยันการชำระเงินสำเร็จ"
        if check.result == "mismatch":
            message += " (ยอดเงินในสลิปไม่ตรงกับยอดบิล)"
    else:
        message = "ปฏิเสธการชำระเงินสำเร็จ"
    return SuccessResponse(data=_detail(payment, check), message=message)
