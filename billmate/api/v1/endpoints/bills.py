"""Bill endpoints"""

from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.api import deps
from billmate.models.enums import BillStatus
from billmate.models.user import User
from billmate.schemas.billing import BillCreate, BillGenerateRequest, BillResponse, BillUpdate
from billmate.schemas.responses import PaginatedResponse, PaginationMeta, SuccessResponse
from billmate.services.bill_service import BillService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[BillResponse])
async def list_bills(
    status_filter: Optional[BillStatus] = Query(None, alias="status"),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Tenants see their own bills; admins see every bill."""
    bills, total = await BillService.list_bills(
        db, current_user, status_filter, month, year, skip=(page - 1) * limit, limit=limit
    )
    return PaginatedResponse(
        data=[BillResponse.model_validate(b) for b in bills],
        meta=PaginationMeta.build(page, limit, total),
    )


@router.post("", response_model=SuccessResponse[BillResponse], status_code=status.HTTP_201_CREATED)
async def create_bill(
    bill_in: BillCreate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.create_bill(db, bill_in)
    return SuccessResponse(data=BillResponse.model_validate(bill), message="สร้างบิลสำเร็จ")


@router.post("/generate", response_model=SuccessResponse)
async def generate_bills(
    body: BillGenerateRequest,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Create this month's bill for every occupied room that lacks one."""
    created = await BillService.generate_monthly_bills(db, body.month, body.year)
    return SuccessResponse(data={"created": created}, message=f"สร้างบิล {created} รายการสำเร็จ")


@router.get("/{bill_id}", response_model=SuccessResponse[BillResponse])
async def get_bill(
    bill_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.get_bill(db, bill_id, current_user)
    return SuccessResponse(data=BillResponse.model_validate(bill))


@router.put("/{bill_id}", response_model=SuccessResponse[BillResponse])
async def update_bill(
    bill_id: UUID,
    bill_in: BillUpdate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.update_bill(db, bill_id, bill_in)
    return SuccessResponse(data=BillResponse.model_validate(bill), message="อัปเดตบิลสำเร็จ")


@router.delete("/{bill_id}", response_model=SuccessResponse)
async def delete_bill(
    bill_id: UUID,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    await BillService.delete_bill(db, bill_id)
    return SuccessResponse(data=None, message="ลบบิลสำเร็จ")
