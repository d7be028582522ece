"""Maintenance request endpoints"""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.api import deps
from billmate.models.enums import MaintenanceCategory, MaintenancePriority, MaintenanceStatus
from billmate.models.user import User
from billmate.schemas.maintenance import (
    MaintenanceBulkUpdate,
    MaintenanceCreate,
    MaintenanceFilter,
    MaintenanceResponse,
)
from billmate.schemas.responses import PaginatedResponse, PaginationMeta, SuccessResponse
from billmate.services.maintenance_service import MaintenanceService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[MaintenanceResponse])
async def list_maintenance(
    status_filter: Optional[MaintenanceStatus] = Query(None, alias="status"),
    priority: Optional[MaintenancePriority] = None,
    category: Optional[MaintenanceCategory] = None,
    room_id: Optional[UUID] = None,
    tenant_id: Optional[UUID] = None,
    from_date: Optional[datetime] = None,
    to_date: Optional[datetime] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    filters = MaintenanceFilter(
        status=status_filter,
        priority=priority,
        category=category,
        room_id=room_id,
        tenant_id=tenant_id,
        from_date=from_date,
        to_date=to_date,
    )
    items, total = await MaintenanceService.list_requests(db, current_user, filters, page, limit)
    return PaginatedResponse(
        data=[MaintenanceResponse.model_validate(m) for m in items],
        meta=PaginationMeta.build(page, limit, total),
    )


@router.post("", response_model=SuccessResponse[MaintenanceResponse], status_code=status.HTTP_201_CREATED)
async def create_maintenance(
    request_in: MaintenanceCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    request = await MaintenanceService.create_request(db, current_user, request_in)
    return SuccessResponse(
        data=MaintenanceResponse.model_validate(request),
        message="สร้างรายการแจ้งซ่อมสำเร็จ",
    )


@router.put("", response_model=SuccessResponse)
async def bulk_update_maintenance(
    body: MaintenanceBulkUpdate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    updated = await MaintenanceService.bulk_update(db, body.ids, body.updates)
    return SuccessResponse(data={"modified_count": updated}, message=f"อัปเดต {updated} รายการสำเร็จ")


@router.delete("", response_model=SuccessResponse)
async def bulk_delete_maintenance(
    ids: List[UUID] = Query(..., min_length=1),
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    deleted = await MaintenanceService.bulk_delete(db, ids)
    return SuccessResponse(data={"deleted_count": deleted}, message=f"ลบ {deleted} รายการสำเร็จ")


@router.get("/analytics", response_model=SuccessResponse)
async def maintenance_analytics(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return SuccessResponse(data=await MaintenanceService.get_analytics(db))


@router.get("/{maintenance_id}", response_model=SuccessResponse[MaintenanceResponse])
async def get_maintenance(
    maintenance_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    request = await MaintenanceService.get_request(db, maintenance_id, current_user)
    return SuccessResponse(data=MaintenanceResponse.model_validate(request))
