"""Maintenance Service - repair requests, bulk actions and analytics"""

import logging
from collections import Counter
from decimal import Decimal
from typing import Any, Dict, List, Tuple
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.core.exceptions import DomainValidationError, NotFoundError, PermissionDeniedError
from billmate.models.enums import MaintenanceStatus
from billmate.models.maintenance import Maintenance
from billmate.models.room import Room
from billmate.models.user import User
from billmate.schemas.maintenance import MaintenanceCreate, MaintenanceFilter, MaintenanceUpdate
from billmate.utils.time import get_utc_now, to_naive_utc

logger = logging.getLogger(__name__)


class MaintenanceService:
    """Service layer for maintenance requests"""

    @staticmethod
    async def create_request(db: AsyncSession, user: User, request_in: MaintenanceCreate) -> Maintenance:
        """Tenants may only report for the room they live in; admins for any room."""
        room = await db.get(Room, request_in.room_id)
        if not room:
            raise NotFoundError("ไม่พบห้องที่ระบุ")

        tenant_id = request_in.tenant_id
        if user.is_tenant:
            if user.room_id != room.id:
                raise PermissionDeniedError("แจ้งซ่อมได้เฉพาะห้องของตนเอง")
            tenant_id = user.id
        elif tenant_id is None:
            tenant_id = room.tenant_id

        data = request_in.model_dump(exclude={"tenant_id", "scheduled_date"})
        request = Maintenance(
            **data,
            tenant_id=tenant_id,
            scheduled_date=to_naive_utc(request_in.scheduled_date) if request_in.scheduled_date else None,
            status=MaintenanceStatus.PENDING,
            reported_date=get_utc_now(),
            created_by_id=user.id,
            created_by_name=user.name,
            created_by_role=user.role,
        )
        db.add(request)
        await db.commit()
        await db.refresh(request)
        logger.info("Maintenance request created", extra={"maintenance_id": str(request.id)})
        return request

    @staticmethod
    async def list_requests(
        db: AsyncSession,
        user: User,
        filters: MaintenanceFilter,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Maintenance], int]:
        criteria = []
        if user.is_tenant:
            own = [Maintenance.tenant_id == user.id]
            if user.room_id is not None:
                own.append(Maintenance.room_id == user.room_id)
            criteria.append(or_(*own))

        if filters.status is not None:
            criteria.append(Maintenance.status == filters.status)
        if filters.priority is not None:
            criteria.append(Maintenance.priority == filters.priority)
        if filters.category is not None:
            criteria.append(Maintenance.category == filters.category)
        if filters.room_id is not None:
            criteria.append(Maintenance.room_id == filters.room_id)
        if filters.tenant_id is not None:
            criteria.append(Maintenance.tenant_id == filters.tenant_id)
        if filters.from_date is not None:
            criteria.append(Maintenance.reported_date >= to_naive_utc(filters.from_date))
        if filters.to_date is not None:
            criteria.append(Maintenance.reported_date <= to_naive_utc(filters.to_date))

        total = await db.scalar(select(func.count(Maintenance.id)).where(*criteria)) or 0
        result = await db.execute(
            select(Maintenance)
            .where(*criteria)
            .order_by(Maintenance.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def get_request(db: AsyncSession, maintenance_id: UUID, user: User) -> Maintenance:
        request = await db.get(Maintenance, maintenance_id)
        if not request:
            raise NotFoundError("ไม่พบรายการแจ้งซ่อม")
        if user.is_tenant and request.tenant_id != user.id and request.room_id != user.room_id:
            raise PermissionDeniedError("ไม่มีสิทธิ์เข้าถึงรายการนี้")
        return request

    @staticmethod
    async def bulk_update(db: AsyncSession, ids: List[UUID], updates: MaintenanceUpdate) -> int:
        values: Dict[str, Any] = updates.model_dump(exclude_unset=True)
        if not values:
            raise DomainValidationError("กรุณาระบุข้อมูลที่ต้องการอัปเดต")

        for field in ("scheduled_date", "completed_date"):
            if values.get(field) is not None:
                values[field] = to_naive_utc(values[field])
        if values.get("status") == MaintenanceStatus.COMPLETED and "completed_date" not in values:
            values["completed_date"] = get_utc_now()
        values["updated_at"] = get_utc_now()

        result = await db.execute(
            update(Maintenance)
            .where(Maintenance.id.in_(ids))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        logger.info("Maintenance requests updated", extra={"count": result.rowcount})
        return result.rowcount or 0

    @staticmethod
    async def bulk_delete(db: AsyncSession, ids: List[UUID]) -> int:
        if not ids:
            raise DomainValidationError("กรุณาระบุรายการที่ต้องการลบ")
        result = await db.execute(
            delete(Maintenance)
            .where(Maintenance.id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        logger.info("Maintenance requests deleted", extra={"count": result.rowcount})
        return result.rowcount or 0

    @staticmethod
    async def get_analytics(db: AsyncSession) -> Dict[str, Any]:
        result = await db.execute(
            select(
                Maintenance.status,
                Maintenance.priority,
                Maintenance.category,
                Maintenance.cost,
                Maintenance.reported_date,
                Maintenance.completed_date,
            )
        )
        rows = result.all()

        by_status = Counter({s.value: 0 for s in MaintenanceStatus})
        by_priority: Counter = Counter()
        by_category: Counter = Counter()
        total_cost = Decimal("0")
        completion_days: List[float] = []

        for status, priority, category, cost, reported, completed in rows:
            by_status[status.value] += 1
            by_priority[priority.value] += 1
            by_category[category.value] += 1
            if cost is not None:
                total_cost += Decimal(cost)
            if status == MaintenanceStatus.COMPLETED and completed is not None and reported is not None:
                completion_days.append((completed - reported).total_seconds() / 86400)

        return {
            "total": len(rows),
            "by_status": dict(by_status),
            "by_priority": dict(by_priority),
            "by_category": dict(by_category),
            "total_cost": float(total_cost),
            "average_completion_days": (
                round(sum(completion_days) / len(completion_days), 2) if completion_days else None
            ),
        }
