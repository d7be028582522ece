"""Room Service - room catalogue, tenant assignment and occupancy stats"""

import logging
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.core.exceptions import DomainValidationError, NotFoundError
from billmate.models.billing import Bill
from billmate.models.enums import BillStatus, UserRole
from billmate.models.room import Room
from billmate.models.user import User
from billmate.schemas.room import RoomAssignRequest, RoomCreate, RoomUpdate
from billmate.utils.time import get_utc_now, to_naive_utc

logger = logging.getLogger(__name__)


class RoomService:
    """Service layer for rooms and move-in / check-out"""

    @staticmethod
    async def list_rooms(db: AsyncSession) -> List[Room]:
        result = await db.execute(select(Room).order_by(Room.room_number))
        return list(result.scalars().all())

    @staticmethod
    async def get_room(db: AsyncSession, room_id: UUID) -> Room:
        room = await db.get(Room, room_id)
        if not room:
            raise NotFoundError("ไม่พบห้องที่ระบุ")
        return room

    @staticmethod
    async def create_room(db: AsyncSession, room_in: RoomCreate) -> Room:
        existing = await db.scalar(select(Room.id).where(Room.room_number == room_in.room_number))
        if existing:
            raise DomainValidationError("เลขห้องนี้มีอยู่แล้ว")

        room = Room(**room_in.model_dump())
        db.add(room)
        try:
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same number
            await db.rollback()
            raise DomainValidationError("เลขห้องนี้มีอยู่แล้ว")
        await db.refresh(room)
        logger.info("Room created", extra={"room_id": str(room.id), "room_number": room.room_number})
        return room

    @staticmethod
    async def update_room(db: AsyncSession, room_id: UUID, room_in: RoomUpdate) -> Room:
        room = await RoomService.get_room(db, room_id)
        data = room_in.model_dump(exclude_unset=True)

        new_number = data.get("room_number")
        if new_number and new_number != room.room_number:
            clash = await db.scalar(select(Room.id).where(Room.room_number == new_number))
            if clash:
                raise DomainValidationError("เลขห้องนี้มีอยู่แล้ว")

        for field, value in data.items():
            setattr(room, field, value)
        await db.commit()
        await db.refresh(room)
        return room

    @staticmethod
    async def delete_room(db: AsyncSession, room_id: UUID) -> None:
        room = await RoomService.get_room(db, room_id)
        if room.is_occupied:
            raise DomainValidationError("ไม่สามารถลบห้องที่มีผู้เช่าอยู่")
        await db.delete(room)
        await db.commit()
        logger.info("Room deleted", extra={"room_id": str(room_id)})

    @staticmethod
    async def assign_tenant(db: AsyncSession, room_id: UUID, assign_in: RoomAssignRequest) -> Room:
        """
        Move a tenant into a room.

        The room and the tenant are updated in the same transaction, so a
        failure leaves neither side half-assigned.

        Raises:
            NotFoundError: Room or tenant does not exist
            DomainValidationError: Room occupied, or tenant already housed
        """
        room = await RoomService.get_room(db, room_id)
        if room.is_occupied:
            raise DomainValidationError("ห้องนี้มีผู้เช่าอยู่แล้ว")

        tenant = await db.get(User, assign_in.tenant_id)
        if not tenant or tenant.role != UserRole.TENANT:
            raise NotFoundError("ไม่พบผู้เช่าที่ระบุ")
        if tenant.room_id is not None:
            raise DomainValidationError("ผู้เช่านี้มีห้องอยู่แล้ว")

        move_in = to_naive_utc(assign_in.move_in_date)

        room.is_occupied = True
        room.tenant_id = tenant.id
        room.move_in_date = move_in
        room.move_out_date = None
        room.rent_due_day = assign_in.rent_due_day
        room.deposit_amount = assign_in.deposit_amount
        room.assignment_notes = assign_in.notes or ""

        tenant.room_id = room.id
        tenant.move_in_date = move_in
        tenant.move_out_date = None
        tenant.rent_due_day = assign_in.rent_due_day
        tenant.deposit_amount = assign_in.deposit_amount

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(room)
        logger.info(
            "Tenant assigned",
            extra={"room_id": str(room.id), "tenant_id": str(tenant.id)},
        )
        return room

    @staticmethod
    async def unassign_tenant(db: AsyncSession, room_id: UUID) -> None:
        """Check the current tenant out of the room."""
        room = await RoomService.get_room(db, room_id)
        if not room.is_occupied or room.tenant_id is None:
            raise DomainValidationError("ห้องนี้ไม่มีผู้เช่าอยู่")

        now = get_utc_now()
        tenant = await db.get(User, room.tenant_id)

        room.clear_assignment()
        room.move_out_date = now
        if tenant is not None:
            tenant.room_id = None
            tenant.move_in_date = None
            tenant.rent_due_day = None
            tenant.move_out_date = now

        await db.commit()
        logger.info("Tenant checked out", extra={"room_id": str(room_id)})

    @staticmethod
    async def get_stats(db: AsyncSession) -> Dict[str, Any]:
        total_rooms = await db.scalar(select(func.count(Room.id))) or 0
        occupied = await db.scalar(
            select(func.count(Room.id)).where(Room.is_occupied.is_(True))
        ) or 0

        revenue_row = (
            await db.execute(
                select(func.coalesce(func.sum(Bill.total_amount), 0), func.count(Bill.id)).where(
                    Bill.status == BillStatus.VERIFIED
                )
            )
        ).one()

        floor_rows = (
            await db.execute(
                select(
                    Room.floor,
                    func.count(Room.id),
                    func.sum(case((Room.is_occupied.is_(True), 1), else_=0)),
                )
                .group_by(Room.floor)
                .order_by(Room.floor)
            )
        ).all()

        return {
            "total_rooms": total_rooms,
            "occupied_rooms": occupied,
            "available_rooms": total_rooms - occupied,
            "occupancy_rate": round(occupied / total_rooms * 100, 2) if total_rooms else 0.0,
            "total_revenue": float(revenue_row[0] or 0),
            "verified_bill_count": revenue_row[1],
            "rooms_by_floor": [
                {"floor": floor, "total": count, "occupied": int(occupied_count or 0)}
                for floor, count, occupied_count in floor_rows
            ],
        }
