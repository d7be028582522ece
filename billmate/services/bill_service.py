"""Bill Service - monthly charges per room"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.config import settings
from billmate.core.exceptions import DomainValidationError, NotFoundError, PermissionDeniedError
from billmate.models.billing import Bill, Payment
from billmate.models.enums import BillStatus
from billmate.models.room import Room
from billmate.models.user import User
from billmate.schemas.billing import BillCreate, BillUpdate
from billmate.services.notification_service import NotificationService
from billmate.utils.time import local_due_date, local_today, to_naive_utc

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def build_bill(
    room: Room,
    tenant: User,
    month: int,
    year: int,
    water_units: Decimal = Decimal("0"),
    electricity_units: Decimal = Decimal("0"),
    due_day: Optional[int] = None,
) -> Bill:
    """
    Price a bill from the room's rates.

    Water is the room's flat monthly charge; electricity is metered.
    """
    rent = Decimal(room.rent_price)
    water = Decimal(room.water_price)
    electricity = (Decimal(electricity_units) * Decimal(room.electricity_price)).quantize(_CENTS)
    day = due_day or room.rent_due_day or settings.DEFAULT_DUE_DAY

    return Bill(
        room_id=room.id,
        tenant_id=tenant.id,
        room=room,
        tenant=tenant,
        month=month,
        year=year,
        rent_amount=rent,
        water_units=Decimal(water_units),
        water_amount=water,
        electricity_units=Decimal(electricity_units),
        electricity_amount=electricity,
        total_amount=rent + water + electricity,
        due_date=local_due_date(year, month, day),
        status=BillStatus.PENDING,
    )


class BillService:
    """Service layer for bills"""

    @staticmethod
    async def bill_exists(db: AsyncSession, room_id: UUID, month: int, year: int) -> bool:
        found = await db.scalar(
            select(Bill.id).where(Bill.room_id == room_id, Bill.month == month, Bill.year == year)
        )
        return found is not None

    @staticmethod
    async def create_bill(db: AsyncSession, bill_in: BillCreate) -> Bill:
        """
        Raises:
            NotFoundError: Room or tenant missing
            DomainValidationError: A bill already exists for the room and month
        """
        room = await db.get(Room, bill_in.room_id)
        if not room:
            raise NotFoundError("ไม่พบห้องที่ระบุ")
        tenant = await db.get(User, bill_in.tenant_id)
        if not tenant:
            raise NotFoundError("ไม่พบผู้เช่าที่ระบุ")
        if await BillService.bill_exists(db, room.id, bill_in.month, bill_in.year):
            raise DomainValidationError("มีบิลของห้องนี้ในเดือนดังกล่าวแล้ว")

        bill = build_bill(
            room,
            tenant,
            bill_in.month,
            bill_in.year,
            bill_in.water_units,
            bill_in.electricity_units,
            bill_in.due_day,
        )
        db.add(bill)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise DomainValidationError("มีบิลของห้องนี้ในเดือนดังกล่าวแล้ว")

        await NotificationService.notify_bill_generated(db, tenant, bill)
        await db.commit()
        await db.refresh(bill)
        logger.info(
            "Bill created",
            extra={"bill_id": str(bill.id), "room_id": str(room.id), "period": f"{bill.month}/{bill.year}"},
        )
        return bill

    @staticmethod
    async def list_bills(
        db: AsyncSession,
        user: User,
        status: Optional[BillStatus] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Bill], int]:
        criteria = []
        if not user.is_admin:
            criteria.append(Bill.tenant_id == user.id)
        if status is not None:
            criteria.append(Bill.status == status)
        if month is not None:
            criteria.append(Bill.month == month)
        if year is not None:
            criteria.append(Bill.year == year)

        total = await db.scalar(select(func.count(Bill.id)).where(*criteria)) or 0
        result = await db.execute(
            select(Bill)
            .where(*criteria)
            .order_by(Bill.year.desc(), Bill.month.desc(), Bill.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def get_bill(db: AsyncSession, bill_id: UUID, user: Optional[User] = None) -> Bill:
        bill = await db.get(Bill, bill_id)
        if not bill:
            raise NotFoundError("ไม่พบบิลที่ระบุ")
        if user is not None and not user.is_admin and bill.tenant_id != user.id:
            raise PermissionDeniedError("ไม่มีสิทธิ์เข้าถึงบิลนี้")
        return bill

    @staticmethod
    async def update_bill(db: AsyncSession, bill_id: UUID, bill_in: BillUpdate) -> Bill:
        bill = await BillService.get_bill(db, bill_id)
        data = bill_in.model_dump(exclude_unset=True)
        if "due_date" in data and data["due_date"] is not None:
            data["due_date"] = to_naive_utc(data["due_date"])
        for field, value in data.items():
            setattr(bill, field, value)

        bill.total_amount = (
            Decimal(bill.rent_amount) + Decimal(bill.water_amount) + Decimal(bill.electricity_amount)
        )
        await db.commit()
        await db.refresh(bill)
        return bill

    @staticmethod
    async def delete_bill(db: AsyncSession, bill_id: UUID) -> None:
        """Delete a bill together with its payments and notifications."""
        bill = await BillService.get_bill(db, bill_id)
        await db.execute(delete(Payment).where(Payment.bill_id == bill_id))
        await NotificationService.delete_for_bill(db, bill_id)
        await db.delete(bill)
        await db.commit()
        logger.info("Bill deleted", extra={"bill_id": str(bill_id)})

    @staticmethod
    async def generate_monthly_bills(
        db: AsyncSession,
        month: Optional[int] = None,
        year: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> int:
        """
        Create one bill per occupied room for the period (the current local
        month by default), skipping rooms that already have one.

        Each room is committed on its own; a failing room is logged and the
        run continues. Returns the number of bills created.
        """
        today = local_today(now)
        month = month or today.month
        year = year or today.year

        result = await db.execute(
            select(Room.id, Room.tenant_id).where(
                Room.is_occupied.is_(True), Room.tenant_id.isnot(None)
            )
        )
        targets = [(room_id, tenant_id) for room_id, tenant_id in result.all()]

        created = 0
        for room_id, tenant_id in targets:
            try:
                if await BillService.bill_exists(db, room_id, month, year):
                    continue
                room = await db.get(Room, room_id)
                tenant = await db.get(User, tenant_id)
                bill = build_bill(room, tenant, month, year)
                db.add(bill)
                await db.flush()
                await NotificationService.notify_bill_generated(db, tenant, bill, now)
                await db.commit()
                created += 1
            except Exception:
                await db.rollback()
                db.expunge_all()
                logger.exception(
                    "Bill generation failed for room",
                    extra={"room_id": str(room_id), "period": f"{month}/{year}"},
                )

        logger.info("Monthly bills generated", extra={"count": created, "period": f"{month}/{year}"})
        return created
