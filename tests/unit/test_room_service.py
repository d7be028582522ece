"""Unit tests for RoomService tenant assignment."""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.core.exceptions import DomainValidationError, NotFoundError
from billmate.models.enums import UserRole
from billmate.models.room import Room
from billmate.models.user import User
from billmate.schemas.room import RoomAssignRequest
from billmate.services.room_service import RoomService


def _assign_request(tenant_id) -> RoomAssignRequest:
    return RoomAssignRequest(
        tenant_id=tenant_id,
        move_in_date=datetime(2026, 3, 1),
        rent_due_day=5,
        deposit_amount=Decimal("7000"),
    )


def _room(**fields) -> Room:
    return Room(
        id=uuid4(),
        room_number="A101",
        rent_price=Decimal("3500"),
        water_price=Decimal("100"),
        electricity_price=Decimal("8"),
        **fields,
    )


@pytest.mark.asyncio
async def test_assign_tenant_success():
    db = AsyncMock(spec=AsyncSession)
    room = _room(is_occupied=False)
    tenant = User(id=uuid4(), name="Tenant", email="t@test.com", role=UserRole.TENANT)
    db.get.return_value = tenant

    with patch("billmate.services.room_service.RoomService.get_room", new_callable=AsyncMock) as mock_get_room:
        mock_get_room.return_value = room

        result = await RoomService.assign_tenant(db, room.id, _assign_request(tenant.id))

    assert result is room
    assert room.is_occupied is True
    assert room.tenant_id == tenant.id
    assert room.rent_due_day == 5
    assert tenant.room_id == room.id
    assert tenant.rent_due_day == 5
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_assign_tenant_to_occupied_room_changes_nothing():
    db = AsyncMock(spec=AsyncSession)
    current_tenant_id = uuid4()
    room = _room(is_occupied=True, tenant_id=current_tenant_id)
    newcomer = User(id=uuid4(), name="New", email="new@test.com", role=UserRole.TENANT)
    db.get.return_value = newcomer

    with patch("billmate.services.room_service.RoomService.get_room", new_callable=AsyncMock) as mock_get_room:
        mock_get_room.return_value = room

        with pytest.raises(DomainValidationError):
            await RoomService.assign_tenant(db, room.id, _assign_request(newcomer.id))

    assert room.tenant_id == current_tenant_id
    assert newcomer.room_id is None
    assert not db.commit.called


@pytest.mark.asyncio
async def test_assign_tenant_who_already_has_a_room():
    db = AsyncMock(spec=AsyncSession)
    room = _room(is_occupied=False)
    tenant = User(id=uuid4(), name="Tenant", email="t@test.com", role=UserRole.TENANT, room_id=uuid4())
    db.get.return_value = tenant

    with patch("billmate.services.room_service.RoomService.get_room", new_callable=AsyncMock) as mock_get_room:
        mock_get_room.return_value = room

        with pytest.raises(DomainValidationError):
            await RoomService.assign_tenant(db, room.id, _assign_request(tenant.id))

    assert room.is_occupied is False
    assert not db.commit.called


@pytest.mark.asyncio
async def test_assign_admin_as_tenant_is_not_found():
    db = AsyncMock(spec=AsyncSession)
    room = _room(is_occupied=False)
    admin = User(id=uuid4(), name="Admin", email="a@test.com", role=UserRole.ADMIN)
    db.get.return_value = admin

    with patch("billmate.services.room_service.RoomService.get_room", new_callable=AsyncMock) as mock_get_room:
        mock_get_room.return_value = room

        with pytest.raises(NotFoundError):
            await RoomService.assign_tenant(db, room.id, _assign_request(admin.id))

    assert not db.commit.called


@pytest.mark.asyncio
async def test_assign_rolls_back_when_commit_fails():
    db = AsyncMock(spec=AsyncSession)
    db.commit.side_effect = RuntimeError("connection lost")
    room = _room(is_occupied=False)
    tenant = User(id=uuid4(), name="Tenant", email="t@test.com", role=UserRole.TENANT)
    db.get.return_value = tenant

    with patch("billmate.services.room_service.RoomService.get_room", new_callable=AsyncMock) as mock_get_room:
        mock_get_room.return_value = room

        with pytest.raises(RuntimeError):
            await RoomService.assign_tenant(db, room.id, _assign_request(tenant.id))

    db.rollback.assert_awaited_once()
