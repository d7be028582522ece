"""Room endpoints - catalogue, tenant assignment and occupancy stats (admin)"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.api import deps
from billmate.models.user import User
from billmate.schemas.responses import SuccessResponse
from billmate.schemas.room import RoomAssignRequest, RoomCreate, RoomResponse, RoomUpdate
from billmate.services.room_service import RoomService

router = APIRouter()


@router.get("", response_model=SuccessResponse[list[RoomResponse]])
async def list_rooms(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    rooms = await RoomService.list_rooms(db)
    return SuccessResponse(data=[RoomResponse.model_validate(r) for r in rooms])


@router.post("", response_model=SuccessResponse[RoomResponse], status_code=status.HTTP_201_CREATED)
async def create_room(
    room_in: RoomCreate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    room = await RoomService.create_room(db, room_in)
    return SuccessResponse(data=RoomResponse.model_validate(room), message="สร้างห้องสำเร็จ")


@router.get("/stats", response_model=SuccessResponse)
async def room_stats(
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    return SuccessResponse(data=await RoomService.get_stats(db))


@router.get("/{room_id}", response_model=SuccessResponse[RoomResponse])
async def get_room(
    room_id: UUID,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    room = await RoomService.get_room(db, room_id)
    return SuccessResponse(data=RoomResponse.model_validate(room))


@router.put("/{room_id}", response_model=SuccessResponse[RoomResponse])
async def update_room(
    room_id: UUID,
    room_in: RoomUpdate,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    room = await RoomService.update_room(db, room_id, room_in)
    return SuccessResponse(data=RoomResponse.model_validate(room), message="อัปเดตห้องสำเร็จ")


@router.delete("/{room_id}", response_model=SuccessResponse)
async def delete_room(
    room_id: UUID,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    await RoomService.delete_room(db, room_id)
    return SuccessResponse(data=None, message="ลบห้องสำเร็จ")


@router.post("/{room_id}/assign", response_model=SuccessResponse[RoomResponse])
async def assign_tenant(
    room_id: UUID,
    assign_in: RoomAssignRequest,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Move a tenant into the room."""
    room = await RoomService.assign_tenant(db, room_id, assign_in)
    return SuccessResponse(data=RoomResponse.model_validate(room), message="มอบหมายห้องให้ผู้เช่าสำเร็จ")


@router.delete("/{room_id}/assign", response_model=SuccessResponse)
async def unassign_tenant(
    room_id: UUID,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Check the current tenant out of the room."""
    await RoomService.unassign_tenant(db, room_id)
    return SuccessResponse(data=None, message="ปลดผู้เช่าออกจากห้องสำเร็จ")
