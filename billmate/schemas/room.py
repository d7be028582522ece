from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class RoomBase(BaseModel):
    room_number: str = Field(..., min_length=1, max_length=10, pattern=r"^[A-Za-z0-9\-]+$")
    floor: Optional[int] = None
    rent_price: Decimal = Field(..., ge=0)
    water_price: Decimal = Field(..., ge=0)
    electricity_price: Decimal = Field(..., ge=0)


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    room_number: Optional[str] = Field(None, min_length=1, max_length=10, pattern=r"^[A-Za-z0-9\-]+$")
    floor: Optional[int] = None
    rent_price: Optional[Decimal] = Field(None, ge=0)
    water_price: Optional[Decimal] = Field(None, ge=0)
    electricity_price: Optional[Decimal] = Field(None, ge=0)


class TenantBrief(BaseModel):
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RoomResponse(RoomBase):
    id: UUID
    is_occupied: bool
    tenant_id: Optional[UUID] = None
    tenant: Optional[TenantBrief] = None
    move_in_date: Optional[datetime] = None
    move_out_date: Optional[datetime] = None
    rent_due_day: Optional[int] = None
    deposit_amount: Optional[Decimal] = None
    assignment_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomAssignRequest(BaseModel):
    tenant_id: UUID
    move_in_date: datetime
    rent_due_day: int = Field(..., ge=1, le=31)
    deposit_amount: Decimal = Field(..., ge=0)
    notes: Optional[str] = None
