from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from billmate.models.enums import (
    MaintenanceCategory,
    MaintenancePriority,
    MaintenanceStatus,
    UserRole,
)
from billmate.schemas.billing import RoomBrief

MAX_MAINTENANCE_COST = 1_000_000


class MaintenanceCreate(BaseModel):
    room_id: UUID
    tenant_id: Optional[UUID] = None
    category: MaintenanceCategory
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    priority: MaintenancePriority
    scheduled_date: Optional[datetime] = None
    assigned_to: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=2000)
    images: List[str] = []


class MaintenanceUpdate(BaseModel):
    category: Optional[MaintenanceCategory] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    priority: Optional[MaintenancePriority] = None
    status: Optional[MaintenanceStatus] = None
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    cost: Optional[Decimal] = Field(None, ge=0, le=MAX_MAINTENANCE_COST)
    assigned_to: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=2000)


class MaintenanceBulkUpdate(BaseModel):
    ids: List[UUID] = Field(..., min_length=1)
    updates: MaintenanceUpdate


class MaintenanceFilter(BaseModel):
    status: Optional[MaintenanceStatus] = None
    priority: Optional[MaintenancePriority] = None
    category: Optional[MaintenanceCategory] = None
    room_id: Optional[UUID] = None
    tenant_id: Optional[UUID] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None


class MaintenanceResponse(BaseModel):
    id: UUID
    room_id: UUID
    room: Optional[RoomBrief] = None
    tenant_id: Optional[UUID] = None
    category: MaintenanceCategory
    title: str
    description: str
    priority: MaintenancePriority
    status: MaintenanceStatus
    reported_date: datetime
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    cost: Optional[Decimal] = None
    assigned_to: Optional[str] = None
    notes: Optional[str] = None
    images: List[str] = []
    created_by_id: Optional[UUID] = None
    created_by_name: str
    created_by_role: UserRole
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
