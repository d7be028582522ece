"""Domain 4: Maintenance Requests"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from billmate.models.base import BaseModel, enum_column
from billmate.models.enums import (
    MaintenanceCategory,
    MaintenancePriority,
    MaintenanceStatus,
    UserRole,
)
from billmate.utils.time import get_utc_now


class Maintenance(BaseModel):
    """Repair or upkeep request for a room, raised by a tenant or an admin."""
    __tablename__ = "maintenance_requests"

    room_id = Column(Uuid(as_uuid=True), ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    category = Column(enum_column(MaintenanceCategory, "maintenance_category"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    priority = Column(enum_column(MaintenancePriority, "maintenance_priority"), nullable=False, index=True)
    status = Column(
        enum_column(MaintenanceStatus, "maintenance_status"),
        default=MaintenanceStatus.PENDING,
        nullable=False,
        index=True,
    )

    reported_date = Column(DateTime, default=get_utc_now, nullable=False, index=True)
    scheduled_date = Column(DateTime, nullable=True)
    completed_date = Column(DateTime, nullable=True)
    cost = Column(Numeric(10, 2), nullable=True)
    assigned_to = Column(String(255), nullable=True)  # technician name
    notes = Column(Text, nullable=True)
    images = Column(JSON, nullable=False, default=list)

    created_by_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_by_name = Column(String(255), nullable=False)
    created_by_role = Column(enum_column(UserRole, "user_role"), nullable=False)

    room = relationship("Room", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Maintenance {self.category} {self.priority} - {self.status}>"
