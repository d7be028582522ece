"""Domain 1: Rooms"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from billmate.models.base import BaseModel


class Room(BaseModel):
    """
    Rentable room with its monthly price list.
    Assignment fields are set on move-in and cleared on check-out.
    """
    __tablename__ = "rooms"

    room_number = Column(String(10), unique=True, nullable=False, index=True)
    floor = Column(Integer, nullable=True)

    rent_price = Column(Numeric(10, 2), nullable=False)
    water_price = Column(Numeric(10, 2), nullable=False)
    electricity_price = Column(Numeric(10, 2), nullable=False)

    is_occupied = Column(Boolean, default=False, nullable=False, index=True)
    tenant_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    move_in_date = Column(DateTime, nullable=True)
    move_out_date = Column(DateTime, nullable=True)
    rent_due_day = Column(Integer, nullable=True)
    deposit_amount = Column(Numeric(10, 2), nullable=True)
    assignment_notes = Column(Text, nullable=True)

    tenant = relationship("User", foreign_keys=[tenant_id], lazy="selectin")

    def clear_assignment(self) -> None:
        self.is_occupied = False
        self.tenant_id = None
        self.move_in_date = None
        self.rent_due_day = None
        self.deposit_amount = None
        self.assignment_notes = None

    def __repr__(self) -> str:
        return f"<Room {self.room_number} ({'occupied' if self.is_occupied else 'vacant'})>"
