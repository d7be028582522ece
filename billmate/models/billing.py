"""Domain 2: Billing Models (Bills & Payments)"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from billmate.models.base import BaseModel, enum_column
from billmate.models.enums import BillStatus, PaymentStatus


class Bill(BaseModel):
    """
    Monthly charge for a room/tenant.
    One bill per room per month; tracks payment status and due date.
    """
    __tablename__ = "bills"
    __table_args__ = (
        UniqueConstraint("room_id", "month", "year", name="uq_bills_room_month_year"),
    )

    room_id = Column(Uuid(as_uuid=True), ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)

    rent_amount = Column(Numeric(10, 2), nullable=False)
    water_units = Column(Numeric(10, 2), nullable=False, default=0)
    water_amount = Column(Numeric(10, 2), nullable=False)
    electricity_units = Column(Numeric(10, 2), nullable=False, default=0)
    electricity_amount = Column(Numeric(10, 2), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)

    due_date = Column(DateTime, nullable=False, index=True)
    status = Column(enum_column(BillStatus, "bill_status"), default=BillStatus.PENDING, nullable=False, index=True)

    # Relationships
    room = relationship("Room", lazy="selectin")
    tenant = relationship("User", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Bill {self.month}/{self.year} {self.total_amount} - {self.status}>"


class Payment(BaseModel):
    """
    Tenant-submitted payment slip for a bill.

    ``ocr_data`` and ``qr_data`` hold whatever the slip reader extracted;
    amounts in them are plain JSON numbers.
    """
    __tablename__ = "payments"

    bill_id = Column(Uuid(as_uuid=True), ForeignKey("bills.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    slip_image_url = Column(String(500), nullable=False)
    ocr_data = Column(JSON, nullable=False, default=dict)
    qr_data = Column(JSON, nullable=False, default=dict)

    status = Column(enum_column(PaymentStatus, "payment_status"), default=PaymentStatus.PENDING, nullable=False, index=True)
    verified_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    verified_at = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    # Relationships
    bill = relationship("Bill", lazy="selectin")
    user = relationship("User", foreign_keys=[user_id], lazy="selectin")

    def __repr__(self) -> str:
        return f"<Payment {self.bill_id} - {self.status}>"
