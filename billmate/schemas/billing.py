import re
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator

from billmate.models.enums import BillStatus, PaymentStatus

_SLIP_DATE = re.compile(r"^\d{2}/\d{2}/\d{4}$|^\d{2}-\d{2}-\d{4}$")
_SLIP_TIME = re.compile(r"^\d{2}:\d{2}(:\d{2})?$")

MAX_SLIP_AMOUNT = 10_000_000


# --- Bills ---
class BillCreate(BaseModel):
    room_id: UUID
    tenant_id: UUID
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)
    water_units: Decimal = Field(Decimal("0"), ge=0)
    electricity_units: Decimal = Field(Decimal("0"), ge=0)
    due_day: Optional[int] = Field(None, ge=1, le=31)


class BillUpdate(BaseModel):
    """Admin correction of a bill; total is recomputed from the parts"""
    rent_amount: Optional[Decimal] = Field(None, ge=0)
    water_amount: Optional[Decimal] = Field(None, ge=0)
    electricity_amount: Optional[Decimal] = Field(None, ge=0)
    due_date: Optional[datetime] = None
    status: Optional[BillStatus] = None

    @field_validator(
        "rent_amount", "water_amount", "electricity_amount", "due_date", "status", mode="before"
    )
    @classmethod
    def not_null(cls, v):
        # Fields may be left out, but a field that is sent needs a value
        if v is None:
            raise ValueError("ค่านี้ต้องไม่เป็นค่าว่าง")
        return v

    @field_validator("status")
    @classmethod
    def no_manual_verify(cls, v: Optional[BillStatus]) -> Optional[BillStatus]:
        if v == BillStatus.VERIFIED:
            raise ValueError("บิลจะถูกยืนยันได้ผ่านการอนุมัติการชำระเงินเท่านั้น")
        return v


class BillGenerateRequest(BaseModel):
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=2000, le=2100)


class RoomBrief(BaseModel):
    id: UUID
    room_number: str
    floor: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class UserBrief(BaseModel):
    id: UUID
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class BillResponse(BaseModel):
    id: UUID
    room_id: UUID
    tenant_id: UUID
    room: Optional[RoomBrief] = None
    tenant: Optional[UserBrief] = None
    month: int
    year: int
    rent_amount: Decimal
    water_units: Decimal
    water_amount: Decimal
    electricity_units: Decimal
    electricity_amount: Decimal
    total_amount: Decimal
    due_date: datetime
    status: BillStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# --- Payments ---
class OcrData(BaseModel):
    """
    Fields read from a transfer slip.

    Also the body of an admin correction, so the bounds below are enforced on
    every write, not only in the review form.
    """
    amount: Optional[float] = Field(None, ge=0, le=MAX_SLIP_AMOUNT)
    fee: Optional[float] = Field(None, ge=0)
    date: Optional[str] = None
    time: Optional[str] = None
    from_account: Optional[str] = None
    to_account: Optional[str] = None
    reference: Optional[str] = None
    transaction_no: Optional[str] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _SLIP_DATE.match(v):
            raise ValueError("วันที่ต้องอยู่ในรูปแบบ DD/MM/YYYY หรือ DD-MM-YYYY")
        return v

    @field_validator("time")
    @classmethod
    def check_time(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _SLIP_TIME.match(v):
            raise ValueError("เวลาต้องอยู่ในรูปแบบ HH:MM หรือ HH:MM:SS")
        return v


class QrData(BaseModel):
    merchant_id: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)
    ref1: Optional[str] = None
    ref2: Optional[str] = None


class PaymentUpload(BaseModel):
    bill_id: UUID
    slip_image_base64: str = Field(..., min_length=1)
    content_type: str = "image/jpeg"
    ocr_data: OcrData = OcrData()
    qr_data: QrData = QrData()


class OcrDataUpdate(BaseModel):
    ocr_data: OcrData


class PaymentVerifyRequest(BaseModel):
    approved: bool
    rejection_reason: Optional[str] = None


class AmountCheckResponse(BaseModel):
    """Outcome of comparing the slip amount with the bill total"""
    effective_amount: Optional[Decimal] = None
    source: Optional[Literal["ocr", "qr"]] = None
    bill_amount: Decimal
    difference: Optional[Decimal] = None
    is_match: Optional[bool] = None
    result: Literal["match", "mismatch", "cannot_verify"]


class PaymentResponse(BaseModel):
    id: UUID
    bill_id: UUID
    user_id: UUID
    user: Optional[UserBrief] = None
    slip_image_url: str
    ocr_data: dict
    qr_data: dict
    status: PaymentStatus
    verified_by: Optional[UUID] = None
    verified_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentDetail(PaymentResponse):
    bill: Optional[BillResponse] = None
    amount_check: Optional[AmountCheckResponse] = None

