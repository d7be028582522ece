"""User Pydantic Schemas"""

import re
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from billmate.models.enums import UserRole

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class UserCreate(BaseModel):
    """Admin-created account (tenants by default)"""
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, pattern=r"^0\d{9}$")
    role: UserRole = UserRole.TENANT


class AdminBootstrap(BaseModel):
    """First admin account; only accepted while no admin exists"""
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, pattern=r"^0\d{9}$")


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, pattern=r"^0\d{9}$")
    id_card: Optional[str] = Field(None, pattern=r"^\d{13}$")
    emergency_contact: Optional[str] = Field(None, max_length=255)


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8)


class UserResponse(BaseModel):
    """User as returned by the API (never includes the password hash)"""
    id: UUID
    email: EmailStr
    name: str
    role: UserRole
    phone: Optional[str] = None
    id_card: Optional[str] = None
    emergency_contact: Optional[str] = None
    is_active: bool
    room_id: Optional[UUID] = None
    move_in_date: Optional[datetime] = None
    rent_due_day: Optional[int] = None
    deposit_amount: Optional[Decimal] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# --- Notification preferences ---
class ChannelPreferences(BaseModel):
    enabled: bool = True
    payment_reminder: bool = True
    payment_verified: bool = True
    payment_rejected: bool = True
    overdue: bool = True
    bill_generated: bool = True


class QuietHours(BaseModel):
    enabled: bool = False
    start_time: str = "22:00"
    end_time: str = "08:00"

    @field_validator("start_time", "end_time")
    @classmethod
    def check_hhmm(cls, v: str) -> str:
        if not _HHMM.match(v):
            raise ValueError("เวลาต้องอยู่ในรูปแบบ HH:MM")
        return v


class NotificationPreferences(BaseModel):
    """
    Per-channel switches plus email quiet hours.

    Only the email flags gate delivery. Every notification is still recorded
    in the in-app inbox, which is also the history the overdue dedup reads,
    so the ``in_app`` flags are kept for clients to filter what they show.
    """

    email: ChannelPreferences = ChannelPreferences()
    in_app: ChannelPreferences = ChannelPreferences()
    quiet_hours: QuietHours = QuietHours()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: UserRole
    user_id: str
