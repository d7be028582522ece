from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from billmate.models.enums import NotificationType


class NotificationResponse(BaseModel):
    id: UUID
    user_id: UUID
    bill_id: Optional[UUID] = None
    type: NotificationType
    title: str
    message: str
    read: bool
    sent_at: datetime
    read_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class NotificationList(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int


class NotificationStats(BaseModel):
    sent_today: int
    sent_this_week: int
    unread: int
    total_read: int
    total: int
    read_rate: float
    by_type: dict


class ManualSendRequest(BaseModel):
    """Admin-triggered run of one of the reminder jobs"""
    type: Literal["reminder_5days", "reminder_1day", "overdue"]


# --- Templates ---
class TemplateUpsert(BaseModel):
    type: NotificationType
    name: str = Field(..., min_length=1, max_length=255)
    subject: str = Field(..., min_length=1, max_length=255)
    email_body: str = Field(..., min_length=1)
    in_app_title: str = Field(..., min_length=1, max_length=255)
    in_app_message: str = Field(..., min_length=1)
    variables: List[str] = []
    is_active: bool = True


class TemplateResponse(BaseModel):
    id: UUID
    type: NotificationType
    name: str
    subject: str
    email_body: str
    in_app_title: str
    in_app_message: str
    variables: List[str]
    is_active: bool
    version: int
    last_modified_by: Optional[UUID] = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
