"""Domain 3: Communication Models (Notifications & Templates)"""

import re
from typing import Any, Dict

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Uuid

from billmate.models.base import BaseModel, enum_column
from billmate.models.enums import NotificationType
from billmate.utils.time import get_utc_now

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


class Notification(BaseModel):
    """
    In-app notification for one user, optionally about one bill.
    Read notifications are purged by the cleanup job after the retention window.
    """
    __tablename__ = "notifications"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    bill_id = Column(Uuid(as_uuid=True), ForeignKey("bills.id", ondelete="CASCADE"), nullable=True, index=True)

    type = Column(enum_column(NotificationType, "notification_type"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)

    read = Column(Boolean, default=False, nullable=False, index=True)
    sent_at = Column(DateTime, default=get_utc_now, nullable=False, index=True)
    read_at = Column(DateTime, nullable=True)

    def mark_read(self) -> None:
        if not self.read:
            self.read = True
            self.read_at = get_utc_now()

    def __repr__(self) -> str:
        return f"<Notification {self.type} - {'Read' if self.read else 'Unread'}>"


class NotificationTemplate(BaseModel):
    """
    Admin-editable wording for one notification type.
    Placeholders use ``{{name}}`` syntax; unknown placeholders are left as is.
    """
    __tablename__ = "notification_templates"

    type = Column(enum_column(NotificationType, "notification_type"), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False)
    email_body = Column(Text, nullable=False)
    in_app_title = Column(String(255), nullable=False)
    in_app_message = Column(Text, nullable=False)
    variables = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    version = Column(Integer, default=1, nullable=False)
    last_modified_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    def render(self, data: Dict[str, Any]) -> Dict[str, str]:
        def substitute(text: str) -> str:
            return _PLACEHOLDER.sub(
                lambda m: str(data[m.group(1)]) if m.group(1) in data else m.group(0),
                text,
            )

        return {
            "subject": substitute(self.subject),
            "email_body": substitute(self.email_body),
            "in_app_title": substitute(self.in_app_title),
            "in_app_message": substitute(self.in_app_message),
        }

    def __repr__(self) -> str:
        return f"<NotificationTemplate {self.type} v{self.version}>"
