"""Domain 1: User & Authentication Model"""

import copy
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Uuid

from billmate.models.base import BaseModel, enum_column
from billmate.models.enums import NotificationChannel, NotificationType, UserRole
from billmate.utils.time import get_utc_now, to_local


def default_notification_preferences() -> Dict[str, Any]:
    """Every channel and type enabled, quiet hours off (22:00-08:00 when switched on)."""
    per_type = {t.value: True for t in NotificationType}
    return {
        NotificationChannel.EMAIL.value: {"enabled": True, **per_type},
        NotificationChannel.IN_APP.value: {"enabled": True, **per_type},
        "quiet_hours": {"enabled": False, "start_time": "22:00", "end_time": "08:00"},
    }


def is_within_quiet_hours(current: str, start: str, end: str) -> bool:
    """
    Check an "HH:MM" time against a quiet-hours window (both ends inclusive).

    A window whose start is later than its end wraps midnight, e.g. 22:00-08:00.
    """
    if start > end:
        return current >= start or current <= end
    return start <= current <= end


class User(BaseModel):
    """
    Admin or tenant account.

    Tenants carry their current room assignment; the room row mirrors it
    through ``Room.tenant_id``.
    """
    __tablename__ = "users"

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Personal Information
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    id_card = Column(String(20), nullable=True)
    emergency_contact = Column(String(255), nullable=True)

    # Role & Permissions (RBAC)
    role = Column(enum_column(UserRole, "user_role"), nullable=False, default=UserRole.TENANT, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Tenancy
    room_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("rooms.id", ondelete="SET NULL", use_alter=True, name="fk_users_room_id"),
        nullable=True,
        index=True,
    )
    move_in_date = Column(DateTime, nullable=True)
    move_out_date = Column(DateTime, nullable=True)
    rent_due_day = Column(Integer, nullable=True)
    deposit_amount = Column(Numeric(10, 2), nullable=True)

    notification_preferences = Column(JSON, nullable=False, default=default_notification_preferences)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_tenant(self) -> bool:
        return self.role == UserRole.TENANT

    def get_preferences(self) -> Dict[str, Any]:
        """Stored preferences merged over the defaults, so missing keys read as enabled."""
        merged = default_notification_preferences()
        for section, values in (self.notification_preferences or {}).items():
            if isinstance(values, dict) and section in merged:
                merged[section].update(values)
        return merged

    def set_preferences(self, prefs: Dict[str, Any]) -> None:
        # Assign a fresh object so the JSON column registers the change
        self.notification_preferences = copy.deepcopy(prefs)

    def should_send_notification(
        self,
        channel: NotificationChannel,
        notification_type: NotificationType,
        now: Optional[datetime] = None,
    ) -> bool:
        """
        Whether this user wants a notification of the given type on the channel.

        Quiet hours only apply to email.
        """
        prefs = self.get_preferences()
        channel_prefs = prefs[channel.value]
        if not channel_prefs.get("enabled", True):
            return False
        if not channel_prefs.get(notification_type.value, True):
            return False

        quiet = prefs["quiet_hours"]
        if channel == NotificationChannel.EMAIL and quiet.get("enabled"):
            current = to_local(now or get_utc_now()).strftime("%H:%M")
            if is_within_quiet_hours(current, quiet["start_time"], quiet["end_time"]):
                return False
        return True

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
