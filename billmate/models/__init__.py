"""Models Package - Export all models for easy imports"""

from billmate.models.base import BaseModel
from billmate.models.enums import *
from billmate.models.user import User
from billmate.models.room import Room
from billmate.models.billing import Bill, Payment
from billmate.models.communication import Notification, NotificationTemplate
from billmate.models.maintenance import Maintenance


__all__ = [
    # Base classes
    "BaseModel",

    # Users & rooms
    "User",
    "Room",

    # Billing
    "Bill",
    "Payment",

    # Communication
    "Notification",
    "NotificationTemplate",

    # Maintenance
    "Maintenance",
]
