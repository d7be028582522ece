"""Centralized Enum Definitions"""

import enum


# Domain 1: Users
class UserRole(str, enum.Enum):
    """User roles for RBAC"""
    ADMIN = "admin"
    TENANT = "tenant"


# Domain 2: Billing
class BillStatus(str, enum.Enum):
    """Bill lifecycle: pending -> paid (slip uploaded) -> verified (admin approved)"""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    VERIFIED = "verified"


class PaymentStatus(str, enum.Enum):
    """Payment slip review status"""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


# Domain 3: Notifications
class NotificationType(str, enum.Enum):
    """Notification types - shared by in-app notifications, templates and preferences"""
    PAYMENT_REMINDER = "payment_reminder"
    PAYMENT_VERIFIED = "payment_verified"
    PAYMENT_REJECTED = "payment_rejected"
    BILL_GENERATED = "bill_generated"
    OVERDUE = "overdue"


class NotificationChannel(str, enum.Enum):
    """Notification delivery channels"""
    IN_APP = "in_app"
    EMAIL = "email"


# Domain 4: Maintenance
class MaintenanceCategory(str, enum.Enum):
    ELECTRICAL = "electrical"
    PLUMBING = "plumbing"
    AIR_CONDITIONING = "air-conditioning"
    FURNITURE = "furniture"
    CLEANING = "cleaning"
    SECURITY = "security"
    OTHER = "other"


class MaintenancePriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class MaintenanceStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
