"""API V1 Router"""

from fastapi import APIRouter

from billmate.api.v1.endpoints import (
    auth, users, profile, rooms, bills,
    payments, notifications, maintenance, cron
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(profile.router, prefix="/profile", tags=["Profile"])
api_router.include_router(rooms.router, prefix="/rooms", tags=["Rooms"])
api_router.include_router(bills.router, prefix="/bills", tags=["Bills"])
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(maintenance.router, prefix="/maintenance", tags=["Maintenance"])
api_router.include_router(cron.router, prefix="/cron", tags=["Scheduled Jobs"])
