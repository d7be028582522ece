"""User Service - accounts, authentication and profile"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.core.exceptions import ConflictError, DomainValidationError, NotFoundError
from billmate.core.security import get_password_hash, verify_password
from billmate.models.enums import UserRole
from billmate.models.user import User
from billmate.schemas.user import NotificationPreferences, ProfileUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user-related operations"""

    @staticmethod
    async def create_user(
        db: AsyncSession,
        email: str,
        password: str,
        name: str,
        role: UserRole = UserRole.TENANT,
        phone: Optional[str] = None,
    ) -> User:
        """
        Create a new account. Emails are stored lower-cased and must be unique.

        Raises:
            DomainValidationError: If the email is already registered
        """
        email = email.lower()
        if await UserService.get_user_by_email(db, email):
            raise DomainValidationError("อีเมลนี้ถูกใช้งานแล้ว")

        user = User(
            email=email,
            hashed_password=get_password_hash(password),
            name=name,
            phone=phone,
            role=role,
            is_active=True,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        logger.info("User created", extra={"user_id": str(user.id), "role": role.value})
        return user

    @staticmethod
    async def bootstrap_admin(
        db: AsyncSession, email: str, password: str, name: str, phone: Optional[str] = None
    ) -> User:
        """Create the first admin. Refused once any admin exists."""
        existing = await db.scalar(
            select(func.count(User.id)).where(User.role == UserRole.ADMIN)
        )
        if existing:
            raise ConflictError("มีผู้ดูแลระบบอยู่แล้ว")
        return await UserService.create_user(db, email, password, name, UserRole.ADMIN, phone)

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_users(
        db: AsyncSession,
        role: Optional[UserRole] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[List[User], int]:
        """
        Get paginated list of users.

        Returns:
            Tuple of (users list, total count)
        """
        base = select(User)
        count_query = select(func.count(User.id))
        if role is not None:
            base = base.where(User.role == role)
            count_query = count_query.where(User.role == role)

        total = (await db.execute(count_query)).scalar_one()
        result = await db.execute(
            base.order_by(User.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns:
            User if credentials match an active account, None otherwise
        """
        user = await UserService.get_user_by_email(db, email)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    @staticmethod
    async def update_profile(db: AsyncSession, user: User, profile_in: ProfileUpdate) -> User:
        for field, value in profile_in.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def change_password(
        db: AsyncSession, user: User, current_password: str, new_password: str
    ) -> None:
        if not verify_password(current_password, user.hashed_password):
            raise DomainValidationError("รหัสผ่านปัจจุบันไม่ถูกต้อง")
        user.hashed_password = get_password_hash(new_password)
        await db.commit()
        logger.info("Password changed", extra={"user_id": str(user.id)})

    @staticmethod
    def get_notification_preferences(user: User) -> Dict[str, Any]:
        return user.get_preferences()

    @staticmethod
    async def update_notification_preferences(
        db: AsyncSession, user_id: UUID, prefs: NotificationPreferences
    ) -> Dict[str, Any]:
        user = await UserService.get_user_by_id(db, user_id)
        if not user:
            raise NotFoundError("ไม่พบผู้ใช้")
        user.set_preferences(prefs.model_dump())
        await db.commit()
        return user.get_preferences()
