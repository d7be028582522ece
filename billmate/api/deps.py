"""API Dependencies"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.core.security import TOKEN_TYPE_ACCESS, decode_token
from billmate.database import get_db
from billmate.models.user import User
from billmate.services.user_service import UserService

__all__ = ["get_db", "get_current_user", "require_admin"]

# Security scheme for bearer token
security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> User:
    """
    Resolve the authenticated user from the bearer token.

    Raises:
        HTTPException: 401 if the token is invalid or the account is gone or disabled
    """
    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != TOKEN_TYPE_ACCESS:
        raise _unauthorized("Could not validate credentials")

    user_id_str: Optional[str] = payload.get("sub")
    if not user_id_str:
        raise _unauthorized("Could not validate credentials")
    try:
        user_id = UUID(user_id_str)
    except ValueError:
        raise _unauthorized("Invalid user ID")

    user = await UserService.get_user_by_id(db, user_id)
    if not user or not user.is_active:
        raise _unauthorized("User not found or inactive")
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="ไม่มีสิทธิ์เข้าถึง",
        )
    return current_user
