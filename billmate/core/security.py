"""Password hashing and JWT access tokens"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
from jose import JWTError, jwt

from billmate.config import settings

BCRYPT_MAX_BYTES = 72
TOKEN_TYPE_ACCESS = "access"


def _password_bytes(password: str) -> bytes:
    """
    UTF-8 bytes of the password cut to bcrypt's 72-byte input limit.

    The cut never splits a multi-byte character, which matters for Thai
    passwords (three bytes per character).
    """
    raw = password.encode("utf-8")
    if len(raw) <= BCRYPT_MAX_BYTES:
        return raw
    cut = raw[:BCRYPT_MAX_BYTES]
    while cut:
        try:
            cut.decode("utf-8")
            break
        except UnicodeDecodeError:
            cut = cut[:-1]
    return cut


def get_password_hash(password: str) -> str:
    """bcrypt hash as an ASCII string, ready for ``users.hashed_password``."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("ascii")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("ascii"))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign ``data`` as an HS256 access token.

    Args:
        data: Claims to embed, normally ``{"sub": user_id, "role": role}``
        expires_delta: Lifetime; ACCESS_TOKEN_EXPIRE_MINUTES when omitted
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        **data,
        "exp": datetime.now(timezone.utc) + lifetime,
        "type": TOKEN_TYPE_ACCESS,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user_id: Any, role: str) -> str:
    """Access token for a signed-in account; ``role`` is the UserRole value."""
    return create_access_token({"sub": str(user_id), "role": role})


def decode_token(token: str) -> Optional[dict]:
    """Claims of a valid, unexpired token; None for anything else."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
