"""
JWT access token helpers.
"""

from datetime import timedelta
from typing import Any, Dict, Optional

import jwt

from app.core.config import settings
from app.utils.time import utc_now


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to embed (user_id, email, role)
        expires_delta: Lifetime override; defaults to ACCESS_TOKEN_EXPIRE_HOURS

    Returns:
        Encoded JWT string
    """
    issued_at = utc_now()
    expire = issued_at + (expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS))
    payload = dict(data)
    payload.update({"iat": issued_at, "exp": expire})
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and verify a JWT access token.

    Returns:
        The claims dict, or None if the token is invalid or expired
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        return None
