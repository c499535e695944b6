"""JWT access tokens.

Tokens are issued by the external identity service; this module validates
them and yields the username carried in ``sub``. ``create_access_token``
mints tokens with the same shape for local development and tests.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from redis.exceptions import RedisError

from ..config import get_settings
from ..core.logging import get_logger
from ..core.redis_client import get_redis_client

logger = get_logger("security")


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token with a JTI so it can be revoked."""
    settings = get_settings()
    to_encode = data.copy()

    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "type": "access", "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


async def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate an access token; None if invalid, expired or revoked."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    if payload.get("type") != "access":
        return None

    jti = payload.get("jti")
    if jti:
        try:
            if await get_redis_client().is_token_revoked(jti):
                return None
        except RedisError as e:
            # revocation list unavailable: signature and expiry still hold
            logger.warning("Token revocation check skipped", extra={"error": str(e)})

    return payload


async def get_username_from_token(token: str) -> Optional[str]:
    """Extract the username (``sub``) from a valid token."""
    payload = await decode_access_token(token)
    if not payload:
        return None

    username = payload.get("sub")
    if not isinstance(username, str) or not username.strip():
        return None
    return username
