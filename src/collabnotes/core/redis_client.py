"""Redis client for the access-token revocation list."""

from typing import Optional

import redis.asyncio as redis

from ..config import get_settings
from .logging import get_logger

logger = get_logger("redis")

REVOKED_PREFIX = "revoked:"


class RedisClient:
    """Thin async Redis wrapper. Every call is a no-op until ``connect`` succeeds."""

    def __init__(self):
        self.settings = get_settings()
        self.redis: Optional[redis.Redis] = None

    @property
    def connected(self) -> bool:
        return self.redis is not None

    async def connect(self) -> None:
        """Connect to Redis."""
        client = redis.from_url(
            self.settings.redis_url,
            max_connections=self.settings.redis_max_connections,
            decode_responses=True,
        )
        try:
            await client.ping()
        except Exception as e:
            await client.aclose()
            logger.error("Failed to connect to Redis", extra={"error": str(e)})
            raise
        self.redis = client
        logger.info("Connected to Redis")

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Disconnected from Redis")

    async def ping(self) -> bool:
        if not self.redis:
            return False
        return bool(await self.redis.ping())

    async def revoke_token(self, token_jti: str, expire: int) -> bool:
        """Put a token id on the revocation list until the token would expire anyway.

        The external identity service writes these keys on logout; this service
        only reads them (see ``security.jwt.decode_access_token``). Kept here so
        tests and local tooling can revoke a token against the same key layout.
        """
        if not self.redis or expire <= 0:
            return False
        return bool(await self.redis.setex(f"{REVOKED_PREFIX}{token_jti}", expire, "1"))

    async def is_token_revoked(self, token_jti: str) -> bool:
        if not self.redis:
            return False
        return await self.redis.exists(f"{REVOKED_PREFIX}{token_jti}") > 0


# Singleton instance
_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """Get Redis client singleton."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client
