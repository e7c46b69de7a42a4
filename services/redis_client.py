"""Redis client service for DocumentGen API.

This module provides Redis connectivity and the counter operations used by the
redis-backed usage store.
"""

from typing import Any, Dict, Optional

import redis.asyncio as redis

from config import ApplicationConfig
from utils import create_contextual_logger, log_exception


class RedisClient:
    """Async Redis client with connection management and counter operations."""

    def __init__(self, config: ApplicationConfig) -> None:
        """Initialize Redis client."""
        self.config = config
        self.logger = create_contextual_logger(__name__, service="redis_client")
        self._pool: Optional[redis.ConnectionPool] = None
        self._client: Optional[redis.Redis] = None
        self._connected = False

    async def connect(self) -> None:
        """Establish Redis connection."""
        try:
            self._pool = redis.ConnectionPool(
                host=self.config.redis_host,
                port=self.config.redis_port,
                password=self.config.redis_password,
                db=self.config.redis_db,
                socket_timeout=self.config.redis_socket_timeout,
                retry_on_timeout=self.config.redis_retry_on_timeout,
                max_connections=self.config.redis_max_connections,
                decode_responses=True,
            )
            self._client = redis.Redis(connection_pool=self._pool)

            await self._client.ping()
            self._connected = True

            self.logger.info(
                "Redis connection established successfully",
                host=self.config.redis_host,
                port=self.config.redis_port,
                db=self.config.redis_db,
            )
        except Exception as e:
            self._connected = False
            log_exception(
                self.logger,
                e,
                "Redis connection failed",
                host=self.config.redis_host,
                port=self.config.redis_port,
                db=self.config.redis_db,
            )
            raise

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._connected = False
            self.logger.info("Disconnected from Redis")

    async def is_connected(self) -> bool:
        """Check Redis connection status."""
        if not self._client or not self._connected:
            return False

        try:
            await self._client.ping()
            return True
        except Exception:
            self._connected = False
            return False

    async def _ensure_connected(self) -> None:
        """Ensure Redis connection is established."""
        if not await self.is_connected():
            await self.connect()

    async def increment(self, key: str, amount: int = 1, ttl: Optional[int] = None) -> int:
        """Atomically add ``amount`` to a counter, refreshing its TTL."""
        await self._ensure_connected()

        try:
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.incrby(key, amount)
                if ttl:
                    pipe.expire(key, ttl)
                results = await pipe.execute()
            return int(results[0])
        except Exception as e:
            log_exception(self.logger, e, "Failed to increment counter", key=key, amount=amount)
            raise

    async def get_counter(self, key: str) -> int:
        """Read a counter; missing keys count as zero."""
        await self._ensure_connected()

        try:
            value = await self._client.get(key)
            return int(value) if value else 0
        except Exception as e:
            log_exception(self.logger, e, "Failed to read counter", key=key)
            raise

    async def health_check(self) -> Dict[str, Any]:
        """Perform Redis health check."""
        try:
            if not await self.is_connected():
                return {"status": "unhealthy", "error": "Not connected to Redis"}
            return {
                "status": "healthy",
                "host": self.config.redis_host,
                "port": self.config.redis_port,
                "db": self.config.redis_db,
            }
        except Exception as e:
            return {"status": "unhealthy", "error": str(e)}
