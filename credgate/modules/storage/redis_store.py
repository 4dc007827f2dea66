import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

import redis.asyncio as redis

from ...errors import StoreError
from ...logging_config import mask_key

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str, key: str) -> Iterator[None]:
    """Translate Redis client failures into StoreError."""
    try:
        yield
    except redis.RedisError as e:
        logger.error(f"Redis {operation} failed for {mask_key(key)}: {e}")
        raise StoreError(f"{operation} failed: {e}") from e


def _decode(value):
    return value.decode("utf-8") if isinstance(value, bytes) else value


class RedisStore:
    """KeyValueStore backed by an async Redis client."""

    def __init__(self, redis_client: redis.Redis):
        """
        Initialize Redis store.

        Args:
            redis_client: Async Redis client
        """
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        with _store_errors("GET", key):
            return _decode(await self.redis.get(key))

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        with _store_errors("SET", key):
            if ttl:
                await self.redis.setex(key, ttl, value)
            else:
                await self.redis.set(key, value)

    async def delete(self, key: str) -> bool:
        with _store_errors("DEL", key):
            return await self.redis.delete(key) > 0

    async def exists(self, key: str) -> bool:
        with _store_errors("EXISTS", key):
            return await self.redis.exists(key) > 0

    async def keys_with_prefix(self, prefix: str) -> List[str]:
        """
        Enumerate keys by prefix.

        Uses KEYS rather than SCAN: the credential namespace is small and a
        single round-trip keeps the snapshot as tight as possible.
        """
        with _store_errors("KEYS", f"{prefix}*"):
            keys = await self.redis.keys(f"{prefix}*")
        return [_decode(key) for key in keys]

    async def hget(self, key: str, field: str) -> Optional[str]:
        with _store_errors("HGET", key):
            return _decode(await self.redis.hget(key, field))

    async def hset(self, key: str, field: str, value: str, ttl: Optional[int] = None) -> None:
        with _store_errors("HSET", key):
            await self.redis.hset(key, field, value)
            if ttl:
                await self.redis.expire(key, ttl)

    async def ping(self) -> bool:
        with _store_errors("PING", "-"):
            return bool(await self.redis.ping())
