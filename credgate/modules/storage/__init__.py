"""
Storage Module - Black Box Interface

Purpose: Abstract all data persistence
Interface: KeyValueStore protocol, StorageModule.connect(), disconnect()
Hidden: Redis specifics, connection pooling, error translation

Can be replaced with any storage backend without affecting other modules.
"""

import logging
import os
from typing import Optional

import redis.asyncio as redis

from .interfaces import KeyValueStore
from .redis_store import RedisStore

logger = logging.getLogger(__name__)


class StorageModule:
    """Black box storage abstraction."""

    def __init__(self, connection_url: Optional[str] = None, password: Optional[str] = None):
        """
        Initialize storage with connection URL.

        Args:
            connection_url: Redis URL (defaults to REDIS_URL or localhost)
            password: Optional password, passed separately to avoid URL encoding issues
        """
        self.url = connection_url or os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self.password = password
        self._client: Optional[redis.Redis] = None
        self._store: Optional[RedisStore] = None

    async def connect(self) -> KeyValueStore:
        """Get storage connection."""
        if not self._client:
            self._client = redis.from_url(
                self.url,
                password=self.password,
                encoding="utf-8",
                decode_responses=True,
            )
            self._store = RedisStore(self._client)
            logger.info("Storage client created")
        return self._store

    async def disconnect(self):
        """Close storage connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self._store = None


__all__ = ["KeyValueStore", "RedisStore", "StorageModule"]
