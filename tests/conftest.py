"""
Shared pytest fixtures for credgate tests.

This module provides common fixtures including:
- InMemoryStore: KeyValueStore fake with TTL bookkeeping and failure injection
- Redis mocks for the Redis store adapter
- Environment isolation for configuration tests
"""

import fnmatch
from typing import Dict, List, Optional, Set
from unittest.mock import AsyncMock

import pytest

from credgate.errors import StoreError


# =============================================================================
# Key-Value Store Fake
# =============================================================================


class InMemoryStore:
    """
    In-memory KeyValueStore for tests.

    Plain values and hashes live in separate dicts like in Redis. TTLs are
    recorded but never enforced; tests expire keys with expire_now().
    Operations named in fail_on raise StoreError.
    """

    def __init__(self):
        self.values: Dict[str, str] = {}
        self.hashes: Dict[str, Dict[str, str]] = {}
        self.ttls: Dict[str, Optional[int]] = {}
        self.fail_on: Set[str] = set()
        self.fail_keys: Set[str] = set()
        self.calls: List[tuple] = []

    def _check(self, operation: str, key: str = ""):
        self.calls.append((operation, key))
        if operation in self.fail_on or key in self.fail_keys:
            raise StoreError(f"{operation} failed: connection refused")

    def expire_now(self, key: str):
        self.values.pop(key, None)
        self.hashes.pop(key, None)
        self.ttls.pop(key, None)

    async def get(self, key: str) -> Optional[str]:
        self._check("get", key)
        return self.values.get(key)

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        self._check("set", key)
        self.hashes.pop(key, None)
        self.values[key] = value
        self.ttls[key] = ttl

    async def delete(self, key: str) -> bool:
        self._check("delete", key)
        found = key in self.values or key in self.hashes
        self.expire_now(key)
        return found

    async def exists(self, key: str) -> bool:
        self._check("exists", key)
        return key in self.values or key in self.hashes

    async def keys_with_prefix(self, prefix: str) -> List[str]:
        self._check("keys_with_prefix", prefix)
        keys = list(self.values) + list(self.hashes)
        return [k for k in keys if fnmatch.fnmatchcase(k, f"{prefix}*")]

    async def hget(self, key: str, field: str) -> Optional[str]:
        self._check("hget", key)
        return self.hashes.get(key, {}).get(field)

    async def hset(self, key: str, field: str, value: str, ttl: Optional[int] = None) -> None:
        self._check("hset", key)
        self.values.pop(key, None)
        self.hashes.setdefault(key, {})[field] = value
        self.ttls[key] = ttl

    async def ping(self) -> bool:
        self._check("ping")
        return True


@pytest.fixture
def store():
    """Empty in-memory key-value store."""
    return InMemoryStore()


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================


@pytest.fixture
def mock_redis():
    """Create a mock async Redis client."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.setex = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.exists = AsyncMock(return_value=0)
    redis.keys = AsyncMock(return_value=[])
    redis.expire = AsyncMock(return_value=True)
    redis.hget = AsyncMock(return_value=None)
    redis.hset = AsyncMock(return_value=1)
    redis.ping = AsyncMock(return_value=True)
    return redis


# =============================================================================
# Environment Isolation
# =============================================================================

CREDGATE_ENV_VARS = [
    "ACCESS_PWD",
    "REDIS_URL",
    "REDIS_HOST",
    "REDIS_PORT",
    "REDIS_DB",
    "REDIS_PASSWORD",
    "API_HOST",
    "API_PORT",
    "LOG_LEVEL",
    "DEBUG",
    "SESSION_TTL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every credgate setting from the environment."""
    for name in CREDGATE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
