"""
Unit tests for the Redis-backed key-value store.
"""

import pytest
import redis.asyncio as redis

from credgate.errors import StoreError
from credgate.modules.storage import RedisStore, StorageModule


@pytest.fixture
def redis_store(mock_redis):
    return RedisStore(mock_redis)


@pytest.mark.asyncio
async def test_set_with_ttl_uses_setex(redis_store, mock_redis):
    await redis_store.set("login:token:abc", "valid", ttl=86400)

    mock_redis.setex.assert_called_once_with("login:token:abc", 86400, "valid")
    mock_redis.set.assert_not_called()


@pytest.mark.asyncio
async def test_set_without_ttl(redis_store, mock_redis):
    await redis_store.set("current_token", "abc")

    mock_redis.set.assert_called_once_with("current_token", "abc")
    mock_redis.setex.assert_not_called()


@pytest.mark.asyncio
async def test_get_decodes_bytes(redis_store, mock_redis):
    mock_redis.get.return_value = b"abc"

    assert await redis_store.get("current_token") == "abc"


@pytest.mark.asyncio
async def test_get_missing(redis_store, mock_redis):
    assert await redis_store.get("current_token") is None


@pytest.mark.asyncio
async def test_exists(redis_store, mock_redis):
    mock_redis.exists.return_value = 1
    assert await redis_store.exists("token:abc") is True

    mock_redis.exists.return_value = 0
    assert await redis_store.exists("token:abc") is False


@pytest.mark.asyncio
async def test_delete(redis_store, mock_redis):
    assert await redis_store.delete("token:abc") is True
    mock_redis.delete.assert_called_once_with("token:abc")

    mock_redis.delete.return_value = 0
    assert await redis_store.delete("token:abc") is False


@pytest.mark.asyncio
async def test_keys_with_prefix(redis_store, mock_redis):
    mock_redis.keys.return_value = [b"token:abc", "token:xyz"]

    keys = await redis_store.keys_with_prefix("token:")

    assert keys == ["token:abc", "token:xyz"]
    mock_redis.keys.assert_called_once_with("token:*")


@pytest.mark.asyncio
async def test_hash_operations(redis_store, mock_redis):
    mock_redis.hget.return_value = "https://t1.example"

    await redis_store.hset("token:abc", "tenant_url", "https://t1.example")
    value = await redis_store.hget("token:abc", "tenant_url")

    mock_redis.hset.assert_called_once_with("token:abc", "tenant_url", "https://t1.example")
    mock_redis.expire.assert_not_called()
    mock_redis.hget.assert_called_once_with("token:abc", "tenant_url")
    assert value == "https://t1.example"


@pytest.mark.asyncio
async def test_hset_with_ttl(redis_store, mock_redis):
    await redis_store.hset("token:abc", "tenant_url", "https://t1.example", ttl=30)

    mock_redis.expire.assert_called_once_with("token:abc", 30)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,args",
    [
        ("get", ("k",)),
        ("set", ("k", "v")),
        ("delete", ("k",)),
        ("exists", ("k",)),
        ("keys_with_prefix", ("token:",)),
        ("hget", ("k", "f")),
        ("hset", ("k", "f", "v")),
        ("ping", ()),
    ],
)
async def test_redis_errors_become_store_errors(redis_store, mock_redis, method, args):
    """Every client failure surfaces as StoreError with the cause chained."""
    failure = redis.ConnectionError("connection refused")
    for name in ("get", "set", "delete", "exists", "keys", "hget", "hset", "ping"):
        getattr(mock_redis, name).side_effect = failure

    with pytest.raises(StoreError) as exc_info:
        await getattr(redis_store, method)(*args)

    assert exc_info.value.__cause__ is failure


@pytest.mark.asyncio
async def test_ping(redis_store, mock_redis):
    assert await redis_store.ping() is True


def test_storage_module_url(monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)
    assert StorageModule().url == "redis://localhost:6379/0"

    monkeypatch.setenv("REDIS_URL", "redis://cache:6380/2")
    assert StorageModule().url == "redis://cache:6380/2"
    assert StorageModule("redis://explicit:6379/1").url == "redis://explicit:6379/1"


@pytest.mark.asyncio
async def test_storage_module_connect_and_disconnect():
    """connect() builds one client lazily and wraps it as a RedisStore."""
    module = StorageModule("redis://localhost:6379/0")

    store = await module.connect()
    assert isinstance(store, RedisStore)
    assert await module.connect() is store

    await module.disconnect()
    assert module._client is None
