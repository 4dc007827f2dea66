"""Storage interfaces following Black Box Design principles."""
from typing import List, Optional, Protocol


class KeyValueStore(Protocol):
    """
    Protocol for the external key-value store.

    Every method is a single atomic store operation. Sequences of calls are
    not atomic as a whole. Implementations raise StoreError on any
    communication failure.
    """

    async def get(self, key: str) -> Optional[str]:
        """Return the plain value stored under key, or None if absent."""
        ...

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Store a plain value, expiring after ttl seconds when given."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key. Returns True if something was deleted."""
        ...

    async def exists(self, key: str) -> bool:
        """Check whether key is present."""
        ...

    async def keys_with_prefix(self, prefix: str) -> List[str]:
        """Enumerate all keys starting with prefix."""
        ...

    async def hget(self, key: str, field: str) -> Optional[str]:
        """Return one field of the hash stored under key, or None."""
        ...

    async def hset(self, key: str, field: str, value: str, ttl: Optional[int] = None) -> None:
        """Set one field of the hash stored under key."""
        ...

    async def ping(self) -> bool:
        """Check connectivity."""
        ...
