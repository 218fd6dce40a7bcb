"""Async key/value cache capability used for access tokens.

The token manager only depends on the ``Cache`` protocol; ``DefaultCache`` is
the in-process implementation used when no cache is supplied. Expiry is checked
lazily on read, entries are never swept proactively.
"""

import time
from collections.abc import Hashable
from typing import Any, Protocol, TypeAlias

from .models import CacheEntry

CacheKey: TypeAlias = str | Hashable


class Cache(Protocol):
    """Minimal async cache contract consumed by the token manager."""

    async def get(self, key: CacheKey, *, namespace: str | None = None) -> Any:
        """Return the cached value, or ``None`` when absent or expired."""
        ...

    async def set(
        self,
        key: CacheKey,
        value: Any,
        expires_at: int | None = None,
        *,
        namespace: str | None = None,
    ) -> bool:
        """Store ``value`` until ``expires_at`` (epoch milliseconds)."""
        ...


def make_cache_key(key: CacheKey, namespace: str | None = None) -> CacheKey:
    """Combine ``namespace`` and ``key`` into ``namespace/key``."""
    if namespace:
        return f"{namespace}/{key}"
    return key


class DefaultCache:
    """In-memory cache with lazy expiry."""

    def __init__(self) -> None:
        self.values: dict[CacheKey, CacheEntry] = {}

    async def get(self, key: CacheKey, *, namespace: str | None = None) -> Any:
        entry = self.values.get(make_cache_key(key, namespace))
        if entry is None:
            return None
        if entry.is_expired(int(time.time() * 1000)):
            return None
        return entry.value

    async def set(
        self,
        key: CacheKey,
        value: Any,
        expires_at: int | None = None,
        *,
        namespace: str | None = None,
    ) -> bool:
        self.values[make_cache_key(key, namespace)] = CacheEntry(value=value, expired_at=expires_at)
        return True


__all__ = ["Cache", "CacheKey", "DefaultCache", "make_cache_key"]
