"""TTL-based in-process caching.

Services own their caches (config-by-code, default language). A cache holds
copies of records, never the authoritative row, and is invalidated rather
than refreshed when a write may change the cached value. Staleness up to the
TTL is accepted.
"""

from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
import time
from typing import Any

from localization.core.logging import get_logger

logger = get_logger(__name__)

Clock = Callable[[], float]


@dataclass
class CachedValue:
    """A value with its expiration time on the cache clock."""

    value: Any
    expires_at: float


@dataclass
class TTLCache:
    """Simple TTL-based cache with manual expiration.

    Expired entries are treated as misses and dropped on access, or in bulk
    by cleanup_expired(). The clock is injectable so tests can move time.
    Absent keys are never cached (no negative caching).
    """

    ttl_seconds: float = 300  # 5 minutes default
    clock: Clock = time.monotonic
    name: str = "ttl_cache"
    _cache: dict[Hashable, CachedValue] = field(default_factory=dict)

    def get(self, key: Hashable) -> Any | None:
        """Get a value from cache if it exists and hasn't expired."""
        cached = self._cache.get(key)
        if cached is None:
            logger.debug("ttl_cache_miss", cache=self.name, key=key)
            return None

        if self.clock() >= cached.expires_at:
            del self._cache[key]
            logger.debug("ttl_cache_expired", cache=self.name, key=key)
            return None

        logger.debug("ttl_cache_hit", cache=self.name, key=key)
        return cached.value

    def set(self, key: Hashable, value: Any, ttl_seconds: float | None = None) -> None:
        """Set a value in the cache with optional custom TTL."""
        if value is None:
            return
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_seconds
        self._cache[key] = CachedValue(value=value, expires_at=self.clock() + ttl)
        logger.debug("ttl_cache_set", cache=self.name, key=key, ttl=ttl)

    def invalidate(self, key: Hashable) -> None:
        """Remove a key from the cache."""
        self._cache.pop(key, None)
        logger.debug("ttl_cache_invalidated", cache=self.name, key=key)

    def invalidate_all(self) -> None:
        """Clear all entries from the cache."""
        self._cache.clear()
        logger.debug("ttl_cache_cleared", cache=self.name)

    def cleanup_expired(self) -> int:
        """Remove all expired entries. Returns count of removed entries."""
        now = self.clock()
        expired_keys = [k for k, v in self._cache.items() if now >= v.expires_at]
        for key in expired_keys:
            del self._cache[key]
        if expired_keys:
            logger.debug("ttl_cache_cleanup", cache=self.name, removed=len(expired_keys))
        return len(expired_keys)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._cache)
