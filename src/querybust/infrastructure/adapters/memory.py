"""In-memory query cache adapter."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from cachetools import TTLCache  # type: ignore[import-untyped]

from querybust.core.entities.query_key import QueryKey, QueryKeyPattern, freeze_key

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]


class InMemoryQueryCache:
    """In-memory query cache using LRU with TTL support.

    Stores query results by key, remembers which entries are stale and
    how to fetch each registered query. Suitable for single-process
    clients. Uses cachetools for LRU eviction and TTL expiration.

    Invalidation only marks entries stale: the next ``fetch`` reloads
    them. Refetch reloads every registered query under the pattern now.
    """

    def __init__(
        self,
        maxsize: int = 1000,
        default_ttl: float = 300.0,
    ) -> None:
        """Initialize the in-memory query cache.

        Args:
            maxsize: Maximum number of cached results.
            default_ttl: TTL in seconds for cached results.
        """
        self._maxsize = maxsize
        self._cache: TTLCache[QueryKey, Any] = TTLCache(
            maxsize=maxsize,
            ttl=default_ttl,
        )
        self._stale: set[QueryKey] = set()
        self._fetchers: dict[QueryKey, Fetcher] = {}

    def register(self, key: Any, fetcher: Fetcher) -> QueryKey:
        """Register the fetcher used to (re)load a query.

        Args:
            key: The query key, e.g. ``("itemById", {"id": 1})``.
            fetcher: Zero-argument coroutine function returning the result.

        Returns:
            The frozen key the query is stored under.
        """
        frozen = freeze_key(key)
        self._fetchers[frozen] = fetcher
        return frozen

    async def get(self, key: Any) -> Any | None:
        """Return the cached result (stale or not), or None."""
        return self._cache.get(freeze_key(key))

    async def set(self, key: Any, value: Any) -> None:
        """Store a result as fresh."""
        self._store(freeze_key(key), value)

    def is_stale(self, key: Any) -> bool:
        """True if the key is missing, expired or marked stale."""
        frozen = freeze_key(key)
        return frozen not in self._cache or frozen in self._stale

    async def fetch(self, key: Any) -> Any:
        """Return a fresh result, loading it through its fetcher if needed.

        Raises:
            LookupError: If the result is stale and no fetcher is registered.
        """
        frozen = freeze_key(key)
        if not self.is_stale(frozen):
            return self._cache[frozen]

        fetcher = self._fetchers.get(frozen)
        if fetcher is None:
            raise LookupError(f"No fetcher registered for query key {frozen!r}")

        value = await fetcher()
        self._store(frozen, value)
        return value

    async def invalidate(self, pattern: QueryKeyPattern) -> int:
        """Mark cached results matching pattern as stale.

        Returns:
            Number of cached results marked stale.
        """
        cached = set(self._cache.keys())
        # Forget stale markers of entries that expired or were evicted
        self._stale &= cached

        matched = [key for key in cached if pattern.matches(key)]
        self._stale.update(matched)
        logger.debug("Marked %d entries stale for %s", len(matched), pattern)
        return len(matched)

    async def refetch(self, pattern: QueryKeyPattern) -> int:
        """Reload every registered query matching pattern.

        Returns:
            Number of queries reloaded.
        """
        keys = [key for key in list(self._fetchers) if pattern.matches(key)]
        for key in keys:
            self._store(key, await self._fetchers[key]())
        logger.debug("Refetched %d queries for %s", len(keys), pattern)
        return len(keys)

    async def clear(self) -> None:
        """Drop all cached results. Registered fetchers are kept."""
        self._cache.clear()
        self._stale.clear()

    def _store(self, key: QueryKey, value: Any) -> None:
        self._cache[key] = value
        self._stale.discard(key)

    def __len__(self) -> int:
        """Return the number of cached results."""
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return self._maxsize
