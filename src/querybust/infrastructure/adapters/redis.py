"""Redis query cache adapter."""

import logging
from datetime import timedelta
from typing import Any

import redis.asyncio as redis

from querybust.core.entities.query_key import QueryKey, QueryKeyPattern, freeze_key
from querybust.core.interfaces.serializer import ISerializer
from querybust.infrastructure.adapters.memory import Fetcher
from querybust.infrastructure.serializers.json import JsonSerializer

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = "\\*?[]"


class RedisQueryCache:
    """Redis query cache for results shared across processes.

    Keys are rendered as ``prefix:segment:segment``. Invalidation deletes
    the matching keys, so the next read goes back to the fetcher; refetch
    reloads registered queries and writes them back immediately.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str = "querybust",
        default_ttl: int | None = 300,
        serializer: ISerializer | None = None,
        client: redis.Redis | None = None,
    ) -> None:
        """Initialize the Redis query cache.

        Args:
            redis_url: Redis connection URL (ignored when client is given).
            key_prefix: Prefix for all cache keys.
            default_ttl: Default TTL in seconds, None for no expiry.
            serializer: Serializer for results. Defaults to JSON.
            client: Optional pre-built ``redis.asyncio`` client.
        """
        self._redis: redis.Redis = (
            client if client is not None else redis.from_url(redis_url)  # type: ignore
        )
        self._key_prefix = key_prefix
        self._default_ttl = default_ttl
        self._serializer = serializer or JsonSerializer()
        self._fetchers: dict[QueryKey, Fetcher] = {}

    def register(self, key: Any, fetcher: Fetcher) -> QueryKey:
        """Register the fetcher used to reload a query on refetch."""
        frozen = freeze_key(key)
        self._fetchers[frozen] = fetcher
        return frozen

    def redis_key(self, key: Any) -> str:
        """Render a query key as a Redis key."""
        segments = [str(segment) for segment in freeze_key(key)]
        return ":".join([self._key_prefix, *segments])

    async def get(self, key: Any) -> Any | None:
        """Return the cached result, or None if missing."""
        raw = await self._redis.get(self.redis_key(key))
        if raw is None:
            return None
        return self._serializer.deserialize(raw)

    async def set(
        self,
        key: Any,
        value: Any,
        ttl: timedelta | None = None,
    ) -> None:
        """Store a result with optional TTL (defaults to default_ttl)."""
        redis_key = self.redis_key(key)
        data = self._serializer.serialize(value)

        if ttl is not None:
            await self._redis.setex(redis_key, int(ttl.total_seconds()), data)
        elif self._default_ttl is not None:
            await self._redis.setex(redis_key, self._default_ttl, data)
        else:
            await self._redis.set(redis_key, data)

    async def invalidate(self, pattern: QueryKeyPattern) -> int:
        """Delete cached results matching pattern.

        Returns:
            Number of Redis keys deleted.
        """
        base = self.redis_key(pattern.key)
        count = int(await self._redis.delete(base))
        if not pattern.exact:
            count += await self._delete_by_pattern(f"{_escape_glob(base)}:*")
        logger.debug("Deleted %d keys for %s", count, pattern)
        return count

    async def refetch(self, pattern: QueryKeyPattern) -> int:
        """Reload every registered query matching pattern.

        Returns:
            Number of queries reloaded.
        """
        keys = [key for key in list(self._fetchers) if pattern.matches(key)]
        for key in keys:
            await self.set(key, await self._fetchers[key]())
        return len(keys)

    async def _delete_by_pattern(self, pattern: str) -> int:
        """Delete keys matching a glob pattern using SCAN.

        Uses SCAN instead of KEYS for production safety.
        """
        count = 0
        cursor = 0

        while True:
            cursor, keys = await self._redis.scan(cursor, match=pattern, count=100)

            if keys:
                count += await self._redis.delete(*keys)

            if cursor == 0:
                break

        return count

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    async def __aenter__(self) -> "RedisQueryCache":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()


def _escape_glob(value: str) -> str:
    return "".join(f"\\{char}" if char in _GLOB_SPECIAL else char for char in value)
