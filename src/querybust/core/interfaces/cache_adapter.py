"""Cache adapter interface."""

from typing import Any, Protocol

from querybust.core.entities.query_key import QueryKeyPattern


class ICacheAdapter(Protocol):
    """Contract for the query cache driven by the invalidation executor.

    Adapters own key matching, refetch machinery and timeouts. Both
    methods must be idempotent and safe to call with patterns that
    match zero cached entries.
    """

    async def invalidate(self, pattern: QueryKeyPattern) -> Any:
        """Mark cached entries matching pattern as stale.

        Args:
            pattern: The query key pattern to invalidate.

        Returns:
            Adapter-specific outcome (ignored by the executor).
        """
        ...

    async def refetch(self, pattern: QueryKeyPattern) -> Any:
        """Force an eager refresh of entries matching pattern.

        Args:
            pattern: The query key pattern to refetch.

        Returns:
            Adapter-specific outcome (ignored by the executor).
        """
        ...
