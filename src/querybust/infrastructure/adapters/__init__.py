"""Query cache adapters.

``RedisQueryCache`` lives in ``querybust.infrastructure.adapters.redis``
and needs the ``redis`` extra.
"""

from querybust.infrastructure.adapters.memory import Fetcher, InMemoryQueryCache

__all__ = ["Fetcher", "InMemoryQueryCache"]
