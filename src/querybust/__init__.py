"""querybust - Rule-based query cache invalidation for RPC mutations.

Keeps a client-side query cache consistent after mutations complete.
Each mutation maps to a rule naming the queries to mark stale, the
queries to refetch, and a strategy deciding what the caller waits for.

Example:
    from querybust import (
        InMemoryQueryCache,
        InvalidationExecutor,
        RuleRegistry,
        crud,
        searchable,
    )

    registry = RuleRegistry()
    registry.on_mutations(crud("items", "itemById", "itemCount"), namespace="item")
    registry.on_mutations(searchable("searchResults", "items"))
    registry.on_mutation("item.archive", {
        "invalidate": ["items"],
        "refetch": [("itemById",)],
        "strategy": "hybrid",
    })

    cache = InMemoryQueryCache()
    executor = InvalidationExecutor(registry)

    # after the RPC call for item.delete has resolved:
    await executor.invalidate(cache, "item.delete", {"id": "42"})

Strategies:
    optimistic   everything in the background, failures only logged
    pessimistic  everything awaited, first failure raises InvalidationError
    hybrid       invalidations in the background, refetches/hook awaited
    none         only the custom hook runs, awaited
"""

from querybust.core.entities import (
    CustomHook,
    InvalidationConfig,
    InvalidationRule,
    InvalidationStrategy,
    QueryKeyPattern,
)
from querybust.core.errors import (
    ConfigurationError,
    InvalidationError,
    QuerybustError,
)
from querybust.core.interfaces import ICacheAdapter, ISerializer
from querybust.core.services import (
    InvalidationExecutor,
    RuleRegistry,
    StrategyPolicy,
)
from querybust.decorators import invalidates
from querybust.infrastructure import (
    InMemoryQueryCache,
    JsonSerializer,
    SerializationError,
)
from querybust.patterns import crud, hierarchical, searchable

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CustomHook",
    "InvalidationConfig",
    "InvalidationRule",
    "InvalidationStrategy",
    "QueryKeyPattern",
    # Errors
    "QuerybustError",
    "ConfigurationError",
    "InvalidationError",
    "SerializationError",
    # Core interfaces
    "ICacheAdapter",
    "ISerializer",
    # Core services
    "RuleRegistry",
    "InvalidationExecutor",
    "StrategyPolicy",
    # Pattern templates
    "crud",
    "hierarchical",
    "searchable",
    # Infrastructure implementations
    "InMemoryQueryCache",
    "JsonSerializer",
    # Decorators
    "invalidates",
]
