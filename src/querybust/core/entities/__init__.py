"""Domain entities for querybust."""

from querybust.core.entities.invalidation_config import InvalidationConfig
from querybust.core.entities.invalidation_rule import (
    CustomHook,
    InvalidationRule,
    InvalidationStrategy,
)
from querybust.core.entities.query_key import (
    QueryKey,
    QueryKeyPattern,
    freeze_key,
    freeze_segment,
)

__all__ = [
    "CustomHook",
    "InvalidationConfig",
    "InvalidationRule",
    "InvalidationStrategy",
    "QueryKey",
    "QueryKeyPattern",
    "freeze_key",
    "freeze_segment",
]
