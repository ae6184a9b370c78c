"""Core domain layer for querybust."""

from querybust.core.entities import (
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
from querybust.core.services import InvalidationExecutor, RuleRegistry

__all__ = [
    # Entities
    "InvalidationConfig",
    "InvalidationRule",
    "InvalidationStrategy",
    "QueryKeyPattern",
    # Errors
    "QuerybustError",
    "ConfigurationError",
    "InvalidationError",
    # Interfaces
    "ICacheAdapter",
    "ISerializer",
    # Services
    "RuleRegistry",
    "InvalidationExecutor",
]
