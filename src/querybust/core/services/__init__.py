"""Domain services for querybust."""

from querybust.core.services.invalidation_executor import (
    STRATEGY_POLICIES,
    ErrorHandler,
    InvalidationExecutor,
    StrategyPolicy,
)
from querybust.core.services.rule_registry import RuleRegistry

__all__ = [
    "RuleRegistry",
    "InvalidationExecutor",
    "StrategyPolicy",
    "STRATEGY_POLICIES",
    "ErrorHandler",
]
