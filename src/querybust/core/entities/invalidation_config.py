"""Invalidation configuration entity."""

from dataclasses import dataclass

from querybust.core.entities.invalidation_rule import InvalidationStrategy


@dataclass
class InvalidationConfig:
    """Invalidation configuration.

    Provides options shared by the registry and the executor.

    Attributes:
        enabled: When False the executor returns without touching the cache.
        default_strategy: Strategy for rules registered without one.
        debug: Emit a trace line per executed action.
        log_background_errors: Log failures of fire-and-forget actions.
            The executor's error handler is called either way.
    """

    enabled: bool = True
    default_strategy: InvalidationStrategy = InvalidationStrategy.OPTIMISTIC
    debug: bool = False
    log_background_errors: bool = True

    def __post_init__(self) -> None:
        """Accept the strategy as a plain string."""
        self.default_strategy = InvalidationStrategy.parse(self.default_strategy)
