"""Invalidation rule entities."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from querybust.core.entities.query_key import QueryKeyPattern
from querybust.core.errors import ConfigurationError

CustomHook = Callable[[Any, Any, Any], Any]


class InvalidationStrategy(Enum):
    """Timing and error policy applied to a rule's cache actions.

    OPTIMISTIC: Everything fire-and-forget, failures only logged.
    PESSIMISTIC: Everything awaited, the first failure is raised.
    HYBRID: Invalidations fire-and-forget, refetches and hook awaited.
    NONE: No invalidate/refetch; only the custom hook runs (awaited).
    """

    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"
    HYBRID = "hybrid"
    NONE = "none"

    @classmethod
    def parse(cls, value: "InvalidationStrategy | str") -> "InvalidationStrategy":
        """Resolve a strategy from an enum member or its string value.

        Raises:
            ConfigurationError: If the value is not one of the four variants.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        known = ", ".join(member.value for member in cls)
        raise ConfigurationError(
            f"Unknown invalidation strategy {value!r} (expected one of: {known})"
        )


@dataclass(frozen=True)
class InvalidationRule:
    """Immutable description of a mutation's cache effects.

    Construction normalizes every field: pattern lists become tuples of
    QueryKeyPattern and the strategy is parsed into the enum, so a rule
    built directly is validated the same way as one built by ``create``.

    A rule with strategy NONE and no custom hook is a legal no-op that
    documents "this mutation has no cache effects".
    """

    invalidate: tuple[QueryKeyPattern, ...] = ()
    refetch: tuple[QueryKeyPattern, ...] = ()
    strategy: InvalidationStrategy = InvalidationStrategy.OPTIMISTIC
    custom: CustomHook | None = None

    def __post_init__(self) -> None:
        if self.custom is not None and not callable(self.custom):
            raise ConfigurationError(
                f"Custom hook must be callable, got {type(self.custom).__name__}"
            )
        object.__setattr__(self, "invalidate", _patterns("invalidate", self.invalidate))
        object.__setattr__(self, "refetch", _patterns("refetch", self.refetch))
        object.__setattr__(self, "strategy", InvalidationStrategy.parse(self.strategy))

    @property
    def is_noop(self) -> bool:
        """True if executing this rule never touches the cache."""
        return self.strategy is InvalidationStrategy.NONE and self.custom is None

    @property
    def custom_name(self) -> str | None:
        """Name of the custom hook, used to identify it in errors."""
        if self.custom is None:
            return None
        return getattr(self.custom, "__qualname__", None) or repr(self.custom)

    @classmethod
    def create(
        cls,
        invalidate: Sequence[Any] | None = None,
        refetch: Sequence[Any] | None = None,
        strategy: InvalidationStrategy | str = InvalidationStrategy.OPTIMISTIC,
        custom: CustomHook | None = None,
    ) -> "InvalidationRule":
        """Factory method accepting loose pattern and strategy forms.

        Args:
            invalidate: Patterns to mark stale, in order.
            refetch: Patterns to refresh eagerly, in order.
            strategy: Strategy enum member or its string value.
            custom: Optional hook called with (cache, variables, data).

        Returns:
            A new InvalidationRule instance.

        Raises:
            ConfigurationError: If any part of the rule is malformed.
        """
        return cls(
            invalidate=invalidate,  # type: ignore[arg-type]
            refetch=refetch,  # type: ignore[arg-type]
            strategy=strategy,  # type: ignore[arg-type]
            custom=custom,
        )


def _patterns(field_name: str, values: Sequence[Any] | None) -> tuple[QueryKeyPattern, ...]:
    if values is None:
        return ()
    # Strings are sequences too; reject them explicitly
    if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple)):
        raise ConfigurationError(
            f"{field_name!r} must be a list of query key patterns, "
            f"got {type(values).__name__}"
        )
    return tuple(QueryKeyPattern.coerce(value) for value in values)
