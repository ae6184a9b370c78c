"""Exceptions raised by querybust."""

from typing import Any


class QuerybustError(Exception):
    """Base class for all querybust errors."""


class ConfigurationError(QuerybustError, ValueError):
    """Raised when a rule or template is malformed at registration time."""


class InvalidationError(QuerybustError):
    """Raised when an awaited adapter call or custom hook fails.

    Attributes:
        mutation_name: The mutation whose rule was being executed.
        action: One of ``"invalidate"``, ``"refetch"`` or ``"custom"``.
        target: The query key pattern, or the custom hook's name.
        error: The underlying exception (also chained as ``__cause__``).
    """

    def __init__(
        self,
        mutation_name: str,
        action: str,
        target: Any,
        error: BaseException,
    ) -> None:
        self.mutation_name = mutation_name
        self.action = action
        self.target = target
        self.error = error
        super().__init__(
            f"{action} of {target} failed for mutation "
            f"{mutation_name!r}: {error!r}"
        )
