"""Query key pattern value object."""

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Any

from querybust.core.errors import ConfigurationError
from querybust.utils.hashing import hash_value

QueryKey = tuple[Hashable, ...]


def freeze_segment(segment: Any) -> Hashable:
    """Return a hashable, deterministic form of a key segment.

    Scalars are kept as-is. Structured values (procedure inputs, usually
    dicts) are replaced by a hash of their JSON-normalized form so that
    equal inputs always produce equal keys.
    """
    if segment is None or isinstance(segment, (str, int, float, bool)):
        return segment
    return hash_value(segment)


def freeze_key(key: Any) -> QueryKey:
    """Normalize a raw query key into a tuple of frozen segments.

    Args:
        key: A single string or a sequence of segments.

    Returns:
        The frozen key tuple.
    """
    if isinstance(key, str):
        return (key,)
    return tuple(freeze_segment(segment) for segment in key)


@dataclass(frozen=True)
class QueryKeyPattern:
    """Immutable pattern naming one or more cached query results.

    A pattern is either exact (matches one key) or a prefix that matches
    the whole family of keys starting with the same segments, e.g.
    ``("items",)`` matches ``("items",)`` and ``("items", {"page": 2})``.
    """

    key: QueryKey
    exact: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.key, tuple):
            raise ConfigurationError(
                f"Query key must be a tuple, got {type(self.key).__name__}"
            )
        if not self.key:
            raise ConfigurationError("Query key pattern must not be empty")
        if self.key[0] == "":
            raise ConfigurationError("Query key name must not be empty")
        object.__setattr__(self, "key", freeze_key(self.key))

    def __str__(self) -> str:
        """Return a readable form, used in logs and Redis keys."""
        return ":".join(str(segment) for segment in self.key)

    def matches(self, key: Any) -> bool:
        """Check whether a cached key falls under this pattern.

        Args:
            key: The raw or frozen key of a cached entry.

        Returns:
            True if the key is equal to the pattern (exact) or starts
            with the pattern's segments (prefix).
        """
        frozen = freeze_key(key)
        if self.exact:
            return frozen == self.key
        return frozen[: len(self.key)] == self.key

    @classmethod
    def prefix(cls, *segments: Any) -> "QueryKeyPattern":
        """Create a pattern matching every key that starts with segments."""
        return cls(tuple(segments))

    @classmethod
    def exact_key(cls, *segments: Any) -> "QueryKeyPattern":
        """Create a pattern matching exactly one key."""
        return cls(tuple(segments), exact=True)

    @classmethod
    def coerce(cls, value: Any) -> "QueryKeyPattern":
        """Build a pattern from the loose forms accepted in rule configs.

        Args:
            value: A QueryKeyPattern, a query name string (family match)
                or a list/tuple of key segments (family match).

        Returns:
            The corresponding pattern.

        Raises:
            ConfigurationError: If the value cannot name a query.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls((value,))
        if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            return cls(tuple(value))
        raise ConfigurationError(
            f"Unsupported query key pattern: {value!r}"
        )
