"""Rule registry - maps mutation names to invalidation rules."""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from querybust.core.entities.invalidation_config import InvalidationConfig
from querybust.core.entities.invalidation_rule import InvalidationRule
from querybust.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

_RULE_FIELDS = frozenset({"invalidate", "refetch", "strategy", "custom"})


class RuleRegistry:
    """Mapping from mutation name to invalidation rule.

    Populated during setup and read-mostly afterwards. Registering a
    name again replaces the previous rule (last write wins, no merge).
    Registrations are not synchronized with concurrent executor lookups;
    callers doing both at once must serialize them.
    """

    def __init__(self, config: InvalidationConfig | None = None) -> None:
        """Initialize an empty registry.

        Args:
            config: Optional configuration. Supplies the default strategy
                for rules registered without one.
        """
        self._config = config or InvalidationConfig()
        self._rules: dict[str, InvalidationRule] = {}

    @property
    def config(self) -> InvalidationConfig:
        """Get the invalidation configuration."""
        return self._config

    def on_mutation(
        self,
        name: str,
        config: InvalidationRule | Mapping[str, Any],
    ) -> None:
        """Register or replace the rule for a mutation.

        Args:
            name: The mutation procedure name.
            config: An InvalidationRule, or a mapping with any of the keys
                ``invalidate``, ``refetch``, ``strategy`` and ``custom``.

        Raises:
            ConfigurationError: If the name is empty or the rule is malformed.

        Example:
            registry.on_mutation("createItem", {
                "invalidate": ["items", "itemCount"],
                "strategy": "optimistic",
            })
        """
        if not isinstance(name, str) or not name:
            raise ConfigurationError("Mutation name must be a non-empty string")

        rule = self._build_rule(name, config)
        if name in self._rules:
            logger.debug("Replacing invalidation rule for %r", name)
        self._rules[name] = rule

    def on_mutations(
        self,
        rules: Mapping[str, InvalidationRule | Mapping[str, Any]],
        namespace: str | None = None,
    ) -> None:
        """Register every rule of a mapping, e.g. a pattern template's output.

        Args:
            rules: Mapping of relative mutation name to rule.
            namespace: Optional router prefix; ``"items"`` turns ``create``
                into ``items.create``.
        """
        for name, config in rules.items():
            full_name = f"{namespace}.{name}" if namespace else name
            self.on_mutation(full_name, config)

    def get_rules(self) -> Mapping[str, InvalidationRule]:
        """Return a read-only snapshot of all registered rules."""
        return MappingProxyType(dict(self._rules))

    def get_rule(self, name: str) -> InvalidationRule | None:
        """Look up the rule for a mutation, or None if it has none."""
        return self._rules.get(name)

    def remove(self, name: str) -> bool:
        """Remove a rule.

        Returns:
            True if a rule was registered under the name, False otherwise.
        """
        return self._rules.pop(name, None) is not None

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def _build_rule(
        self,
        name: str,
        config: InvalidationRule | Mapping[str, Any],
    ) -> InvalidationRule:
        if isinstance(config, InvalidationRule):
            return config
        if not isinstance(config, Mapping):
            raise ConfigurationError(
                f"Rule for {name!r} must be an InvalidationRule or a mapping, "
                f"got {type(config).__name__}"
            )

        unknown = set(config) - _RULE_FIELDS
        if unknown:
            raise ConfigurationError(
                f"Unknown rule option(s) for {name!r}: {', '.join(sorted(unknown))}"
            )

        strategy = config.get("strategy")
        if strategy is None:
            strategy = self._config.default_strategy

        return InvalidationRule.create(
            invalidate=config.get("invalidate"),
            refetch=config.get("refetch"),
            strategy=strategy,
            custom=config.get("custom"),
        )
