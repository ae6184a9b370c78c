"""Tests for rule templates."""

import pytest

from querybust import (
    ConfigurationError,
    InvalidationStrategy,
    QueryKeyPattern,
    RuleRegistry,
    crud,
    hierarchical,
    searchable,
)


def names(*values: str) -> tuple[QueryKeyPattern, ...]:
    return tuple(QueryKeyPattern.prefix(value) for value in values)


class TestCrud:
    """Tests for the crud template."""

    def test_rules(self) -> None:
        """Exactly create, update and delete with the documented targets."""
        rules = crud("items", "itemById", "itemCount")

        assert set(rules) == {"create", "update", "delete"}

        assert rules["create"].invalidate == names("items", "itemCount")
        assert rules["create"].strategy is InvalidationStrategy.OPTIMISTIC

        assert rules["update"].invalidate == names("items", "itemById")
        assert rules["update"].strategy is InvalidationStrategy.OPTIMISTIC

        assert rules["delete"].invalidate == names("items", "itemCount", "itemById")
        assert rules["delete"].strategy is InvalidationStrategy.PESSIMISTIC

        for rule in rules.values():
            assert rule.refetch == ()
            assert rule.custom is None

    def test_referentially_transparent(self) -> None:
        """Same arguments, structurally equal rule sets."""
        assert crud("items", "itemById", "itemCount") == crud(
            "items", "itemById", "itemCount"
        )
        assert crud("items", "itemById", "itemCount") != crud(
            "users", "userById", "userCount"
        )

    def test_result_is_immutable(self) -> None:
        """Template output cannot be modified."""
        rules = crud("items", "itemById", "itemCount")

        with pytest.raises(TypeError):
            rules["archive"] = rules["delete"]  # type: ignore[index]


class TestHierarchical:
    """Tests for the hierarchical template."""

    def test_rules(self) -> None:
        """Create/delete touch both lists, update only the children."""
        rules = hierarchical("projects", "tasks")

        assert set(rules) == {"createChild", "updateChild", "deleteChild"}
        assert rules["createChild"].invalidate == names("projects", "tasks")
        assert rules["createChild"].strategy is InvalidationStrategy.OPTIMISTIC
        assert rules["updateChild"].invalidate == names("tasks")
        assert rules["updateChild"].strategy is InvalidationStrategy.OPTIMISTIC
        assert rules["deleteChild"].invalidate == names("projects", "tasks")
        assert rules["deleteChild"].strategy is InvalidationStrategy.PESSIMISTIC


class TestSearchable:
    """Tests for the searchable template."""

    def test_rule(self) -> None:
        """A single hybrid rule: invalidate search, refetch list."""
        rules = searchable("searchResults", "items")

        assert list(rules) == ["updateSearchResults"]
        rule = rules["updateSearchResults"]
        assert rule.invalidate == names("searchResults")
        assert rule.refetch == names("items")
        assert rule.strategy is InvalidationStrategy.HYBRID


class TestTemplateValidation:
    """Templates reject unusable names."""

    @pytest.mark.parametrize("bad", ["", None])
    def test_empty_names(self, bad: object) -> None:
        """Empty or missing query names are configuration errors."""
        with pytest.raises(ConfigurationError):
            crud("items", bad, "itemCount")  # type: ignore[arg-type]
        with pytest.raises(ConfigurationError):
            searchable(bad, "items")  # type: ignore[arg-type]

    def test_no_registration_side_effect(self) -> None:
        """Calling a template alone registers nothing."""
        registry = RuleRegistry()

        hierarchical("projects", "tasks")

        assert len(registry) == 0
