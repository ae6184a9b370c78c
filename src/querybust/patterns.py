"""Rule templates for common mutation/query relationships.

Each template is a pure function: it takes the names of the query
procedures involved and returns an immutable mapping of relative
mutation name to InvalidationRule. Templates never register anything;
feed the result to ``RuleRegistry.on_mutations``.

Example:
    registry = RuleRegistry()
    registry.on_mutations(
        crud("items", "itemById", "itemCount"),
        namespace="item",
    )
    # registers item.create, item.update and item.delete
"""

from collections.abc import Mapping
from types import MappingProxyType

from querybust.core.entities.invalidation_rule import (
    InvalidationRule,
    InvalidationStrategy,
)
from querybust.core.entities.query_key import QueryKeyPattern
from querybust.core.errors import ConfigurationError

RuleSet = Mapping[str, InvalidationRule]


def crud(list_name: str, find_by_id: str, count: str) -> RuleSet:
    """Rules for a create/update/delete triad over one entity.

    Creates and updates are already reflected in local optimistic state,
    so background staleness marking is enough. Deletes are pessimistic:
    a deleted entity's detail view must not render from cache.

    Args:
        list_name: The list query procedure.
        find_by_id: The detail query procedure.
        count: The count query procedure.

    Returns:
        Rules for ``create``, ``update`` and ``delete``.
    """
    items, detail, total = _patterns(list_name, find_by_id, count)
    return MappingProxyType(
        {
            "create": InvalidationRule(
                invalidate=(items, total),
                strategy=InvalidationStrategy.OPTIMISTIC,
            ),
            "update": InvalidationRule(
                invalidate=(items, detail),
                strategy=InvalidationStrategy.OPTIMISTIC,
            ),
            "delete": InvalidationRule(
                invalidate=(items, total, detail),
                strategy=InvalidationStrategy.PESSIMISTIC,
            ),
        }
    )


def hierarchical(parent_list: str, child_list: str) -> RuleSet:
    """Rules for children nested under a parent entity.

    Parent lists may aggregate over their children (counts, previews),
    so creating or deleting a child invalidates both lists. Updating a
    child only touches the child list.

    Returns:
        Rules for ``createChild``, ``updateChild`` and ``deleteChild``.
    """
    parents, children = _patterns(parent_list, child_list)
    return MappingProxyType(
        {
            "createChild": InvalidationRule(
                invalidate=(parents, children),
                strategy=InvalidationStrategy.OPTIMISTIC,
            ),
            "updateChild": InvalidationRule(
                invalidate=(children,),
                strategy=InvalidationStrategy.OPTIMISTIC,
            ),
            "deleteChild": InvalidationRule(
                invalidate=(parents, children),
                strategy=InvalidationStrategy.PESSIMISTIC,
            ),
        }
    )


def searchable(search_name: str, list_name: str) -> RuleSet:
    """Rules for a search query backed by a list.

    Search results are marked stale in the background while the list is
    refetched before the caller continues.

    Returns:
        A single ``updateSearchResults`` rule.
    """
    search, items = _patterns(search_name, list_name)
    return MappingProxyType(
        {
            "updateSearchResults": InvalidationRule(
                invalidate=(search,),
                refetch=(items,),
                strategy=InvalidationStrategy.HYBRID,
            ),
        }
    )


def _patterns(*names: str) -> tuple[QueryKeyPattern, ...]:
    for name in names:
        if not isinstance(name, str) or not name:
            raise ConfigurationError(
                f"Query names must be non-empty strings, got {name!r}"
            )
    return tuple(QueryKeyPattern.prefix(name) for name in names)
