"""Decorator that runs cache invalidation after a mutation succeeds."""

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from querybust.core.interfaces.cache_adapter import ICacheAdapter
from querybust.core.services.invalidation_executor import InvalidationExecutor

F = TypeVar("F", bound=Callable[..., Any])


def invalidates(
    executor: InvalidationExecutor,
    cache: ICacheAdapter,
    mutation_name: str | None = None,
) -> Callable[[F], F]:
    """Decorator for applying a mutation's invalidation rule on success.

    Executes the decorated coroutine function, then hands its bound
    arguments (as variables) and its return value (as data) to the
    executor. If the mutation raises, nothing is invalidated. Failures
    of awaited rule steps propagate to the caller.

    Args:
        executor: The executor holding the rules.
        cache: The cache adapter to drive.
        mutation_name: Registered mutation name. Defaults to the
            function's name.

    Returns:
        Decorated function.

    Example:
        @invalidates(executor, cache, "item.delete")
        async def delete_item(id: str) -> None:
            await client.item.delete({"id": id})
    """

    def decorator(func: F) -> F:
        name = mutation_name or func.__name__
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            result = await func(*args, **kwargs)
            variables = _bind_variables(signature, args, kwargs)
            await executor.invalidate(cache, name, variables, result)
            return result

        return wrapper  # type: ignore

    return decorator


def _bind_variables(
    signature: inspect.Signature,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> dict[str, Any]:
    """Map call arguments to parameter names, without self/cls."""
    bound = signature.bind(*args, **kwargs)
    bound.apply_defaults()
    return {
        name: value
        for name, value in bound.arguments.items()
        if name not in ("self", "cls")
    }
