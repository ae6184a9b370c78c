"""Invalidation executor - drives the cache adapter after a mutation."""

import asyncio
import functools
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from querybust.core.entities.invalidation_config import InvalidationConfig
from querybust.core.entities.invalidation_rule import InvalidationStrategy
from querybust.core.errors import InvalidationError
from querybust.core.interfaces.cache_adapter import ICacheAdapter
from querybust.core.services.rule_registry import RuleRegistry

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[InvalidationError], None]


@dataclass(frozen=True)
class StrategyPolicy:
    """How each step of a rule is driven under a strategy.

    Each field is True (awaited, failures raised), False (fire-and-forget,
    failures reported through the side channel) or None (skipped).
    """

    invalidate: bool | None
    refetch: bool | None
    custom: bool | None


STRATEGY_POLICIES: Mapping[InvalidationStrategy, StrategyPolicy] = MappingProxyType(
    {
        InvalidationStrategy.OPTIMISTIC: StrategyPolicy(False, False, False),
        InvalidationStrategy.PESSIMISTIC: StrategyPolicy(True, True, True),
        InvalidationStrategy.HYBRID: StrategyPolicy(False, True, True),
        InvalidationStrategy.NONE: StrategyPolicy(None, None, True),
    }
)


class InvalidationExecutor:
    """Domain service that applies a mutation's rule to the cache.

    Steps run sequentially: every ``invalidate`` pattern in order, then
    every ``refetch`` pattern in order, then the custom hook. Awaited
    steps stop at the first failure and raise InvalidationError.
    Fire-and-forget steps are invoked in the same order and their
    awaitables continue as background tasks. Under HYBRID the executor
    yields once after scheduling invalidations, so an adapter whose
    invalidate completes without suspending has applied it before the
    refetches run. Effects of adapters that do suspend may land later.
    """

    def __init__(
        self,
        registry: RuleRegistry,
        config: InvalidationConfig | None = None,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            registry: The registry to resolve mutation rules from.
            config: Optional configuration. Defaults to the registry's.
            error_handler: Optional callback receiving every failure that
                is not raised to the caller (telemetry side channel).
        """
        self._registry = registry
        self._config = config or registry.config
        self._error_handler = error_handler
        self._pending: set[asyncio.Future[Any]] = set()

        # Statistics
        self._executed = 0
        self._skipped = 0
        self._raised = 0
        self._swallowed = 0

    @property
    def registry(self) -> RuleRegistry:
        """Get the rule registry."""
        return self._registry

    @property
    def pending(self) -> int:
        """Number of fire-and-forget actions still in flight."""
        return len(self._pending)

    @property
    def stats(self) -> dict[str, int]:
        """Get executor statistics.

        Returns:
            Dictionary with executed and skipped mutations, raised and
            swallowed failures, and the total number of calls.
        """
        return {
            "executed": self._executed,
            "skipped": self._skipped,
            "raised": self._raised,
            "swallowed": self._swallowed,
            "total": self._executed + self._skipped,
        }

    async def invalidate(
        self,
        cache: ICacheAdapter,
        mutation_name: str,
        variables: Any = None,
        data: Any = None,
    ) -> None:
        """Apply the rule registered for a completed mutation.

        Call once per completed mutation attempt. A mutation without a
        rule is a successful no-op.

        Args:
            cache: The cache adapter to drive.
            mutation_name: Name of the mutation that completed.
            variables: The mutation's input, passed to the custom hook.
            data: The mutation's result, passed to the custom hook.

        Raises:
            InvalidationError: If an awaited step fails (pessimistic,
                hybrid and none strategies only).
        """
        if not self._config.enabled:
            return

        rule = self._registry.get_rule(mutation_name)
        if rule is None:
            self._skipped += 1
            self._log(f"No rule for {mutation_name!r}")
            return

        self._executed += 1
        if rule.is_noop:
            self._log(f"{mutation_name!r} has no cache effects")
            return

        policy = STRATEGY_POLICIES[rule.strategy]
        self._log(f"{mutation_name!r} -> {rule.strategy.value}")

        if policy.invalidate is not None:
            for pattern in rule.invalidate:
                await self._run(
                    mutation_name,
                    "invalidate",
                    pattern,
                    functools.partial(cache.invalidate, pattern),
                    awaited=policy.invalidate,
                )
            if not policy.invalidate and rule.invalidate and policy.refetch:
                # Let background invalidations start before awaited refetches
                await asyncio.sleep(0)

        if policy.refetch is not None:
            for pattern in rule.refetch:
                await self._run(
                    mutation_name,
                    "refetch",
                    pattern,
                    functools.partial(cache.refetch, pattern),
                    awaited=policy.refetch,
                )

        if rule.custom is not None and policy.custom is not None:
            await self._run(
                mutation_name,
                "custom",
                rule.custom_name,
                functools.partial(rule.custom, cache, variables, data),
                awaited=policy.custom,
            )

    async def wait_pending(self) -> None:
        """Wait until every fire-and-forget action has finished.

        Failures are still reported only through logging and the error
        handler, never raised here.
        """
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def _run(
        self,
        mutation_name: str,
        action: str,
        target: Any,
        call: Callable[[], Any],
        awaited: bool,
    ) -> None:
        """Invoke one adapter call or hook, awaiting it or not.

        Args:
            mutation_name: Mutation being processed (for error reporting).
            action: ``invalidate``, ``refetch`` or ``custom``.
            target: The pattern or hook name.
            call: Zero-argument callable performing the action.
            awaited: Await the outcome and raise on failure, or schedule it
                in the background and report failures.
        """
        self._log(f"{action} {target} ({'awaited' if awaited else 'background'})")
        try:
            result = call()
            if not inspect.isawaitable(result):
                return
            if awaited:
                await result
                return
        except Exception as exc:
            error = InvalidationError(mutation_name, action, target, exc)
            if awaited:
                self._raised += 1
                raise error from exc
            self._report(error)
            return

        self._schedule(mutation_name, action, target, result)

    def _schedule(
        self,
        mutation_name: str,
        action: str,
        target: Any,
        awaitable: Awaitable[Any],
    ) -> None:
        task = asyncio.ensure_future(awaitable)
        # Strong reference until the task is done
        self._pending.add(task)
        task.add_done_callback(
            functools.partial(self._on_background_done, mutation_name, action, target)
        )

    def _on_background_done(
        self,
        mutation_name: str,
        action: str,
        target: Any,
        task: "asyncio.Future[Any]",
    ) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._report(InvalidationError(mutation_name, action, target, exc))

    def _report(self, error: InvalidationError) -> None:
        self._swallowed += 1
        if self._config.log_background_errors:
            logger.warning(
                "Background %s of %s failed for mutation %r",
                error.action,
                error.target,
                error.mutation_name,
                exc_info=error.error,
            )
        if self._error_handler is None:
            return
        try:
            self._error_handler(error)
        except Exception:
            logger.exception("Invalidation error handler failed")

    def _log(self, message: str) -> None:
        if self._config.debug:
            logger.info("[INVALIDATE] %s", message)
