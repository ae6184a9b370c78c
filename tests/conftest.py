"""Pytest configuration for querybust tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from querybust import InvalidationExecutor, RuleRegistry


@pytest.fixture
def registry() -> RuleRegistry:
    """Create a fresh registry for each test."""
    return RuleRegistry()


@pytest.fixture
def error_handler() -> MagicMock:
    """Collect failures reported through the side channel."""
    return MagicMock()


@pytest.fixture
def executor(registry: RuleRegistry, error_handler: MagicMock) -> InvalidationExecutor:
    """Create an executor bound to the test registry."""
    return InvalidationExecutor(registry, error_handler=error_handler)


@pytest.fixture
def cache() -> AsyncMock:
    """Mock cache adapter; calls are recorded in cache.mock_calls in order."""
    return AsyncMock()
