"""Shared pytest fixtures for diprovide tests."""

import pytest

from diprovide.context import ResolutionContext
from diprovide.mocks import MockRegistry, create_mock_registry
from diprovide.scope import Scope, create_scope


@pytest.fixture()
def scope() -> Scope:
    """Empty scope."""
    return create_scope()


@pytest.fixture()
def mocks() -> MockRegistry:
    """Empty mock registry."""
    return create_mock_registry()


@pytest.fixture()
def scoped_context(scope: Scope) -> ResolutionContext:
    """Context bound to the ``scope`` fixture."""
    return ResolutionContext(scope=scope)
