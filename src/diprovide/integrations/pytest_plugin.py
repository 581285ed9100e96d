"""Pytest fixtures for resolving providers in tests.

Enable the plugin in a ``conftest.py``:

.. code-block:: python

    pytest_plugins = ["diprovide.integrations.pytest_plugin"]


    @pytest.fixture()
    def diprovide_mocks() -> MockRegistry:
        return create_mock_registry().register(get_database, singleton(FakeDatabase))


    def test_service(diprovide_context: ResolutionContext) -> None:
        service = get_service(diprovide_context)
"""

from __future__ import annotations

import pytest

from diprovide.context import ResolutionContext
from diprovide.mocks import MockRegistry, create_mock_registry
from diprovide.scope import Scope, create_scope


@pytest.fixture()
def diprovide_scope() -> Scope:
    """Create a fresh scope for each test.

    Returns:
        An empty ``Scope``.

    """
    return create_scope()


@pytest.fixture()
def diprovide_mocks() -> MockRegistry:
    """Provide the mocks used by ``diprovide_context``.

    Override this fixture in a test module or ``conftest.py`` to register mocks
    for the tests it covers.

    Returns:
        An empty ``MockRegistry``.

    """
    return create_mock_registry()


@pytest.fixture()
def diprovide_context(
    diprovide_scope: Scope,
    diprovide_mocks: MockRegistry,
) -> ResolutionContext:
    """Combine the per-test scope and mocks into a resolution context."""
    return ResolutionContext(scope=diprovide_scope, mocks=diprovide_mocks)
