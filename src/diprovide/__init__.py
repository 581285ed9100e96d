from diprovide.bulk import resolve_list, resolve_map
from diprovide.context import ResolutionContext
from diprovide.exceptions import (
    DIProvideError,
    DIProvideInvalidMockError,
    DIProvideInvalidProviderError,
    DIProvidePartialMockShapeError,
)
from diprovide.lock_mode import LockMode
from diprovide.mocks import Mock, MockRegistry, create_mock_registry
from diprovide.pending import Pending
from diprovide.providers import Lifetime, Provider, provide, scoped, singleton, transient
from diprovide.scope import Scope, create_scope
from diprovide.selection import ProviderSelection, select

__all__ = [
    "DIProvideError",
    "DIProvideInvalidMockError",
    "DIProvideInvalidProviderError",
    "DIProvidePartialMockShapeError",
    "Lifetime",
    "LockMode",
    "Mock",
    "MockRegistry",
    "Pending",
    "Provider",
    "ProviderSelection",
    "ResolutionContext",
    "Scope",
    "create_mock_registry",
    "create_scope",
    "provide",
    "resolve_list",
    "resolve_map",
    "scoped",
    "select",
    "singleton",
    "transient",
]
