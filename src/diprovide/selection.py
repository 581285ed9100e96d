from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from diprovide.bulk import resolve_map

if TYPE_CHECKING:
    from diprovide.context import ResolutionContext
    from diprovide.pending import Pending
    from diprovide.providers import Provider

K = TypeVar("K")
T = TypeVar("T")


class ProviderSelection(Generic[K]):
    """A named group of providers resolved together.

    Calling a selection resolves every provider with the same context and
    returns a ``dict`` of resolutions, or a ``Pending`` one, like
    ``resolve_map``.

    Examples:
        .. code-block:: python

            handler_dependencies = select({"users": get_users, "mailer": get_mailer})
            dependencies = handler_dependencies(ResolutionContext(scope=create_scope()))
            dependencies["users"].find(42)

    """

    __slots__ = ("_providers",)

    def __init__(self, providers: Mapping[K, Provider[Any]]) -> None:
        self._providers = dict(providers)

    @property
    def providers(self) -> Mapping[K, Provider[Any]]:
        """The selected providers by key, read-only."""
        return MappingProxyType(self._providers)

    def __call__(self, context: ResolutionContext | None = None) -> dict[K, Any] | Pending[dict[K, Any]]:
        return resolve_map(self._providers, context)

    def mock(self, dependency: Provider[T], replacement: Provider[T]) -> ProviderSelection[K]:
        """Return a selection in which ``dependency`` resolves as ``replacement``.

        Selected providers that are ``dependency`` itself are swapped for
        ``replacement``; every other provider is replaced by its
        ``Provider.mock`` copy. This selection is left unchanged.
        """
        return ProviderSelection(
            {
                key: replacement if provider is dependency else provider.mock(dependency, replacement)
                for key, provider in self._providers.items()
            },
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._providers!r})"


def select(providers: Mapping[K, Provider[Any]]) -> ProviderSelection[K]:
    """Group providers under names so they can be resolved and mocked together."""
    return ProviderSelection(providers)
