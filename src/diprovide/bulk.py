"""Resolve collections of providers against one shared context."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from diprovide.pending import Pending, join

if TYPE_CHECKING:
    from diprovide.context import ResolutionContext
    from diprovide.providers import Provider

K = TypeVar("K")


def resolve_list(
    providers: Iterable[Provider[Any]],
    context: ResolutionContext | None = None,
) -> list[Any] | Pending[list[Any]]:
    """Call every provider with ``context`` and collect the resolutions.

    Providers are called in order with the very same context, so they share its
    scope and mocks. The result is a list when every resolution is synchronous,
    and a ``Pending`` list otherwise. Pending resolutions are awaited
    concurrently; the list keeps the input order, and the first failure fails
    the whole list.

    Examples:
        .. code-block:: python

            settings, client = resolve_list([get_settings, get_client], context)

            settings, client = await resolve_list([get_settings, get_client_async], context)

    """
    return join([provider(context) for provider in providers])


def resolve_map(
    providers: Mapping[K, Provider[Any]],
    context: ResolutionContext | None = None,
) -> dict[K, Any] | Pending[dict[K, Any]]:
    """Call every provider of a mapping with ``context`` and collect the resolutions by key.

    Behaves like ``resolve_list``; the returned ``dict`` has the keys of
    ``providers`` in the same order.
    """
    keys = list(providers)
    resolutions = join([providers[key](context) for key in keys])
    if isinstance(resolutions, Pending):
        return Pending(_zip_keys(keys, resolutions))
    return dict(zip(keys, resolutions, strict=True))


async def _zip_keys(keys: list[K], resolutions: Pending[list[Any]]) -> dict[K, Any]:
    return dict(zip(keys, await resolutions, strict=True))
