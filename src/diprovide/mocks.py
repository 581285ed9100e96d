from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from diprovide.exceptions import DIProvideInvalidMockError

if TYPE_CHECKING:
    from diprovide.providers import Provider

T = TypeVar("T")

MockEntry = tuple["Provider[Any]", "Mock"]


@dataclass(frozen=True, slots=True)
class Mock:
    """Describe how a provider is replaced during a resolution."""

    replacement: Provider[Any]
    """Provider resolved instead of, or on top of, the original provider."""

    is_partial: bool = False
    """Overlay the replacement's fields onto the original resolution instead of replacing it."""


class MockRegistry:
    """Immutable mapping from original providers to their mocks.

    Every update returns a new registry and leaves the receiver untouched, so a
    registry built for one test can be extended for another without either
    seeing the other's mocks. Unchanged entries are shared between the old and
    the new registry. Keys are compared by identity.

    Examples:
        .. code-block:: python

            mocks = (
                create_mock_registry()
                .register(get_database, singleton(lambda: FakeDatabase()))
                .register_partial(get_settings, transient(lambda: {"debug": True}))
            )
            service = get_service(ResolutionContext(mocks=mocks))

    """

    __slots__ = ("_entries", "_index")

    def __init__(self, entries: Iterable[MockEntry] = ()) -> None:
        self._entries: tuple[MockEntry, ...] = tuple(entries)
        self._index: dict[Provider[Any], Mock] = dict(self._entries)

    def register(self, original: Provider[T], mock: Provider[T]) -> MockRegistry:
        """Return a registry in which ``original`` resolves to ``mock`` instead.

        The original resolver is not invoked while the mock is active.
        """
        return self._set(original, Mock(replacement=_check_provider(mock, "mock")))

    def register_partial(self, original: Provider[T], mock: Provider[Any]) -> MockRegistry:
        """Return a registry in which ``mock`` is overlaid onto ``original``.

        Both providers are resolved; the mapping returned by ``mock`` is merged
        on top of the original resolution, mock fields winning.
        """
        return self._set(
            original,
            Mock(replacement=_check_provider(mock, "mock"), is_partial=True),
        )

    def lookup(self, original: Provider[T]) -> Mock | None:
        """Return the mock registered for ``original``, if any."""
        return self._index.get(original)

    def merge(self, other: MockRegistry) -> MockRegistry:
        """Return a registry with the entries of both registries.

        Entries of ``other`` win when both registries mock the same provider.
        """
        if not other._entries:
            return self
        if not self._entries:
            return other
        kept = tuple(entry for entry in self._entries if entry[0] not in other._index)
        return MockRegistry(kept + other._entries)

    def _set(self, original: Provider[Any], mock: Mock) -> MockRegistry:
        _check_provider(original, "original")
        if original in self._index:
            return MockRegistry(
                (original, mock) if entry[0] is original else entry for entry in self._entries
            )
        return MockRegistry((*self._entries, (original, mock)))

    def __contains__(self, original: object) -> bool:
        return original in self._index

    def __iter__(self) -> Iterator[Provider[Any]]:
        return (key for key, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._entries)!r})"


def create_mock_registry() -> MockRegistry:
    """Create an empty mock registry."""
    return MockRegistry()


def _check_provider(candidate: Any, role: str) -> Provider[Any]:
    from diprovide.providers import Provider  # noqa: PLC0415

    if not isinstance(candidate, Provider):
        msg = (
            f"The {role} must be a provider created with transient(), singleton() or scoped(), "
            f"got {candidate!r}."
        )
        raise DIProvideInvalidMockError(msg)
    return candidate
