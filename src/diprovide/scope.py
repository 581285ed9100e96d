from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, TypeVar

from diprovide.context import ResolutionContext

if TYPE_CHECKING:
    from diprovide.pending import Pending
    from diprovide.providers import Provider

T = TypeVar("T")

_MISSING: Any = object()


class Scope:
    """Cache resolutions of scoped providers for one unit of work.

    A scope holds at most one resolution per provider, keyed by provider
    identity. Entries are added lazily on first resolution and are never
    evicted; drop the scope to release them. Create one per request,
    transaction or task and pass it in ``ResolutionContext.scope``.
    """

    __slots__ = ("_locks", "_locks_guard", "_resolutions")

    def __init__(self) -> None:
        self._resolutions: dict[Provider[Any], Any] = {}
        self._locks: dict[Provider[Any], threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def has(self, provider: Provider[Any]) -> bool:
        """Return whether ``provider`` already has a resolution in this scope."""
        return provider in self._resolutions

    def get(self, provider: Provider[T], default: Any = None) -> T | Pending[T] | Any:
        """Return the resolution stored for ``provider``, or ``default``."""
        return self._resolutions.get(provider, default)

    def set(self, provider: Provider[T], value: T | Pending[T]) -> None:
        """Store ``value`` as the resolution of ``provider`` in this scope."""
        self._resolutions[provider] = value

    def lock_for(self, provider: Provider[Any]) -> threading.RLock:
        """Return the lock guarding the entry of ``provider`` in this scope.

        Used by providers created with ``LockMode.THREAD``. Each provider gets
        its own lock, so resolving one entry never blocks on another.
        """
        with self._locks_guard:
            lock = self._locks.get(provider)
            if lock is None:
                lock = self._locks[provider] = threading.RLock()
            return lock

    def discard_failed(self, provider: Provider[Any], value: Any) -> bool:
        """Forget a resolution that settled with an error.

        Only removes the entry when it still is ``value``, so a newer
        resolution stored in the meantime is kept.
        """
        if self._resolutions.get(provider, _MISSING) is value:
            del self._resolutions[provider]
            return True
        return False

    def resolve(
        self,
        provider: Provider[T],
        context: ResolutionContext | None = None,
    ) -> T | Pending[T]:
        """Call ``provider`` with a context bound to this scope.

        Mocks from ``context`` are kept; its scope, if any, is replaced.
        """
        scoped_context = (context or ResolutionContext()).with_scope(self)
        return provider(scoped_context)

    def __contains__(self, provider: object) -> bool:
        return provider in self._resolutions

    def __len__(self) -> int:
        return len(self._resolutions)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(resolutions={len(self._resolutions)})"


def create_scope() -> Scope:
    """Create an empty scope."""
    return Scope()
