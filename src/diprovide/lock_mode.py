from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """How a singleton or scoped provider guards its check-and-store step.

    Pass one to ``transient()``, ``singleton()``, ``scoped()`` or ``provide()``
    as ``lock_mode``; providers built without one use
    ``diprovide.defaults.DEFAULT_LOCK_MODE``.

    A ``Pending`` is stored before anything is awaited, so asyncio callers get
    one resolver call per cell or scope entry under either mode.
    """

    THREAD = "thread"
    """Hold a re-entrant lock while resolving: the provider's own lock for its
    cell, and the scope's lock for that provider when resolving into a scope."""

    NONE = "none"
    """No lock around the provider cell or scope entry. Enough for code that
    resolves from a single thread."""
