from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from diprovide.mocks import MockRegistry
    from diprovide.scope import Scope


@dataclass(frozen=True, slots=True)
class ResolutionContext:
    """Carry the scope and the mocks of one resolution.

    A context is created by the caller and handed to the root provider. Every
    resolver with dependencies must pass the context it received, unchanged,
    to the providers it calls so the whole graph sees the same scope and mocks.

    Examples:
        .. code-block:: python

            get_user_service = transient(
                lambda context: UserService(get_session(context)),
            )

            scope = create_scope()
            service = get_user_service(ResolutionContext(scope=scope))

    """

    scope: Scope | None = None
    """Cache used by scoped providers. Scoped providers act as singletons without it."""

    mocks: MockRegistry | None = None
    """Replacements consulted by every provider before its own resolver runs."""

    def with_scope(self, scope: Scope | None) -> ResolutionContext:
        """Return a copy of this context using ``scope``."""
        return replace(self, scope=scope)

    def with_mocks(self, mocks: MockRegistry | None) -> ResolutionContext:
        """Return a copy of this context using ``mocks``."""
        return replace(self, mocks=mocks)
