from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Awaitable, Callable
from enum import Enum
from functools import partial
from typing import Any, Generic, TypeAlias, TypeVar, overload

from diprovide.context import ResolutionContext
from diprovide.defaults import DEFAULT_LOCK_MODE
from diprovide.exceptions import DIProvideInvalidProviderError
from diprovide.lock_mode import LockMode
from diprovide.merging import shallow_merge
from diprovide.mocks import MockRegistry, create_mock_registry
from diprovide.pending import Pending, as_resolution, combine
from diprovide.scope import Scope

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

Resolver: TypeAlias = Callable[..., Any]
"""A user function producing a value, or an awaitable of it, from an optional context."""

_EMPTY: Any = object()
_CONTEXT_PARAMETER_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
)


class Lifetime(Enum):
    """Defines how long a provider reuses its resolution."""

    TRANSIENT = "transient"
    """The resolver runs on every call."""

    SINGLETON = "singleton"
    """The resolver runs once; every later call returns the first resolution."""

    SCOPED = "scoped"
    """The resolver runs once per scope; without a scope it behaves as a singleton."""


class Provider(Generic[T]):
    """A resolver wrapped with lifetime caching and mock substitution.

    Call a provider with an optional ``ResolutionContext`` to get a value, or a
    ``Pending`` value when the resolver is asynchronous. The provider object
    itself is the key used by scopes and mock registries, so keep and reuse the
    instance returned by ``transient``, ``singleton`` or ``scoped``.

    On each call the provider first consults ``context.mocks``:

    - a full mock is resolved instead of the provider, whose resolver is not
      invoked;
    - a partial mock is resolved alongside the provider, and its mapping is
      overlaid on the provider's own (possibly cached) resolution.

    Without a mock, the lifetime decides whether the resolver runs. Failed
    resolutions are never cached: a resolver that raises, or a pending value
    that settles with an error, leaves the cache empty for the next call.
    """

    __slots__ = (
        "_baked_mocks",
        "_cell",
        "_cell_lock",
        "_passes_context",
        "lifetime",
        "lock_mode",
        "resolver",
    )

    def __init__(
        self,
        lifetime: Lifetime | str,
        resolver: Resolver,
        *,
        lock_mode: LockMode = DEFAULT_LOCK_MODE,
        mocks: MockRegistry | None = None,
    ) -> None:
        try:
            self.lifetime = Lifetime(lifetime)
        except ValueError:
            msg = (
                f"Unknown lifetime {lifetime!r}; "
                f"expected one of {', '.join(item.value for item in Lifetime)}."
            )
            raise DIProvideInvalidProviderError(msg) from None
        if not callable(resolver):
            msg = f"A provider resolver must be callable, got {resolver!r}."
            raise DIProvideInvalidProviderError(msg)

        self.resolver = resolver
        self.lock_mode = LockMode(lock_mode)
        self._passes_context = _accepts_context(resolver)
        self._baked_mocks = mocks
        self._cell: Any = _EMPTY
        self._cell_lock = threading.RLock() if self.lock_mode is LockMode.THREAD else None

    def __call__(self, context: ResolutionContext | None = None) -> T | Pending[T]:
        if self._baked_mocks is not None:
            context = _with_baked_mocks(context, self._baked_mocks)

        mock = context.mocks.lookup(self) if context is not None and context.mocks else None
        if mock is None:
            return self._resolve(context)

        if not mock.is_partial:
            logger.debug("Resolving %r through mock %r", self, mock.replacement)
            return mock.replacement(context)

        logger.debug("Overlaying partial mock %r onto %r", mock.replacement, self)
        original = self._resolve(context)
        patch = mock.replacement(context)
        return combine(original, patch, shallow_merge)

    def mock(self, dependency: Provider[U], replacement: Provider[U]) -> Provider[T]:
        """Return a copy of this provider that resolves ``dependency`` as ``replacement``.

        The copy has the same lifetime and resolver but its own cache. Mocks
        passed in the resolution context take precedence over the ones set
        here. This provider is left unchanged.
        """
        mocks = (self._baked_mocks or create_mock_registry()).register(dependency, replacement)
        return Provider(self.lifetime, self.resolver, lock_mode=self.lock_mode, mocks=mocks)

    def mock_partially(self, dependency: Provider[Any], replacement: Provider[Any]) -> Provider[T]:
        """Like ``mock``, but overlays ``replacement`` onto ``dependency``'s resolution."""
        mocks = (self._baked_mocks or create_mock_registry()).register_partial(
            dependency,
            replacement,
        )
        return Provider(self.lifetime, self.resolver, lock_mode=self.lock_mode, mocks=mocks)

    def _resolve(self, context: ResolutionContext | None) -> T | Pending[T]:
        if self.lifetime is Lifetime.TRANSIENT:
            return self._invoke(context)

        scope = context.scope if context is not None else None
        if self.lifetime is Lifetime.SCOPED and scope is not None:
            if self._cell_lock is None:
                return self._resolve_in_scope(scope, context)
            with scope.lock_for(self):
                return self._resolve_in_scope(scope, context)

        if self._cell is not _EMPTY:
            return self._cell
        if self._cell_lock is None:
            return self._resolve_into_cell(context)
        with self._cell_lock:
            if self._cell is not _EMPTY:
                return self._cell
            return self._resolve_into_cell(context)

    def _resolve_into_cell(self, context: ResolutionContext | None) -> T | Pending[T]:
        resolution = self._invoke(context)
        if isinstance(resolution, Pending):
            resolution = self._forget_on_failure(resolution, self._forget_cell)
        self._cell = resolution
        logger.debug("Cached resolution of %r", self)
        return resolution

    def _resolve_in_scope(
        self,
        scope: Scope,
        context: ResolutionContext | None,
    ) -> T | Pending[T]:
        resolution = scope.get(self, _EMPTY)
        if resolution is not _EMPTY:
            return resolution

        resolution = self._invoke(context)
        if isinstance(resolution, Pending):
            resolution = self._forget_on_failure(
                resolution,
                partial(scope.discard_failed, self),
            )
        scope.set(self, resolution)
        logger.debug("Cached resolution of %r in %r", self, scope)
        return resolution

    def _invoke(self, context: ResolutionContext | None) -> T | Pending[T]:
        if self._passes_context:
            return as_resolution(self.resolver(context))
        return as_resolution(self.resolver())

    def _forget_on_failure(
        self,
        resolution: Pending[T],
        forget: Callable[[Pending[T]], object],
    ) -> Pending[T]:
        async def _settle() -> T:
            try:
                return await resolution
            except BaseException:
                logger.debug("Discarding failed resolution of %r", self)
                forget(guarded)
                raise

        guarded = Pending(_settle())
        return guarded

    def _forget_cell(self, resolution: Pending[T]) -> None:
        if self._cell_lock is None:
            if self._cell is resolution:
                self._cell = _EMPTY
            return
        with self._cell_lock:
            if self._cell is resolution:
                self._cell = _EMPTY

    def __repr__(self) -> str:
        name = getattr(self.resolver, "__qualname__", None) or repr(self.resolver)
        return f"{type(self).__name__}({self.lifetime.value}, {name})"


def _accepts_context(resolver: Resolver) -> bool:
    """Decide once whether the resolver takes the context as a positional argument.

    Callables without an inspectable signature are called without arguments.
    """
    try:
        signature = inspect.signature(resolver)
    except (TypeError, ValueError):
        return False
    return any(parameter.kind in _CONTEXT_PARAMETER_KINDS for parameter in signature.parameters.values())


def _with_baked_mocks(
    context: ResolutionContext | None,
    baked_mocks: MockRegistry,
) -> ResolutionContext:
    if context is None:
        return ResolutionContext(mocks=baked_mocks)
    if context.mocks is None:
        return context.with_mocks(baked_mocks)
    return context.with_mocks(baked_mocks.merge(context.mocks))


def provide(
    lifetime: Lifetime | str,
    resolver: Resolver,
    *,
    lock_mode: LockMode = DEFAULT_LOCK_MODE,
) -> Provider[Any]:
    """Create a provider with an explicit lifetime.

    Args:
        lifetime: ``Lifetime`` member or its value (``"transient"``,
            ``"singleton"``, ``"scoped"``).
        resolver: Function producing the value. It receives the resolution
            context when it declares a positional parameter.
        lock_mode: Locking used around cached resolution.

    Returns:
        The provider.

    Raises:
        DIProvideInvalidProviderError: If the lifetime is unknown or the
            resolver is not callable.

    """
    return Provider(lifetime, resolver, lock_mode=lock_mode)


@overload
def transient(resolver: Callable[..., Awaitable[T]], *, lock_mode: LockMode = ...) -> Provider[T]: ...


@overload
def transient(resolver: Callable[..., T], *, lock_mode: LockMode = ...) -> Provider[T]: ...


@overload
def transient(
    resolver: None = ...,
    *,
    lock_mode: LockMode = ...,
) -> Callable[[Callable[..., T]], Provider[T]]: ...


def transient(
    resolver: Resolver | None = None,
    *,
    lock_mode: LockMode = DEFAULT_LOCK_MODE,
) -> Any:
    """Create a provider that runs its resolver on every call.

    Usable directly or as a decorator, with or without arguments.

    Examples:
        .. code-block:: python

            get_request_id = transient(lambda: uuid.uuid4())
            assert get_request_id() != get_request_id()

    """
    return _decorate(Lifetime.TRANSIENT, resolver, lock_mode)


@overload
def singleton(resolver: Callable[..., Awaitable[T]], *, lock_mode: LockMode = ...) -> Provider[T]: ...


@overload
def singleton(resolver: Callable[..., T], *, lock_mode: LockMode = ...) -> Provider[T]: ...


@overload
def singleton(
    resolver: None = ...,
    *,
    lock_mode: LockMode = ...,
) -> Callable[[Callable[..., T]], Provider[T]]: ...


def singleton(
    resolver: Resolver | None = None,
    *,
    lock_mode: LockMode = DEFAULT_LOCK_MODE,
) -> Any:
    """Create a provider that resolves once and returns that resolution forever.

    The first call wins; the context of later calls is ignored.

    Examples:
        .. code-block:: python

            @singleton
            def get_settings() -> Settings:
                return Settings()

            assert get_settings() is get_settings()

    """
    return _decorate(Lifetime.SINGLETON, resolver, lock_mode)


@overload
def scoped(resolver: Callable[..., Awaitable[T]], *, lock_mode: LockMode = ...) -> Provider[T]: ...


@overload
def scoped(resolver: Callable[..., T], *, lock_mode: LockMode = ...) -> Provider[T]: ...


@overload
def scoped(
    resolver: None = ...,
    *,
    lock_mode: LockMode = ...,
) -> Callable[[Callable[..., T]], Provider[T]]: ...


def scoped(
    resolver: Resolver | None = None,
    *,
    lock_mode: LockMode = DEFAULT_LOCK_MODE,
) -> Any:
    """Create a provider that resolves once per scope.

    Called without a scope in the context, the provider falls back to
    singleton behavior so it is safe to use at the application root.

    Examples:
        .. code-block:: python

            get_session = scoped(lambda: Session())

            scope = create_scope()
            context = ResolutionContext(scope=scope)
            assert get_session(context) is get_session(context)
            assert get_session(context) is not get_session()

    """
    return _decorate(Lifetime.SCOPED, resolver, lock_mode)


def _decorate(lifetime: Lifetime, resolver: Resolver | None, lock_mode: LockMode) -> Any:
    if resolver is None:
        return partial(Provider, lifetime, lock_mode=lock_mode)
    return Provider(lifetime, resolver, lock_mode=lock_mode)
