"""Pending values: the asynchronous half of a provider resolution.

A provider returns either a plain value or a ``Pending`` wrapping the awaitable
its resolver produced. Keeping the asynchronous case in its own type lets the
merge and join code branch on ``isinstance(value, Pending)`` instead of inspecting
arbitrary objects, and lets cached asynchronous resolutions be awaited by any
number of callers.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Generator, Sequence
from typing import Any, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class Pending(Generic[T]):
    """An asynchronous resolution that can be awaited any number of times.

    The wrapped awaitable is scheduled as an ``asyncio`` task on first await.
    Every later await observes the same task, so all awaiters receive the same
    object, or the same exception. Cancelling one awaiter does not cancel the
    shared task.

    Examples:
        .. code-block:: python

            get_client = singleton(create_client_async)

            client = await get_client()
            assert client is await get_client()

    """

    __slots__ = ("_awaitable", "_future")

    def __init__(self, awaitable: Awaitable[T]) -> None:
        self._awaitable = awaitable
        self._future: asyncio.Future[T] | None = None

    def as_future(self) -> asyncio.Future[T]:
        """Schedule the underlying awaitable, once, and return its future.

        Must be called with a running event loop.
        """
        if self._future is None:
            self._future = asyncio.ensure_future(self._awaitable)
        return self._future

    def __await__(self) -> Generator[Any, None, T]:
        return asyncio.shield(self.as_future()).__await__()

    def __repr__(self) -> str:
        if self._future is None or not self._future.done():
            return f"{type(self).__name__}(<pending>)"
        if self._future.cancelled():
            return f"{type(self).__name__}(<cancelled>)"
        if self._future.exception() is not None:
            return f"{type(self).__name__}(<failed: {self._future.exception()!r}>)"
        return f"{type(self).__name__}({self._future.result()!r})"


def as_resolution(value: T | Awaitable[T]) -> T | Pending[T]:
    """Normalize a raw resolver result into a value or a ``Pending``.

    This is the only place where awaitables are recognized; everything
    downstream deals with ``Pending`` explicitly.
    """
    if isinstance(value, Pending):
        return value
    if inspect.isawaitable(value):
        return Pending(value)
    return value


def join(values: Sequence[T | Pending[T]]) -> list[T] | Pending[list[T]]:
    """Join resolutions into a list, preserving input order.

    Returns a plain list when nothing is pending. Otherwise returns a
    ``Pending`` that starts every pending entry before waiting on any of them
    and fails as soon as one of them fails.
    """
    if not any(isinstance(value, Pending) for value in values):
        return list(values)
    return Pending(_join_pending(list(values)))


async def _join_pending(values: list[Any]) -> list[Any]:
    positions = [index for index, value in enumerate(values) if isinstance(value, Pending)]
    settled = await asyncio.gather(
        *(asyncio.shield(values[index].as_future()) for index in positions),
    )
    for index, result in zip(positions, settled, strict=True):
        values[index] = result
    return values


def combine(
    first: T | Pending[T],
    second: U | Pending[U],
    combiner: Callable[[T, U], Any],
) -> Any:
    """Apply ``combiner`` to two resolutions, synchronously when possible.

    When either side is pending, both are started concurrently and the result
    is a ``Pending`` of the combined value.
    """
    if not isinstance(first, Pending) and not isinstance(second, Pending):
        return combiner(first, second)

    async def _combine() -> Any:
        left, right = await _join_pending([first, second])
        return combiner(left, right)

    return Pending(_combine())


__all__ = [
    "Pending",
    "as_resolution",
    "combine",
    "join",
]
