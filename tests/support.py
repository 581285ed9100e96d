"""Helpers shared by the test modules."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from diprovide.context import ResolutionContext


class CallCounter:
    """Wrap a zero-argument function and count how many times it was called."""

    def __init__(self, fn: Callable[[], Any]) -> None:
        self._fn = fn
        self.calls = 0

    def __call__(self, context: ResolutionContext | None = None) -> Any:
        self.calls += 1
        return self._fn()
