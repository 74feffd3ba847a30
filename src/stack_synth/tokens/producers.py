"""Deferred producers.

Each producer exposes a single ``resolve(context)``. They are invoked once per
resolution call and never memoized, because the same producer may yield a
different value depending on which scope is asking.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stack_synth.tokens.token import Resolvable

if TYPE_CHECKING:
    from collections.abc import Callable

    from stack_synth.tokens.context import ResolveContext


class Constant(Resolvable):
    """Wraps a value that is already known."""

    __slots__ = ("display_hint", "value")

    def __init__(self, value: Any, *, display_hint: str = "Constant") -> None:
        self.value = value
        self.display_hint = display_hint

    def resolve(self, context: ResolveContext) -> Any:
        _ = context
        return self.value

    def __repr__(self) -> str:
        return f"Constant({self.value!r})"


class Lazy(Resolvable):
    """Defers a zero-argument computation until resolution."""

    __slots__ = ("_produce", "display_hint")

    def __init__(self, produce: Callable[[], Any], *, display_hint: str = "Lazy") -> None:
        self._produce = produce
        self.display_hint = display_hint

    def resolve(self, context: ResolveContext) -> Any:
        _ = context
        return self._produce()

    def __repr__(self) -> str:
        return f"Lazy({self.display_hint})"


class ContextLazy(Resolvable):
    """Defers a computation that needs to know who is asking.

    *produce* receives the :class:`ResolveContext`, whose ``scope`` is the
    construct currently being synthesized.
    """

    __slots__ = ("_produce", "display_hint")

    def __init__(
        self, produce: Callable[[ResolveContext], Any], *, display_hint: str = "Lazy"
    ) -> None:
        self._produce = produce
        self.display_hint = display_hint

    def resolve(self, context: ResolveContext) -> Any:
        return self._produce(context)

    def __repr__(self) -> str:
        return f"ContextLazy({self.display_hint})"
