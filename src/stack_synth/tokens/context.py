"""Resolution context carried through one resolve walk."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Any

from stack_synth.errors import CircularReferenceError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from stack_synth.core.construct import Construct
    from stack_synth.tokens.registry import TokenRegistry
    from stack_synth.tokens.token import Token


class ResolveContext:
    """Scope and cycle-tracking state for resolving a value.

    A fresh context is created per top-level resolve. :meth:`with_scope`
    derives a context for a scope transition; derived contexts share the
    visitation chain so cycles are caught across scopes.

    A *preparing* context is used for walks whose result is thrown away. They
    only exist to let references change the tree, so a fragment that is not
    known yet (a physical name not generated yet) is tolerated instead of
    failing the walk.
    """

    def __init__(
        self,
        registry: TokenRegistry,
        scope: Construct | None = None,
        *,
        preparing: bool = False,
        _chain: list[Token] | None = None,
    ) -> None:
        self._registry = registry
        self._scope = scope
        self._preparing = preparing
        self._chain: list[Token] = _chain if _chain is not None else []

    @property
    def registry(self) -> TokenRegistry:
        return self._registry

    @property
    def scope(self) -> Construct | None:
        return self._scope

    @property
    def preparing(self) -> bool:
        return self._preparing

    @property
    def chain(self) -> tuple[Token, ...]:
        """Tokens currently being resolved, outermost first."""
        return tuple(self._chain)

    def with_scope(self, scope: Construct) -> ResolveContext:
        return ResolveContext(
            self._registry, scope, preparing=self._preparing, _chain=self._chain
        )

    def resolve(self, value: Any) -> Any:
        """Resolve *value* within this context."""
        from stack_synth.tokens.resolver import resolve

        return resolve(value, self)

    @contextlib.contextmanager
    def visiting(self, token: Token) -> Iterator[None]:
        """Push *token* on the chain for the duration of its resolution."""
        if token in self._chain:
            loop = self._chain[self._chain.index(token) :]
            raise CircularReferenceError([t.label for t in (*loop, token)])
        self._chain.append(token)
        try:
            yield
        finally:
            self._chain.pop()
