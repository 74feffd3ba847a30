"""The App: root of a construct tree and owner of one synthesis run."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from stack_synth.core.construct import Construct
from stack_synth.tokens.context import ResolveContext
from stack_synth.tokens.registry import TokenRegistry

if TYPE_CHECKING:
    from stack_synth.core.stack import Stack
    from stack_synth.synth.assembly import CloudAssembly

logger = logging.getLogger(__name__)


class App(Construct):
    """Root construct. One App is one synthesis run.

    The App owns the :class:`TokenRegistry` every construct in the tree mints
    into, and a revision counter that is bumped whenever resolution changes
    the tree (a physical name gets generated, an export gets added).
    """

    def __init__(self, *, registry: TokenRegistry | None = None) -> None:
        super().__init__(None, "")
        self._registry = registry or TokenRegistry()
        self._revision = 0

    @property
    def registry(self) -> TokenRegistry:
        return self._registry

    @property
    def revision(self) -> int:
        return self._revision

    def bump_revision(self, reason: str) -> None:
        self._revision += 1
        logger.debug("Tree revision %d: %s", self._revision, reason)

    @property
    def stacks(self) -> list[Stack]:
        from stack_synth.core.stack import Stack

        return [c for c in self.walk() if isinstance(c, Stack)]

    def resolve(self, value: Any, scope: Construct | None = None) -> Any:
        """Resolve *value* with a fresh context scoped to *scope*."""
        return ResolveContext(self._registry, scope).resolve(value)

    def synth(self) -> CloudAssembly:
        """Resolve every stack and return the resulting cloud assembly."""
        from stack_synth.synth.synthesizer import Synthesizer

        return Synthesizer(self).synth()
