"""Synthesis driver: resolves every stack of an App into a cloud assembly."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from stack_synth.errors import ConstructError, SynthesisNotConvergedError
from stack_synth.synth.assembly import CloudAssembly, StackArtifact
from stack_synth.synth.graph import DependencyGraph
from stack_synth.tokens.context import ResolveContext

if TYPE_CHECKING:
    from stack_synth.core.app import App
    from stack_synth.core.stack import Stack

logger = logging.getLogger(__name__)

MAX_PASSES = 3


class Synthesizer:
    """Resolve an App's construct tree into templates.

    Resolving a reference can change the tree: a cross-environment reference
    generates the target's physical name, a same-environment cross-stack
    reference adds an export to the target's stack. Both bump the App's
    revision.

    Synthesis therefore runs in two phases. The prepare phase walks every
    stack with a preparing context, discarding the result, and repeats until
    a walk leaves the revision unchanged. Generation and exports are
    idempotent, so the second walk is normally stable. The build phase then
    resolves each stack once into its template, against a tree that no longer
    changes, so the result does not depend on the order stacks were declared.
    """

    def __init__(self, app: App) -> None:
        self._app = app

    def synth(self) -> CloudAssembly:
        """Resolve all stacks and return them in deployment order.

        Raises:
            SynthError: Any resolution error aborts the whole synthesis.
        """
        stacks = self._app.stacks
        self._check_unique_names(stacks)

        self._prepare(stacks)
        before = self._app.revision
        templates = {stack.path: self._resolve_stack(stack) for stack in stacks}
        if self._app.revision != before:
            raise SynthesisNotConvergedError(MAX_PASSES)

        by_path = {stack.path: stack for stack in stacks}
        graph = DependencyGraph(
            nodes=by_path,
            dependencies={s.path: [d.path for d in s.dependencies] for s in stacks},
        )
        registry = self._app.registry
        artifacts = [
            StackArtifact(
                stack_name=by_path[path].stack_name,
                path=path,
                environment=by_path[path].environment.describe(registry),
                dependencies=sorted(d.stack_name for d in by_path[path].dependencies),
                template=templates[path],
            )
            for path in graph.topological_order()
        ]
        logger.info("Synthesized %d stack(s)", len(artifacts))
        return CloudAssembly(stacks=artifacts)

    def _prepare(self, stacks: list[Stack]) -> None:
        """Walk every stack until references stop changing the tree."""
        for n in range(1, MAX_PASSES + 1):
            before = self._app.revision
            for stack in stacks:
                self._resolve_stack(stack, preparing=True)
            logger.debug(
                "Prepare pass %d: %d stack(s), revision %d -> %d",
                n,
                len(stacks),
                before,
                self._app.revision,
            )
            if self._app.revision == before:
                return
        raise SynthesisNotConvergedError(MAX_PASSES)

    def _resolve_stack(self, stack: Stack, *, preparing: bool = False) -> dict[str, Any]:
        # Fresh context per stack: no cycle-tracking state leaks between stacks.
        context = ResolveContext(self._app.registry, stack, preparing=preparing)
        return stack.to_template(context)

    @staticmethod
    def _check_unique_names(stacks: list[Stack]) -> None:
        seen: dict[str, str] = {}
        for stack in stacks:
            if stack.stack_name in seen:
                raise ConstructError(
                    f"Duplicate stack name '{stack.stack_name}': "
                    f"found in both {seen[stack.stack_name]} and {stack.path}"
                )
            seen[stack.stack_name] = stack.path
