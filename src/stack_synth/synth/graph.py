"""Deployment ordering of stacks."""

from __future__ import annotations

import heapq
from collections import defaultdict
from typing import TYPE_CHECKING

from stack_synth.errors import DependencyCycleError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class DependencyGraph:
    """Stacks and the stacks each one must be deployed after.

    Dependencies on names outside *nodes* are ignored. Ties are broken by
    priority (lower first), then by name, so the order is the same on every run.
    """

    def __init__(
        self,
        nodes: Iterable[str],
        dependencies: Mapping[str, Iterable[str]],
        priorities: Mapping[str, int] | None = None,
    ) -> None:
        after = {node: frozenset(dependencies.get(node, ())) for node in nodes}
        self._after = {node: deps & after.keys() for node, deps in after.items()}
        self._priorities = dict(priorities or {})

    def _key(self, node: str) -> tuple[int, str]:
        return self._priorities.get(node, 0), node

    def topological_order(self) -> list[str]:
        """Return every node after all of its dependencies.

        Raises:
            DependencyCycleError: Naming the nodes that could not be ordered.
        """
        pending = {node: len(deps) for node, deps in self._after.items()}
        unblocks: dict[str, list[str]] = defaultdict(list)
        for node, deps in self._after.items():
            for dep in deps:
                unblocks[dep].append(node)

        ready = [self._key(node) for node, count in pending.items() if count == 0]
        heapq.heapify(ready)

        order: list[str] = []
        while ready:
            _, node = heapq.heappop(ready)
            order.append(node)
            for dependent in unblocks[node]:
                pending[dependent] -= 1
                if pending[dependent] == 0:
                    heapq.heappush(ready, self._key(dependent))

        if len(order) < len(self._after):
            raise DependencyCycleError(sorted(self._after.keys() - set(order)))
        return order
