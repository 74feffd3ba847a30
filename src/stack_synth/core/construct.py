"""Construct tree nodes, paths and unique ids."""

from __future__ import annotations

import hashlib
import re
from typing import TYPE_CHECKING, Any

from stack_synth.errors import ConstructError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from stack_synth.core.app import App
    from stack_synth.tokens.registry import TokenRegistry

PATH_SEP = "/"

_HASH_LEN = 8
_MAX_HUMAN_LEN = 240
_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")
# Path components dropped from the human-readable part of unique ids.
_HIDDEN_ID = "Default"


def _remove_dupes(components: Sequence[str]) -> list[str]:
    result: list[str] = []
    for c in components:
        if not result or result[-1] != c:
            result.append(c)
    return result


def make_unique_id(components: Sequence[str]) -> str:
    """Build an alphanumeric id that is unique for a construct path.

    The id is the path's components (non-alphanumerics removed) followed by
    the first 8 hex digits of the path's MD5 hash, upper-cased. A single
    component is used as-is.
    """
    components = [c for c in components if c]
    if not components:
        raise ValueError("Unable to calculate a unique id for an empty path")

    if len(components) == 1:
        top = _NON_ALNUM_RE.sub("", components[0])
        if top and len(top) <= _MAX_HUMAN_LEN:
            return top

    path_hash = hashlib.md5(PATH_SEP.join(components).encode("utf-8"), usedforsecurity=False)
    human = "".join(
        _NON_ALNUM_RE.sub("", c) for c in _remove_dupes(components) if c != _HIDDEN_ID
    )
    return human[:_MAX_HUMAN_LEN] + path_hash.hexdigest()[:_HASH_LEN].upper()


class Construct:
    """A node in the construct tree.

    Every construct but the root has a scope (its parent) and an id that is
    unique among its siblings. The root of a tree is an :class:`App`, which
    owns the token registry for the synthesis run.
    """

    def __init__(self, scope: Construct | None, id: str) -> None:  # noqa: A002
        if scope is not None:
            if not id:
                raise ConstructError(f"Construct ids must be non-empty (scope: '{scope.path}')")
            if PATH_SEP in id:
                raise ConstructError(f"Construct id '{id}' must not contain '{PATH_SEP}'")
            if id in scope._children:
                where = scope.path or "the app"
                raise ConstructError(f"There is already a construct with id '{id}' in {where}")
            scope._children[id] = self
        self._scope = scope
        self._id = id
        self._children: dict[str, Construct] = {}

    @property
    def id(self) -> str:
        return self._id

    @property
    def scope(self) -> Construct | None:
        return self._scope

    @property
    def children(self) -> list[Construct]:
        return list(self._children.values())

    @property
    def scopes(self) -> list[Construct]:
        """Ancestors from the root down to and including this construct."""
        chain: list[Construct] = []
        node: Construct | None = self
        while node is not None:
            chain.append(node)
            node = node._scope
        chain.reverse()
        return chain

    @property
    def path_components(self) -> list[str]:
        return [c.id for c in self.scopes if c.scope is not None]

    @property
    def path(self) -> str:
        return PATH_SEP.join(self.path_components)

    @property
    def unique_id(self) -> str:
        return make_unique_id(self.path_components)

    @property
    def root(self) -> Construct:
        return self.scopes[0]

    @property
    def app(self) -> App:
        from stack_synth.core.app import App

        root = self.root
        if not isinstance(root, App):
            raise ConstructError(f"Construct '{self.path}' is not attached to an App")
        return root

    @property
    def registry(self) -> TokenRegistry:
        return self.app.registry

    def walk(self) -> Iterator[Construct]:
        """Depth-first, pre-order traversal including this construct."""
        yield self
        for child in self._children.values():
            yield from child.walk()

    def find(self, path: str) -> Construct | None:
        """Find a descendant by relative path, e.g. ``"Producer/Bucket"``."""
        node: Construct | None = self
        for part in path.split(PATH_SEP):
            if node is None:
                return None
            node = node._children.get(part)
        return node

    def encode(self, value: Any) -> Any:
        """Mint a token for a resolvable (if needed) and return its string marker."""
        return self.registry.encode(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path or '<root>'})"
