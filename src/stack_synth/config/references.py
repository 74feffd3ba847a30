"""``${ref:<stack>/<id>.<attribute>}`` references in YAML string values."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

_REF_RE = re.compile(r"\$\{ref:([^/}]+)/([^.}]+)\.([^}]+)\}")


@dataclass(frozen=True, slots=True)
class ReferenceSpec:
    """A parsed reference to an attribute of a declared resource.

    ``attribute`` is ``ref``, ``name``, ``arn`` (or ``url`` for queues), or any
    ``Fn::GetAtt`` attribute name.
    """

    stack: str
    id: str
    attribute: str

    @property
    def target(self) -> str:
        return f"{self.stack}/{self.id}"

    def __str__(self) -> str:
        return f"{self.target}.{self.attribute}"


def _from_match(match: re.Match[str]) -> ReferenceSpec:
    return ReferenceSpec(stack=match.group(1), id=match.group(2), attribute=match.group(3))


def find_references(value: Any) -> list[ReferenceSpec]:
    """Collect every reference in *value*, recursively, in document order."""
    if isinstance(value, str):
        return [_from_match(m) for m in _REF_RE.finditer(value)]
    if isinstance(value, dict):
        return [r for v in value.values() for r in find_references(v)]
    if isinstance(value, list):
        return [r for v in value for r in find_references(v)]
    return []


def substitute_references(value: Any, replace: Callable[[ReferenceSpec], str]) -> Any:
    """Replace every reference in string values with ``replace(spec)``, recursively."""
    if isinstance(value, str):
        return _REF_RE.sub(lambda m: replace(_from_match(m)), value)
    if isinstance(value, dict):
        return {k: substitute_references(v, replace) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_references(v, replace) for v in value]
    return value
