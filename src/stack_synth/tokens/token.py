"""Token handles and the resolvable base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stack_synth.tokens.context import ResolveContext


class Resolvable(ABC):
    """Base class of everything that produces a value when the tree is resolved.

    Producers, intrinsics and resource attributes subclass it. Constructs and
    contexts also have ``resolve`` helpers but are not resolvable themselves.
    """

    __slots__ = ()

    @abstractmethod
    def resolve(self, context: ResolveContext) -> Any: ...


@dataclass(frozen=True, slots=True, eq=False)
class Token:
    """Opaque handle standing in for a value that is not known yet.

    Tokens compare by identity: two tokens are never equal, even when their
    producers would yield the same value.
    """

    id: int
    run_id: str
    producer: Resolvable
    display_hint: str = "TOKEN"

    @property
    def label(self) -> str:
        return f"{self.display_hint}.{self.id}"

    def __repr__(self) -> str:
        return f"Token({self.label}@{self.run_id})"
