"""Token-aware comparison of possibly-unresolved strings."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stack_synth.tokens.context import ResolveContext


class TokenComparison(str, Enum):
    SAME = "same"
    DIFFERENT = "different"
    ONE_UNRESOLVED = "one-unresolved"
    BOTH_UNRESOLVED = "both-unresolved"


def compare_strings(a: Any, b: Any, context: ResolveContext) -> TokenComparison:
    """Compare two values that may contain tokens.

    Two unresolved values are ``SAME`` when their encodings are identical or
    when they resolve to the same deploy-time expression, e.g. two tokens that
    both stand for ``{"Ref": "AWS::AccountId"}``.
    """
    registry = context.registry
    a_unresolved = registry.is_unresolved(a)
    b_unresolved = registry.is_unresolved(b)

    if not a_unresolved and not b_unresolved:
        return TokenComparison.SAME if a == b else TokenComparison.DIFFERENT

    if a_unresolved and b_unresolved:
        if a == b or context.resolve(a) == context.resolve(b):
            return TokenComparison.SAME
        return TokenComparison.BOTH_UNRESOLVED

    return TokenComparison.ONE_UNRESOLVED
