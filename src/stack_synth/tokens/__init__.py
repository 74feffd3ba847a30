"""Deferred values: tokens, producers and the resolver."""

from stack_synth.tokens.compare import TokenComparison, compare_strings
from stack_synth.tokens.context import ResolveContext
from stack_synth.tokens.intrinsics import (
    Intrinsic,
    PseudoParameter,
    concat,
    get_att,
    import_value,
    is_intrinsic,
    join,
    ref,
)
from stack_synth.tokens.producers import Constant, ContextLazy, Lazy
from stack_synth.tokens.registry import TokenRegistry, contains_token_marker
from stack_synth.tokens.resolver import resolve
from stack_synth.tokens.token import Resolvable, Token

__all__ = [
    "Constant",
    "ContextLazy",
    "Intrinsic",
    "Lazy",
    "PseudoParameter",
    "ResolveContext",
    "Resolvable",
    "Token",
    "TokenComparison",
    "TokenRegistry",
    "compare_strings",
    "concat",
    "contains_token_marker",
    "get_att",
    "import_value",
    "is_intrinsic",
    "join",
    "ref",
    "resolve",
]
