"""Depth-first resolver replacing tokens with literals or template intrinsics."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from stack_synth.tokens.intrinsics import concat
from stack_synth.tokens.token import Resolvable, Token

if TYPE_CHECKING:
    from stack_synth.tokens.context import ResolveContext


def resolve(value: Any, context: ResolveContext) -> Any:
    """Resolve *value* deeply.

    - ``None``, booleans, ints, plain floats and marker-free strings are returned unchanged.
    - Mappings and sequences are rebuilt with resolved members, keeping key and list order.
    - Tokens (direct, string-encoded or number-encoded) are replaced by their producer's
      value, which is itself resolved.
    - Strings mixing literal text and tokens collapse to one string, or to a
      ``Fn::Join`` when some fragment is only known at deploy time.

    Raises:
        CircularReferenceError: If a token's resolution requires itself.
        MalformedTokenError: If an encoded marker does not belong to this run.
        TypeError: On values of unsupported types, or when a token embedded in a
            string resolves to ``None`` outside a preparing context.
    """
    if value is None or isinstance(value, bool | int):
        return value

    if isinstance(value, float):
        token = context.registry.decode_number(value)
        return value if token is None else _resolve_token(token, context)

    if isinstance(value, str):
        return _resolve_string(value, context)

    if isinstance(value, Token):
        return _resolve_token(context.registry.verify(value), context)

    if isinstance(value, Resolvable):
        return resolve(value.resolve(context), context)

    if isinstance(value, Mapping):
        return _resolve_mapping(value, context)

    if isinstance(value, list | tuple):
        return [resolve(item, context) for item in value]

    raise TypeError(f"Cannot resolve {value!r}: unsupported type {type(value).__name__}")


def _resolve_token(token: Token, context: ResolveContext) -> Any:
    with context.visiting(token):
        return resolve(token.producer.resolve(context), context)


def _resolve_mapping(value: Mapping[Any, Any], context: ResolveContext) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, item in value.items():
        resolved_key = resolve(key, context)
        if not isinstance(resolved_key, str):
            raise TypeError(
                f"Mapping keys must resolve to strings, {key!r} resolved to {resolved_key!r}"
            )
        result[resolved_key] = resolve(item, context)
    return result


def _resolve_string(value: str, context: ResolveContext) -> Any:
    fragments = context.registry.split(value)
    if not any(isinstance(f, Token) for f in fragments):
        return value

    if len(fragments) == 1:
        # The whole string is one token: keep the produced type.
        return _resolve_token(fragments[0], context)  # type: ignore[arg-type]

    pieces: list[Any] = []
    for fragment in fragments:
        if isinstance(fragment, str):
            pieces.append(fragment)
            continue
        resolved = _resolve_token(fragment, context)
        if resolved is None and context.preparing:
            continue
        if resolved is None:
            raise TypeError(f"Token {fragment.label} embedded in {value!r} resolved to None")
        pieces.append(_as_fragment(resolved, fragment))
    return concat(pieces)


def _as_fragment(resolved: Any, token: Token) -> Any:
    if isinstance(resolved, str | dict):
        return resolved
    if isinstance(resolved, bool | int | float):
        return json.dumps(resolved)
    raise TypeError(
        f"Token {token.label} embedded in a string resolved to a {type(resolved).__name__}"
    )
