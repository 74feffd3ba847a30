"""CloudFormation intrinsic functions.

An :class:`Intrinsic` is a deploy-time expression of the template format. It
is resolvable, so it can be minted as a token and embedded in strings; its
resolved form is the single-key dict the template expects, e.g.
``{"Fn::GetAtt": ["Bucket83908E77", "Arn"]}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stack_synth.tokens.token import Resolvable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from stack_synth.tokens.context import ResolveContext


class PseudoParameter:
    ACCOUNT_ID = "AWS::AccountId"
    REGION = "AWS::Region"
    PARTITION = "AWS::Partition"
    STACK_NAME = "AWS::StackName"
    URL_SUFFIX = "AWS::URLSuffix"


class Intrinsic(Resolvable):
    """A native template expression such as ``Ref`` or ``Fn::GetAtt``."""

    __slots__ = ("display_hint", "function", "value")

    def __init__(self, function: str, value: Any, *, display_hint: str | None = None) -> None:
        self.function = function
        self.value = value
        self.display_hint = display_hint or function.removeprefix("Fn::")

    def resolve(self, context: ResolveContext) -> Any:
        # The resolver resolves the returned structure, including ``value``.
        _ = context
        return {self.function: self.value}

    def __repr__(self) -> str:
        return f"Intrinsic({self.function}: {self.value!r})"


def ref(logical_id: str) -> Intrinsic:
    return Intrinsic("Ref", logical_id, display_hint=f"{logical_id}.Ref")


def get_att(logical_id: str, attribute: str) -> Intrinsic:
    return Intrinsic(
        "Fn::GetAtt", [logical_id, attribute], display_hint=f"{logical_id}.{attribute}"
    )


def import_value(export_name: str) -> Intrinsic:
    return Intrinsic("Fn::ImportValue", export_name)


def join(delimiter: str, parts: Iterable[Any]) -> Intrinsic:
    return Intrinsic("Fn::Join", [delimiter, list(parts)])


def is_intrinsic(value: Any) -> bool:
    """Whether *value* is a resolved ``{"Ref": ...}`` or ``{"Fn::...": ...}`` expression."""
    if not isinstance(value, dict) or len(value) != 1:
        return False
    (key,) = value
    return key == "Ref" or (isinstance(key, str) and key.startswith("Fn::"))


def _join_parts(fragment: Any) -> list[Any]:
    # Splice nested empty-delimiter joins into the surrounding join.
    if isinstance(fragment, dict) and list(fragment) == ["Fn::Join"]:
        delimiter, parts = fragment["Fn::Join"]
        if delimiter == "":
            return list(parts)
    return [fragment]


def concat(fragments: Sequence[Any]) -> Any:
    """Concatenate resolved string fragments using the template's native join.

    Adjacent literal strings are merged. The result is a plain string when
    every fragment is a literal, otherwise ``{"Fn::Join": ["", [...]]}``
    preserving fragment order.
    """
    parts: list[Any] = []
    for fragment in fragments:
        for part in _join_parts(fragment):
            if part == "":
                continue
            if isinstance(part, str) and parts and isinstance(parts[-1], str):
                parts[-1] += part
            else:
                parts.append(part)

    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    return {"Fn::Join": ["", parts]}
