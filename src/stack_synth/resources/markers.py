"""Declarative field markers for resource property models.

``CfnProperty`` attaches to Pydantic fields via ``Annotated`` and maps the
field to a (dot-separated) path in the template's ``Properties`` block::

    visibility_timeout: Annotated[int | None, CfnProperty("VisibilityTimeout")] = None
    dead_letter_arn: Annotated[str | None, CfnProperty("RedrivePolicy.deadLetterTargetArn")] = None

Helper functions introspect the markers to build the ``Properties`` dict.
Values may be encoded tokens; they are copied through untouched and resolved
later with the rest of the template.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo

M = TypeVar("M")


@dataclass(frozen=True, slots=True)
class CfnProperty:
    """Field maps to a path in the resource's template ``Properties``.

    ``path`` is dot-separated, e.g. ``"RedrivePolicy.maxReceiveCount"`` →
    ``props["RedrivePolicy"]["maxReceiveCount"]``.
    """

    path: str


# ── Shared introspection primitives ─────────────────────────────────


def _find_marker(field_info: FieldInfo, marker_type: type[M]) -> M | None:
    """Return the first marker of *marker_type* on a field, or ``None``."""
    return next((m for m in field_info.metadata if isinstance(m, marker_type)), None)


def _iter_marked_fields(
    model_or_cls: Any,
    marker_type: type[M],
) -> list[tuple[str, FieldInfo, M]]:
    """Return ``(field_name, field_info, marker)`` for every field carrying *marker_type*."""
    cls = model_or_cls if isinstance(model_or_cls, type) else type(model_or_cls)
    return [
        (name, fi, marker)
        for name, fi in cls.model_fields.items()
        if (marker := _find_marker(fi, marker_type)) is not None
    ]


def _assign_path(target: dict[str, Any], path: str, value: Any) -> None:
    """Set a dot-separated path in a nested dict, creating parents as needed."""
    *parents, leaf = path.split(".")
    current = target
    for segment in parents:
        current = current.setdefault(segment, {})
    current[leaf] = value


def _to_cfn_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        if _iter_marked_fields(value, CfnProperty):
            return build_cfn_properties(value)
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [_to_cfn_value(v) for v in value]
    return value


# ── Public helpers ──────────────────────────────────────────────────


def cfn_property_paths(model_or_cls: Any) -> dict[str, str]:
    """Map field names to their ``CfnProperty`` paths."""
    return {name: marker.path for name, _, marker in _iter_marked_fields(model_or_cls, CfnProperty)}


def build_cfn_properties(model: BaseModel) -> dict[str, Any]:
    """Build a template ``Properties`` dict from ``CfnProperty`` fields.

    ``None`` values are omitted; nested models are rendered by their own
    markers or, without markers, by alias.
    """
    props: dict[str, Any] = {}
    for name, _, marker in _iter_marked_fields(model, CfnProperty):
        value = getattr(model, name)
        if value is None:
            continue
        _assign_path(props, marker.path, _to_cfn_value(value))
    return props
