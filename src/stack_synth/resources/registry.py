"""Resource type registry for YAML type dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from stack_synth.errors import UnknownResourceTypeError

if TYPE_CHECKING:
    from pydantic import BaseModel

    from stack_synth.core.resource import Resource


@dataclass(frozen=True)
class ResourceTypeRegistration:
    alias: str
    construct: type[Resource]
    props_model: type[BaseModel] | None


class ResourceTypeRegistry:
    """Registry mapping a YAML type alias -> resource construct class."""

    def __init__(self) -> None:
        self._registrations: dict[str, ResourceTypeRegistration] = {}

    def register(self, construct: type[Resource]) -> None:
        alias = getattr(construct, "yaml_alias", None)
        if not isinstance(alias, str) or not alias:
            raise ValueError("Resource construct must define a non-empty classvar `yaml_alias`")

        if alias in self._registrations:
            raise ValueError(f"Resource type already registered: {alias}")

        self._registrations[alias] = ResourceTypeRegistration(
            alias=alias,
            construct=construct,
            props_model=construct.props_model,
        )

    def get(self, alias: str) -> ResourceTypeRegistration:
        try:
            return self._registrations[alias]
        except KeyError as e:
            raise UnknownResourceTypeError(alias) from e

    def aliases(self) -> list[str]:
        return sorted(self._registrations)
