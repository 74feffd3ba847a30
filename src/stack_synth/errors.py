"""Synthesis error types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class SynthError(Exception):
    """Base exception for synthesis errors."""


class CircularReferenceError(SynthError):
    """Raised when a token transitively depends on its own resolution."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = list(chain)
        super().__init__(f"Circular reference while resolving tokens: {' -> '.join(self.chain)}")


class MalformedTokenError(SynthError):
    """Raised when an encoded token cannot be mapped back to a registered producer."""

    def __init__(self, marker: str, reason: str) -> None:
        self.marker = marker
        self.reason = reason
        super().__init__(f"Malformed token {marker!r}: {reason}")


class CrossEnvironmentError(SynthError):
    """Raised when a resource without a usable physical name is referenced across environments."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Cannot use resource '{path}' in a cross-environment fashion, "
            "the resource's physical name must be explicitly set or use "
            "PhysicalName.GENERATE_IF_NEEDED"
        )


class ConflictingPhysicalNameError(SynthError):
    """Raised at construction when a name mixes explicit text with the generate marker."""

    def __init__(self, path: str, value: str) -> None:
        self.path = path
        self.value = value
        super().__init__(
            f"Conflicting physical name for '{path}': {value!r} combines an explicit name "
            "with PhysicalName.GENERATE_IF_NEEDED; use one or the other"
        )


class PhysicalNameGenerationError(SynthError):
    """Raised when a deterministic physical name cannot be derived."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot generate a physical name for '{path}': {reason}")


class ConstructError(SynthError):
    """Raised for invalid construct tree operations (ids, scopes, lookups)."""


class DependencyCycleError(SynthError):
    """Raised when stack dependencies contain a cycle."""

    def __init__(self, names: list[str]) -> None:
        msg = "Stack dependency cycle detected"
        if names:
            msg += f": {', '.join(names)}"
        super().__init__(msg)
        self.names = names


class UnknownResourceTypeError(SynthError):
    """Raised when a resource type alias has no registration."""

    def __init__(self, resource_type: str) -> None:
        super().__init__(f"Unknown resource type: {resource_type}")
        self.resource_type = resource_type


class SynthesisNotConvergedError(SynthError):
    """Raised when repeated resolution passes keep changing the construct tree."""

    def __init__(self, passes: int) -> None:
        self.passes = passes
        super().__init__(f"Synthesis did not converge after {passes} passes")
