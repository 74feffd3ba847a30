"""Physical-name lifecycle of a resource.

States:

- ``unset``: the deployment engine assigns the name; not usable across environments.
- ``deferred-if-needed``: a name is generated only if a cross-environment
  reference asks for one.
- ``generated``: a deterministic name derived from the construct path.
- ``explicit``: a concrete name supplied by the caller.

The lifecycle is an immutable value. :func:`enable_cross_environment` is the
transition function; it returns a :class:`Transition` holding either the next
lifecycle or the error, and never raises for illegal transitions.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from stack_synth.errors import (
    ConflictingPhysicalNameError,
    CrossEnvironmentError,
    PhysicalNameGenerationError,
    SynthError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from stack_synth.tokens.registry import TokenRegistry

_STACK_PART_LEN = 25
_ID_PART_LEN = 24
_HASH_LEN = 12


class PhysicalName:
    """Values with special meaning for a resource's ``physical_name``."""

    GENERATE_IF_NEEDED: ClassVar[str] = "${PhysicalName[GENERATE_IF_NEEDED]}"


class PhysicalNameState(str, Enum):
    UNSET = "unset"
    DEFERRED_IF_NEEDED = "deferred-if-needed"
    GENERATED = "generated"
    EXPLICIT = "explicit"


@dataclass(frozen=True, slots=True)
class PhysicalNameLifecycle:
    state: PhysicalNameState
    name: str | None = None
    allow_cross_environment: bool = False

    @classmethod
    def from_input(
        cls, value: str | None, *, path: str, registry: TokenRegistry
    ) -> PhysicalNameLifecycle:
        """Initial lifecycle for the ``physical_name`` a resource was constructed with.

        Raises:
            ConflictingPhysicalNameError: If the generate marker is embedded in a longer name.
        """
        if value is None:
            return cls(PhysicalNameState.UNSET)
        if value == PhysicalName.GENERATE_IF_NEEDED:
            return cls(PhysicalNameState.DEFERRED_IF_NEEDED, allow_cross_environment=True)
        if PhysicalName.GENERATE_IF_NEEDED in value:
            raise ConflictingPhysicalNameError(path, value)
        if registry.is_unresolved(value):
            # No deterministic name can be derived from an unresolved token.
            return cls(PhysicalNameState.UNSET, name=value)
        return cls(PhysicalNameState.EXPLICIT, name=value, allow_cross_environment=True)


@dataclass(frozen=True, slots=True)
class Transition:
    """Result of a lifecycle transition: the next lifecycle, or an error."""

    lifecycle: PhysicalNameLifecycle | None = None
    error: SynthError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> PhysicalNameLifecycle:
        """Return the next lifecycle, or raise the transition's error."""
        if self.error is not None:
            raise self.error
        if self.lifecycle is None:
            raise ValueError("Transition carries neither a lifecycle nor an error")
        return self.lifecycle


def enable_cross_environment(
    lifecycle: PhysicalNameLifecycle,
    *,
    path: str,
    generate: Callable[[], str],
) -> Transition:
    """Make the resource referenceable from another environment."""
    if not lifecycle.allow_cross_environment:
        return Transition(error=CrossEnvironmentError(path))

    if lifecycle.state is PhysicalNameState.DEFERRED_IF_NEEDED:
        try:
            name = generate()
        except PhysicalNameGenerationError as exc:
            return Transition(error=exc)
        generated = replace(lifecycle, state=PhysicalNameState.GENERATED, name=name)
        return Transition(lifecycle=generated)

    if lifecycle.state in (PhysicalNameState.GENERATED, PhysicalNameState.EXPLICIT):
        return Transition(lifecycle=lifecycle)

    raise AssertionError(f"unset physical name allows cross-environment use: {path}")


def generate_physical_name(
    *,
    path: str,
    stack_name: str,
    unique_id: str,
    region: str,
    account: str,
    registry: TokenRegistry,
) -> str:
    """Derive a deterministic physical name.

    ``<first 25 chars of stack name><last 24 chars of unique id><12 hex of sha256>``,
    lower-cased. The hash covers the full stack name, unique id, region and account.

    Raises:
        PhysicalNameGenerationError: If the region or account is unresolved or empty.
    """
    if not region or registry.is_unresolved(region):
        raise PhysicalNameGenerationError(path, "the region is unresolved or missing")
    if not account or registry.is_unresolved(account):
        raise PhysicalNameGenerationError(path, "the account is unresolved or missing")

    digest = hashlib.sha256()
    for part in (stack_name, unique_id, region, account):
        digest.update(part.encode("utf-8"))

    name = stack_name[:_STACK_PART_LEN] + unique_id[-_ID_PART_LEN:] + digest.hexdigest()[:_HASH_LEN]
    return name.lower()
