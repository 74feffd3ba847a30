"""Resources: constructs rendered as one template resource each."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from stack_synth.core.arn import format_arn
from stack_synth.core.construct import Construct
from stack_synth.core.environment import ResourceEnvironment, same_environment
from stack_synth.core.physical_name import (
    PhysicalNameLifecycle,
    PhysicalNameState,
    enable_cross_environment,
    generate_physical_name,
)
from stack_synth.core.stack import Stack
from stack_synth.errors import ConstructError
from stack_synth.tokens.intrinsics import get_att, import_value, ref
from stack_synth.tokens.producers import Lazy
from stack_synth.tokens.token import Resolvable

if TYPE_CHECKING:
    from collections.abc import Callable

    from pydantic import BaseModel

    from stack_synth.core.arn import ArnComponents
    from stack_synth.tokens.context import ResolveContext
    from stack_synth.tokens.intrinsics import Intrinsic

logger = logging.getLogger(__name__)


class ResourceAttribute(Resolvable):
    """Environment-sensitive attribute of a resource (its name or ARN).

    Evaluated separately at every reference site:

    - referenced from the owning stack: the native attribute (``Ref``/``Fn::GetAtt``);
    - from another stack in the same environment: an export of the native
      attribute, imported with ``Fn::ImportValue``;
    - from another environment: the resource's physical name, or an ARN
      composed from it, after enabling cross-environment use.
    """

    __slots__ = ("_cross_environment", "_native", "_resource", "attribute", "display_hint")

    def __init__(
        self,
        resource: Resource,
        native: Intrinsic,
        cross_environment: Callable[[], Any],
        *,
        attribute: str,
    ) -> None:
        self._resource = resource
        self._native = native
        self._cross_environment = cross_environment
        self.attribute = attribute
        self.display_hint = f"{resource.id}.{attribute}"

    def resolve(self, context: ResolveContext) -> Any:
        if context.scope is None:
            raise ConstructError(
                f"Cannot resolve {self.display_hint} of '{self._resource.path}' without a scope"
            )
        consumer = Stack.of(context.scope)
        resource = self._resource

        if consumer is resource.stack:
            return self._native

        if same_environment(resource.env, consumer.environment, context):
            return resource._import_into(consumer, self._native, self.attribute)

        resource._enable_cross_environment()
        return self._cross_environment()

    def __repr__(self) -> str:
        return f"ResourceAttribute({self._resource.path}.{self.attribute})"


class Resource(Construct):
    """A construct that renders to one template resource.

    Args:
        scope: Parent construct; must be inside a :class:`Stack`.
        id: Construct id, unique among its siblings.
        physical_name: ``None`` to let the deployment engine name the
            resource, a concrete name, or ``PhysicalName.GENERATE_IF_NEEDED``.
        account: Account the resource lives in (defaults to the stack's).
        region: Region the resource lives in (defaults to the stack's).
        **props: Validated against ``props_model`` when the class defines one.

    Raises:
        ConflictingPhysicalNameError: If *physical_name* embeds the generate marker
            inside a longer name.
    """

    cfn_type: ClassVar[str]
    yaml_alias: ClassVar[str | None] = None
    props_model: ClassVar[type[BaseModel] | None] = None
    name_property: ClassVar[str | None] = None

    def __init__(
        self,
        scope: Construct,
        id: str,  # noqa: A002
        *,
        physical_name: str | None = None,
        account: str | None = None,
        region: str | None = None,
        **props: Any,
    ) -> None:
        super().__init__(scope, id)
        self._stack = Stack.of(self)
        self._env = ResourceEnvironment(
            account=account or self._stack.account,
            region=region or self._stack.region,
        )
        self._lifecycle = PhysicalNameLifecycle.from_input(
            physical_name, path=self.path, registry=self.registry
        )
        if self._lifecycle.state is PhysicalNameState.DEFERRED_IF_NEEDED:
            self._physical_name: str | None = self.encode(
                Lazy(lambda: self._lifecycle.name, display_hint=f"{id}.PhysicalName")
            )
        else:
            self._physical_name = self._lifecycle.name

        if self.props_model is not None:
            self.props: BaseModel | None = self.props_model.model_validate(props)
        elif props:
            raise TypeError(f"{type(self).__name__} takes no properties, got {sorted(props)}")
        else:
            self.props = None

        self._depends_on: list[Resource] = []
        # Encoded Ref/GetAtt markers by attribute; minted once, reused on every lookup.
        self._native_markers: dict[str, str] = {}

    # ── Identity ─────────────────────────────────────────────────────

    @property
    def stack(self) -> Stack:
        return self._stack

    @property
    def env(self) -> ResourceEnvironment:
        return self._env

    @property
    def logical_id(self) -> str:
        return self._stack.logical_id(self)

    @property
    def physical_name(self) -> str | None:
        """Encoded physical name; may resolve to ``None`` (deploy-time name)."""
        return self._physical_name

    @property
    def physical_name_state(self) -> PhysicalNameState:
        return self._lifecycle.state

    @property
    def lifecycle(self) -> PhysicalNameLifecycle:
        return self._lifecycle

    @property
    def ref(self) -> str:
        if "Ref" not in self._native_markers:
            self._native_markers["Ref"] = self.encode(ref(self.logical_id))
        return self._native_markers["Ref"]

    def get_att(self, attribute: str) -> str:
        key = f"GetAtt:{attribute}"
        if key not in self._native_markers:
            self._native_markers[key] = self.encode(get_att(self.logical_id, attribute))
        return self._native_markers[key]

    # ── Attributes ───────────────────────────────────────────────────

    @property
    def resource_name(self) -> str:
        raise ConstructError(f"{self.cfn_type} ('{self.path}') does not expose a name attribute")

    @property
    def resource_arn(self) -> str:
        raise ConstructError(f"{self.cfn_type} ('{self.path}') does not expose an ARN attribute")

    def attribute(self, name: str) -> str:
        """Look up an attribute by its short name: ``ref``, ``name``, ``arn`` or a GetAtt name."""
        if name == "ref":
            return self.ref
        if name == "name":
            return self.resource_name
        if name == "arn":
            return self.resource_arn
        return self.get_att(name)

    def _resource_name_attribute(self, native: Intrinsic) -> str:
        """Encoded name attribute: *native* locally, the physical name across environments."""
        return self.encode(
            ResourceAttribute(self, native, lambda: self._physical_name, attribute="Name")
        )

    def _resource_arn_attribute(
        self, native: Intrinsic, components: Callable[[], ArnComponents]
    ) -> str:
        """Encoded ARN attribute: *native* locally, a composed ARN across environments.

        *components* is called only for cross-environment references and should
        reference ``self.physical_name``.
        """
        return self.encode(
            ResourceAttribute(self, native, lambda: self._format_arn(components()), attribute="Arn")
        )

    def _format_arn(self, components: ArnComponents) -> str:
        return format_arn(
            components,
            partition=self._stack.partition,
            region=self._env.region,
            account=self._env.account,
        )

    # ── Physical name lifecycle ──────────────────────────────────────

    def _enable_cross_environment(self) -> None:
        """Request a usable physical name for a cross-environment reference.

        Raises:
            CrossEnvironmentError: If the resource was constructed without a
                name or with a name containing tokens.
            PhysicalNameGenerationError: If a name must be generated but the
                resource's environment is unresolved.
        """
        lifecycle = enable_cross_environment(
            self._lifecycle, path=self.path, generate=self._generate_physical_name
        ).unwrap()
        if lifecycle != self._lifecycle:
            logger.debug(
                "Physical name of %s: %s -> %s (%s)",
                self.path,
                self._lifecycle.state.value,
                lifecycle.state.value,
                lifecycle.name,
            )
            self._lifecycle = lifecycle
            self.app.bump_revision(f"physical name generated for {self.path}")

    def _generate_physical_name(self) -> str:
        return generate_physical_name(
            path=self.path,
            stack_name=self._stack.stack_name,
            unique_id=self.unique_id,
            region=self._env.region,
            account=self._env.account,
            registry=self.registry,
        )

    def _import_into(self, consumer: Stack, native: Intrinsic, attribute: str) -> Intrinsic:
        name = self._stack.export_value(
            native, name=f"{self._stack.stack_name}:{self.logical_id}{attribute}"
        )
        consumer.add_dependency(self._stack, reason=f"{consumer.path} references {self.path}")
        return import_value(name)

    # ── Rendering ────────────────────────────────────────────────────

    def add_depends_on(self, *others: Resource) -> None:
        """Make this resource depend on resources of the same stack."""
        for other in others:
            if other.stack is not self._stack:
                reason = f"{self.path} depends on {other.path}"
                self._stack.add_dependency(other.stack, reason=reason)
            elif other is not self and other not in self._depends_on:
                self._depends_on.append(other)

    def properties(self) -> dict[str, Any]:
        """Template ``Properties`` of this resource (may contain tokens)."""
        from stack_synth.resources.base import ResourceProps
        from stack_synth.resources.markers import build_cfn_properties

        props: dict[str, Any] = {}
        if self.name_property is not None and self._physical_name is not None:
            props[self.name_property] = self._physical_name
        if self.props is not None:
            props.update(build_cfn_properties(self.props))
        if isinstance(self.props, ResourceProps) and self.props.tags:
            props["Tags"] = self.props.cfn_tags()
        return props

    def render(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Type": self.cfn_type}
        properties = self.properties()
        if properties:
            rendered["Properties"] = properties
        if self._depends_on:
            rendered["DependsOn"] = sorted(r.logical_id for r in self._depends_on)
        return rendered
