"""Stacks: the unit of deployment and of template synthesis."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from stack_synth.core.arn import ArnComponents, format_arn
from stack_synth.core.construct import Construct, make_unique_id
from stack_synth.core.environment import ResourceEnvironment
from stack_synth.errors import ConstructError
from stack_synth.tokens.intrinsics import PseudoParameter, ref

if TYPE_CHECKING:
    from stack_synth.core.resource import Resource
    from stack_synth.tokens.context import ResolveContext
    from stack_synth.tokens.intrinsics import Intrinsic

logger = logging.getLogger(__name__)

_STACK_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")
_MAX_STACK_NAME_LEN = 128
TEMPLATE_FORMAT_VERSION = "2010-09-09"


def _drop_none(value: Any) -> Any:
    """Remove ``None``-valued keys from resolved mappings."""
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_none(v) for v in value]
    return value


class Stack(Construct):
    """A deployable unit rendered into one template.

    ``account`` and ``region`` default to the ``AWS::AccountId`` /
    ``AWS::Region`` pseudo parameters, which makes the stack
    environment-agnostic.
    """

    def __init__(
        self,
        scope: Construct,
        id: str,  # noqa: A002
        *,
        stack_name: str | None = None,
        account: str | None = None,
        region: str | None = None,
        description: str | None = None,
    ) -> None:
        super().__init__(scope, id)
        self._stack_name = stack_name or self._default_stack_name()
        if len(self._stack_name) > _MAX_STACK_NAME_LEN or not _STACK_NAME_RE.match(
            self._stack_name
        ):
            raise ConstructError(
                f"Stack name must match {_STACK_NAME_RE.pattern} and be at most "
                f"{_MAX_STACK_NAME_LEN} characters, got '{self._stack_name}'"
            )
        self.description = description
        self._account = account or self.encode(ref(PseudoParameter.ACCOUNT_ID))
        self._region = region or self.encode(ref(PseudoParameter.REGION))
        self._partition = self.encode(ref(PseudoParameter.PARTITION))
        self._dependencies: dict[Stack, list[str]] = {}
        self._exports: dict[str, Intrinsic] = {}

    def _default_stack_name(self) -> str:
        components = [c for c in self.path_components if c]
        if len(components) == 1:
            return components[0]
        return make_unique_id(components)

    @staticmethod
    def of(construct: Construct) -> Stack:
        """Return the stack *construct* belongs to (itself when it is a stack)."""
        for node in reversed(construct.scopes):
            if isinstance(node, Stack):
                return node
        raise ConstructError(f"'{construct.path or '<root>'}' is not defined within a stack")

    # ── Environment ──────────────────────────────────────────────────

    @property
    def stack_name(self) -> str:
        return self._stack_name

    @property
    def account(self) -> str:
        return self._account

    @property
    def region(self) -> str:
        return self._region

    @property
    def partition(self) -> str:
        return self._partition

    @property
    def environment(self) -> ResourceEnvironment:
        return ResourceEnvironment(account=self._account, region=self._region)

    def format_arn(self, components: ArnComponents) -> str:
        """Build an ARN in this stack's partition, region and account."""
        return format_arn(
            components, partition=self._partition, region=self._region, account=self._account
        )

    # ── Tree helpers ─────────────────────────────────────────────────

    @property
    def resources(self) -> list[Resource]:
        """Resources owned by this stack, excluding those of nested stacks."""
        from stack_synth.core.resource import Resource

        return [c for c in self.walk() if isinstance(c, Resource) and Stack.of(c) is self]

    def logical_id(self, construct: Construct) -> str:
        """Template logical id of *construct*, unique within this stack."""
        if Stack.of(construct) is not self:
            raise ConstructError(f"'{construct.path}' does not belong to stack '{self.path}'")
        return make_unique_id(construct.path_components[len(self.path_components) :])

    # ── Dependencies and exports ─────────────────────────────────────

    def add_dependency(self, target: Stack, reason: str = "") -> None:
        """Record that this stack must be deployed after *target*."""
        if target is self:
            return
        reasons = self._dependencies.setdefault(target, [])
        if reason and reason not in reasons:
            reasons.append(reason)
            logger.debug("Stack %s depends on %s: %s", self.stack_name, target.stack_name, reason)

    @property
    def dependencies(self) -> list[Stack]:
        return list(self._dependencies)

    def export_value(self, value: Intrinsic, *, name: str) -> str:
        """Export *value* from this stack under *name* and return the export name."""
        if name not in self._exports:
            self._exports[name] = value
            self.app.bump_revision(f"export {name} added to {self.stack_name}")
        return name

    @property
    def exports(self) -> dict[str, Intrinsic]:
        return dict(self._exports)

    # ── Synthesis ────────────────────────────────────────────────────

    def resolve(self, value: Any) -> Any:
        """Resolve *value* as seen from this stack."""
        return self.app.resolve(value, self)

    def to_template(self, context: ResolveContext) -> dict[str, Any]:
        """Resolve this stack into a template dict."""
        template: dict[str, Any] = {"AWSTemplateFormatVersion": TEMPLATE_FORMAT_VERSION}
        if self.description:
            template["Description"] = self.description

        resources: dict[str, Any] = {}
        for resource in self.resources:
            logical_id = resource.logical_id
            if logical_id in resources:
                raise ConstructError(f"Duplicate logical id '{logical_id}' in stack {self.path}")
            rendered = _drop_none(context.with_scope(resource).resolve(resource.render()))
            # A deferred physical name that was never generated resolves to None.
            if rendered.get("Properties") == {}:
                del rendered["Properties"]
            resources[logical_id] = rendered
        template["Resources"] = resources

        if self._exports:
            scoped = context.with_scope(self)
            outputs: dict[str, Any] = {}
            for name, value in list(self._exports.items()):
                outputs[make_unique_id(["Export", name])] = {
                    "Value": scoped.resolve(value),
                    "Export": {"Name": name},
                }
            template["Outputs"] = outputs

        return template
