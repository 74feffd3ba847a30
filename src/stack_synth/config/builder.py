"""Build a construct tree from a validated configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stack_synth.config.references import substitute_references
from stack_synth.config.registry import default_registry
from stack_synth.core.app import App
from stack_synth.core.stack import Stack
from stack_synth.tokens.producers import Lazy

if TYPE_CHECKING:
    from stack_synth.config.references import ReferenceSpec
    from stack_synth.config.schema import Config
    from stack_synth.core.resource import Resource
    from stack_synth.resources.registry import ResourceTypeRegistry

logger = logging.getLogger(__name__)


def build_app(config: Config, *, registry: ResourceTypeRegistry | None = None) -> App:
    """Instantiate one :class:`Stack` per stack entry and one resource per resource entry.

    ``${ref:...}`` references become lazy tokens, so a resource may reference
    one declared later in the file or in another stack.
    """
    registry = registry or default_registry()
    settings = config.settings
    app = App()
    resources: dict[str, Resource] = {}

    def reference_token(spec: ReferenceSpec) -> str:
        return app.encode(
            Lazy(
                lambda: resources[spec.target].attribute(spec.attribute),
                display_hint=f"ref:{spec}",
            )
        )

    for stack_cfg in config.stacks:
        stack = Stack(
            app,
            stack_cfg.name,
            stack_name=stack_cfg.name,
            account=stack_cfg.account or settings.default_account,
            region=stack_cfg.region or settings.default_region,
            description=stack_cfg.description,
        )
        for entry in stack_cfg.resources:
            construct = registry.get(entry.type).construct
            physical_name = substitute_references(entry.physical_name, reference_token)
            resources[f"{stack_cfg.name}/{entry.id}"] = construct(
                stack,
                entry.id,
                physical_name=physical_name,
                account=entry.account,
                region=entry.region,
                **substitute_references(entry.props(), reference_token),
            )

    for stack_cfg in config.stacks:
        for entry in stack_cfg.resources:
            resource = resources[f"{stack_cfg.name}/{entry.id}"]
            for dep in entry.depends_on:
                target = dep if "/" in dep else f"{stack_cfg.name}/{dep}"
                resource.add_depends_on(resources[target])

    logger.debug("Built app: %d stack(s), %d resource(s)", len(config.stacks), len(resources))
    return app
