"""Construct tree: apps, stacks, resources and the physical-name lifecycle."""

from stack_synth.core.app import App
from stack_synth.core.arn import ArnComponents, ArnFormat, format_arn, parse_arn
from stack_synth.core.construct import Construct, make_unique_id
from stack_synth.core.environment import ResourceEnvironment, same_environment
from stack_synth.core.physical_name import (
    PhysicalName,
    PhysicalNameLifecycle,
    PhysicalNameState,
    Transition,
    enable_cross_environment,
    generate_physical_name,
)
from stack_synth.core.resource import Resource, ResourceAttribute
from stack_synth.core.stack import Stack

__all__ = [
    "App",
    "ArnComponents",
    "ArnFormat",
    "Construct",
    "PhysicalName",
    "PhysicalNameLifecycle",
    "PhysicalNameState",
    "Resource",
    "ResourceAttribute",
    "ResourceEnvironment",
    "Stack",
    "Transition",
    "enable_cross_environment",
    "format_arn",
    "generate_physical_name",
    "make_unique_id",
    "parse_arn",
    "same_environment",
]
