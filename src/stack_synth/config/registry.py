"""Default resource type registry factory."""

from __future__ import annotations

from stack_synth.resources.bucket import Bucket
from stack_synth.resources.queue import Queue
from stack_synth.resources.registry import ResourceTypeRegistry
from stack_synth.resources.topic import Topic


def default_registry() -> ResourceTypeRegistry:
    """Create a fresh registry with all built-in resource types."""
    registry = ResourceTypeRegistry()

    registry.register(Bucket)
    registry.register(Queue)
    registry.register(Topic)

    return registry
