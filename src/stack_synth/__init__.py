"""Synthesize cloud deployment templates from a tree of constructs."""

from stack_synth.core import (
    App,
    ArnComponents,
    ArnFormat,
    PhysicalName,
    Resource,
    Stack,
)
from stack_synth.errors import SynthError
from stack_synth.resources import Bucket, Queue, Topic
from stack_synth.synth import CloudAssembly

__version__ = "0.1.0"

__all__ = [
    "App",
    "ArnComponents",
    "ArnFormat",
    "Bucket",
    "CloudAssembly",
    "PhysicalName",
    "Queue",
    "Resource",
    "Stack",
    "SynthError",
    "Topic",
    "__version__",
]
