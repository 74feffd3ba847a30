"""Synthesis driver and its output."""

from stack_synth.synth.assembly import CloudAssembly, StackArtifact
from stack_synth.synth.graph import DependencyGraph
from stack_synth.synth.synthesizer import MAX_PASSES, Synthesizer

__all__ = [
    "MAX_PASSES",
    "CloudAssembly",
    "DependencyGraph",
    "StackArtifact",
    "Synthesizer",
]
