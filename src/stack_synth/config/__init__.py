"""YAML configuration loading and convenience synth API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stack_synth.config.builder import build_app
from stack_synth.config.loader import ConfigError, load_config
from stack_synth.config.schema import Config, StackConfig, SynthSettings

if TYPE_CHECKING:
    from pathlib import Path

    from stack_synth.core.app import App
    from stack_synth.synth.assembly import CloudAssembly

__all__ = [
    "Config",
    "ConfigError",
    "StackConfig",
    "SynthSettings",
    "build",
    "load",
    "load_config",
    "save",
    "synth",
]


def load(path: Path | str) -> Config:
    """Load a YAML configuration file."""
    return load_config(path)


def build(config: Config) -> App:
    """Build the construct tree described by *config*."""
    return build_app(config)


def synth(config: Config) -> CloudAssembly:
    """Build and synthesize all stacks of *config*."""
    return build(config).synth()


def save(assembly: CloudAssembly, config: Config, out_dir: Path | None = None) -> list[Path]:
    """Write *assembly* to *out_dir* (defaults to the configured output directory)."""
    return assembly.save(out_dir if out_dir is not None else config.out_dir)
