"""Assembly output rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from stack_synth.config.schema import Config
    from stack_synth.synth.assembly import CloudAssembly, StackArtifact


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'s' if n != 1 else ''}"


def format_stack_line(artifact: StackArtifact, *, color: bool = True) -> str:
    """Render ``Name  aws://account/region  (depends on: A, B)``."""
    style = styler(color)
    resources = len(artifact.template.get("Resources", {}))
    line = f"{style(artifact.stack_name, bold=True)}  {artifact.environment}  "
    line += style(f"[{_plural(resources, 'resource')}]", fg="bright_black")
    if artifact.dependencies:
        line += f"  (depends on: {', '.join(artifact.dependencies)})"
    return line


def format_stack_list(config: Config, *, color: bool = True) -> str:
    """Render the stacks declared in *config*, one per line."""
    style = styler(color)
    if not config.stacks:
        return "No stacks declared."
    lines = []
    for stack in config.stacks:
        env = f"aws://{stack.account or config.settings.default_account or 'unknown-account'}"
        env += f"/{stack.region or config.settings.default_region or 'unknown-region'}"
        lines.append(
            f"{style(stack.name, bold=True)}  {env}  "
            + style(f"[{_plural(len(stack.resources), 'resource')}]", fg="bright_black")
        )
    return "\n".join(lines)


def format_synth_summary(
    assembly: CloudAssembly, out_dir: Path, *, color: bool = True
) -> str:
    """Render ``Synthesis complete! 2 stacks written to out/.``"""
    style = styler(color)
    header = style("Synthesis complete!", fg="green", bold=True)
    return f"{header} {_plural(len(assembly.stacks), 'stack')} written to {out_dir}."
