"""CLI command implementations."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Annotated

import typer

from stack_synth.cli import app
from stack_synth.cli.errors import handle_error

ConfigPath = Annotated[
    Path,
    typer.Option("--config", "-c", help="Path to the configuration file."),
]

NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colored output."),
]


def _use_color(no_color: bool) -> bool:
    """Determine whether to use color output."""
    return not (no_color or os.environ.get("NO_COLOR"))


@app.command()
def synth(
    config: ConfigPath = Path("stack-synth.yaml"),
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Output directory (overrides settings.out_dir)."),
    ] = None,
    stack: Annotated[
        str | None,
        typer.Option("--stack", help="Print the template of a single stack instead of saving."),
    ] = None,
    no_color: NoColor = False,
) -> None:
    """Synthesize all stacks into templates."""
    from stack_synth.cli.formatting import format_stack_line, format_synth_summary
    from stack_synth.config import ConfigError, load, save
    from stack_synth.config import synth as synth_fn

    color = _use_color(no_color)
    try:
        cfg = load(config)
        assembly = synth_fn(cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    if stack is not None:
        try:
            artifact = assembly.get_stack(stack)
        except KeyError as exc:
            declared = ", ".join(assembly.stack_names)
            err = ConfigError(f"Unknown stack '{stack}' (declared: {declared})")
            raise typer.Exit(handle_error(err, color=color)) from exc
        if color:
            from rich.console import Console

            Console().print_json(data=artifact.template)
        else:
            typer.echo(json.dumps(artifact.template, indent=2))
        return

    try:
        save(assembly, cfg, out)
    except OSError as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    for artifact in assembly.stacks:
        typer.echo(format_stack_line(artifact, color=color))
    typer.echo()
    typer.echo(format_synth_summary(assembly, out or cfg.out_dir, color=color))


@app.command(name="ls")
def list_cmd(
    config: ConfigPath = Path("stack-synth.yaml"),
    no_color: NoColor = False,
) -> None:
    """List the stacks declared in the configuration file."""
    from stack_synth.cli.formatting import format_stack_list
    from stack_synth.config import load

    color = _use_color(no_color)
    try:
        cfg = load(config)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(format_stack_list(cfg, color=color))
