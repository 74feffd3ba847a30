"""Command line interface: ``stack-synth synth`` and ``stack-synth ls``."""

from __future__ import annotations

import logging
import os
import sys

import typer

from stack_synth import __version__

app = typer.Typer(
    name="stack-synth",
    no_args_is_help=True,
    add_completion=False,
)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# TRACE is DEBUG with the per-token loggers unmuted.
_LOG_LEVELS = {
    "TRACE": logging.DEBUG,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
_VERBOSITY = {1: "INFO", 2: "DEBUG"}

# One message per minted token: only shown at TRACE.
_CHATTY_LOGGERS = ("stack_synth.tokens.registry",)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"stack-synth {__version__}")
        raise typer.Exit


def _requested_level(verbose: int) -> str | None:
    """Level name from ``SYNTH_LOG`` or the ``-v`` count, or ``None`` to leave logging alone."""
    name = os.environ.get("SYNTH_LOG", "").upper()
    if name:
        if name not in _LOG_LEVELS:
            print(
                f"WARNING: invalid SYNTH_LOG level '{name}', "
                f"expected one of {', '.join(sorted(_LOG_LEVELS))}; defaulting to INFO",
                file=sys.stderr,
            )
            return "INFO"
        return name
    if verbose >= 3:
        return "TRACE"
    return _VERBOSITY.get(verbose)


def _configure_logging(verbose: int) -> None:
    """Route ``stack_synth`` log records to stderr at the requested level.

    Third-party loggers stay at WARNING.
    """
    name = _requested_level(verbose)
    if name is None:
        return
    logging.basicConfig(
        level=logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    level = _LOG_LEVELS[name]
    logging.getLogger("stack_synth").setLevel(level)
    for chatty in _CHATTY_LOGGERS:
        logging.getLogger(chatty).setLevel(level if name == "TRACE" else max(level, logging.INFO))


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log verbosity (-v info, -vv debug, -vvv trace).",
    ),
) -> None:
    """Synthesize deployment templates from a stack definition file."""
    _ = version
    _configure_logging(verbose)


# Commands register themselves on ``app``.
from stack_synth.cli import commands as _commands  # noqa: E402, F401
