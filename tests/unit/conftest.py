"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from stack_synth.config import load
from stack_synth.core.app import App
from stack_synth.tokens.context import ResolveContext
from stack_synth.tokens.registry import TokenRegistry

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from stack_synth.config.schema import Config

_SYNTH_ENV_VARS = (
    "SYNTH_DEFAULT_ACCOUNT",
    "SYNTH_DEFAULT_REGION",
    "SYNTH_OUT_DIR",
    "SYNTH_LOG",
    "NO_COLOR",
)


@pytest.fixture(autouse=True)
def _clean_synth_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove SYNTH_* env vars so unit tests don't leak local settings."""
    for var in _SYNTH_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def registry() -> TokenRegistry:
    return TokenRegistry(run_id="0badcafe")


@pytest.fixture
def context(registry: TokenRegistry) -> ResolveContext:
    return ResolveContext(registry)


@pytest.fixture
def app() -> App:
    return App()


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory fixture: write YAML + optional .env, return loaded Config."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> Config:
        (tmp_path / "config.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "config.yaml")

    return _make
