"""YAML configuration file loader."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML

from stack_synth.config.references import find_references
from stack_synth.config.schema import Config, SynthSettings
from stack_synth.errors import SynthError

logger = logging.getLogger(__name__)


class ConfigError(SynthError):
    """Raised for configuration loading / validation errors."""


def _env_key(field: str) -> str:
    return f"{SynthSettings.model_config['env_prefix']}{field}".upper()


def _resolve_settings(raw_settings: dict[str, Any], config_dir: Path) -> dict[str, Any]:
    """Fill in each setting from the first source that defines it.

    Sources, highest priority first: the YAML ``settings:`` section, the
    ``SYNTH_*`` environment variable, the ``.env`` file next to the config.
    """
    unknown = sorted(raw_settings.keys() - SynthSettings.model_fields.keys())
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

    env_file = config_dir / ".env"
    dotenv = dotenv_values(env_file, encoding="utf-8-sig") if env_file.is_file() else {}

    resolved: dict[str, Any] = {}
    for field in SynthSettings.model_fields:
        key = _env_key(field)
        candidates = (raw_settings.get(field), os.environ.get(key), dotenv.get(key))
        value = next((v for v in candidates if v is not None), None)
        if value is not None:
            resolved[field] = str(value)
    return resolved


def _validate_unique_names(config: Config) -> list[str]:
    """Check that stack names are unique and resource ids are unique per stack."""
    errors: list[str] = []
    stacks: set[str] = set()
    for stack in config.stacks:
        if stack.name in stacks:
            errors.append(f"Duplicate stack name '{stack.name}'")
        stacks.add(stack.name)
        seen: set[str] = set()
        for entry in stack.resources:
            if entry.id in seen:
                errors.append(f"Duplicate resource id '{entry.id}' in stack '{stack.name}'")
            seen.add(entry.id)
    return errors


def _validate_references(config: Config) -> list[str]:
    """Check that every ``${ref:...}`` and ``depends_on`` entry names a declared resource."""
    declared = {f"{s.name}/{e.id}" for s in config.stacks for e in s.resources}
    errors: list[str] = []
    for stack in config.stacks:
        for entry in stack.resources:
            address = f"{stack.name}/{entry.id}"
            values = [entry.props(), entry.physical_name]
            for spec in find_references(values):
                if spec.target not in declared:
                    errors.append(f"{address}: reference to undeclared resource '{spec}'")
            for dep in entry.depends_on:
                target = dep if "/" in dep else f"{stack.name}/{dep}"
                if target not in declared:
                    errors.append(f"{address}: depends_on undeclared resource '{dep}'")
    return errors


def load_config(path: Path | str) -> Config:
    """Load a YAML configuration file and return a ``Config`` object.

    Raises:
        ConfigError: On YAML parse errors, validation failures, duplicate names
            or references to undeclared resources.
    """
    path = Path(path)

    try:
        raw = YAML(typ="safe").load(path)
    except Exception as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    try:
        raw["settings"] = _resolve_settings(raw.get("settings") or {}, path.parent)
        config = Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    config.config_dir = path.parent

    errors = _validate_unique_names(config) + _validate_references(config)
    if errors:
        raise ConfigError("\n".join(errors))

    logger.info(
        "Loaded config from %s (%d stacks, %d resources)",
        path,
        len(config.stacks),
        sum(len(s.resources) for s in config.stacks),
    )
    return config
