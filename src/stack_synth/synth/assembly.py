"""Synthesis output: one template per stack plus a manifest."""

from __future__ import annotations

import contextlib
import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

MANIFEST_FILE = "manifest.json"


def _canonical_json(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), default=str)


def _write_atomic(path: Path, content: str) -> None:
    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    tmp_file = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        tmp_file.replace(path)
    finally:
        with contextlib.suppress(FileNotFoundError):
            tmp_file.unlink()


class StackArtifact(BaseModel):
    """A synthesized stack.

    Attributes:
        stack_name: Deployed stack name
        path: Construct path of the stack (e.g. "Producer")
        environment: ``aws://<account>/<region>``, with placeholders for unresolved parts
        dependencies: Names of stacks that must be deployed first
        template: The fully resolved template
    """

    stack_name: str
    path: str
    environment: str
    dependencies: list[str] = Field(default_factory=list)
    template: dict[str, Any]

    @property
    def template_file(self) -> str:
        return f"{self.stack_name}.template.json"


class CloudAssembly(BaseModel):
    """All stacks of one synthesis run, in deployment order."""

    version: int = 1
    stacks: list[StackArtifact] = Field(default_factory=list)

    def get_stack(self, stack_name: str) -> StackArtifact:
        for artifact in self.stacks:
            if artifact.stack_name == stack_name:
                return artifact
        raise KeyError(f"No stack named '{stack_name}' in the assembly")

    @property
    def stack_names(self) -> list[str]:
        return [a.stack_name for a in self.stacks]

    def manifest(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "stacks": [
                {
                    "stackName": a.stack_name,
                    "path": a.path,
                    "environment": a.environment,
                    "templateFile": a.template_file,
                    "dependencies": a.dependencies,
                }
                for a in self.stacks
            ],
        }

    def digest(self) -> str:
        """Stable digest of the manifest and all templates."""
        payload = _canonical_json(
            {"manifest": self.manifest(), "templates": [a.template for a in self.stacks]}
        )
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def save(self, directory: Path) -> list[Path]:
        """Write each template and ``manifest.json`` into *directory*.

        Each file is written atomically (temp file + rename).
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        written: list[Path] = []
        for artifact in self.stacks:
            path = directory / artifact.template_file
            _write_atomic(path, json.dumps(artifact.template, indent=2) + "\n")
            written.append(path)

        manifest_path = directory / MANIFEST_FILE
        _write_atomic(manifest_path, json.dumps(self.manifest(), indent=2, sort_keys=True) + "\n")
        written.append(manifest_path)
        logger.debug("Cloud assembly saved: %d stack(s) in %s", len(self.stacks), directory)
        return written

    @classmethod
    def load(cls, directory: Path) -> CloudAssembly:
        """Load an assembly previously written by :meth:`save`."""
        directory = Path(directory)
        manifest = json.loads((directory / MANIFEST_FILE).read_text(encoding="utf-8"))
        stacks = [
            StackArtifact(
                stack_name=entry["stackName"],
                path=entry["path"],
                environment=entry["environment"],
                dependencies=entry.get("dependencies", []),
                template=json.loads(
                    (directory / entry["templateFile"]).read_text(encoding="utf-8")
                ),
            )
            for entry in manifest["stacks"]
        ]
        return cls(version=manifest["version"], stacks=stacks)
