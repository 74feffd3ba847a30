"""Configuration models for YAML-based synthesis."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Discriminator, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from stack_synth.core.physical_name import PhysicalName
from stack_synth.resources.bucket import BucketProps
from stack_synth.resources.queue import QueueProps
from stack_synth.resources.topic import TopicProps

GENERATE_IF_NEEDED = "GENERATE_IF_NEEDED"


class SynthSettings(BaseSettings):
    """Synthesis defaults.

    Fields can be set via YAML (``settings:`` section) or environment variables
    with the ``SYNTH_`` prefix.  Constructor kwargs take precedence.
    """

    model_config = SettingsConfigDict(env_prefix="SYNTH_")

    default_account: str | None = None
    default_region: str | None = None
    out_dir: Path = Path("synth.out")


def _none_to_list(v: Any) -> Any:
    return v if v is not None else []


def _physical_name(v: Any) -> Any:
    return PhysicalName.GENERATE_IF_NEEDED if v == GENERATE_IF_NEEDED else v


class _EntryFields(BaseModel):
    """Construct-level fields shared by every resource entry."""

    construct_fields: ClassVar[frozenset[str]] = frozenset(
        {"type", "id", "physical_name", "account", "region", "depends_on"}
    )

    id: str = Field(min_length=1, pattern=r"^[^/.]+$")
    physical_name: Annotated[str | None, BeforeValidator(_physical_name)] = None
    account: str | None = None
    region: str | None = None
    depends_on: Annotated[list[str], BeforeValidator(_none_to_list)] = []

    def props(self) -> dict[str, Any]:
        """Resource properties of this entry, keyed by field name."""
        return self.model_dump(exclude=set(self.construct_fields), exclude_none=True)


class BucketEntry(BucketProps, _EntryFields):
    type: Literal["bucket"] = "bucket"


class QueueEntry(QueueProps, _EntryFields):
    type: Literal["queue"] = "queue"


class TopicEntry(TopicProps, _EntryFields):
    type: Literal["topic"] = "topic"


_ResourceEntry = Annotated[BucketEntry | QueueEntry | TopicEntry, Discriminator("type")]


class StackConfig(BaseModel):
    """One stack: its name, environment and resources."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    account: str | None = None
    region: str | None = None
    description: str | None = None
    resources: Annotated[list[_ResourceEntry], BeforeValidator(_none_to_list)] = []


class Config(BaseModel):
    """Synthesis configuration, validated directly from the YAML structure."""

    settings: SynthSettings = Field(default_factory=SynthSettings)
    stacks: Annotated[list[StackConfig], BeforeValidator(_none_to_list)] = []
    config_dir: Path = Path()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def out_dir(self) -> Path:
        """Output directory, relative paths taken from the config file's directory."""
        if self.settings.out_dir.is_absolute():
            return self.settings.out_dir
        return self.config_dir / self.settings.out_dir

    def get_stack(self, name: str) -> StackConfig:
        for stack in self.stacks:
            if stack.name == name:
                return stack
        raise KeyError(name)
