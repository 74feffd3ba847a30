"""Base property model shared by all resource types."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResourceProps(BaseModel):
    """Base class for resource property models.

    Props are pure data - they describe the desired template properties.
    Constructs know how to turn them into a template resource.
    """

    model_config = ConfigDict(extra="forbid")

    tags: dict[str, str] = Field(default_factory=dict)

    def cfn_tags(self) -> list[dict[str, Any]]:
        """Tags in template form: ``[{"Key": ..., "Value": ...}]`` sorted by key."""
        return [{"Key": k, "Value": v} for k, v in sorted(self.tags.items())]
