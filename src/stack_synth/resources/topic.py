"""SNS topic resource."""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

from stack_synth.core.arn import ArnComponents, ArnFormat
from stack_synth.core.resource import Resource
from stack_synth.resources.base import ResourceProps
from stack_synth.resources.markers import CfnProperty
from stack_synth.tokens.intrinsics import get_att, ref


class Subscription(BaseModel):
    """An inline topic subscription."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    protocol: Literal["sqs", "lambda", "email", "https", "http", "sms"] = Field(alias="Protocol")
    endpoint: str = Field(alias="Endpoint", min_length=1)


class TopicProps(ResourceProps):
    """Properties of an ``AWS::SNS::Topic``."""

    display_name: Annotated[str | None, CfnProperty("DisplayName")] = None
    subscriptions: Annotated[list[Subscription] | None, CfnProperty("Subscription")] = None


class Topic(Resource):
    """An SNS topic. The native ``Ref`` of a topic is its ARN."""

    cfn_type: ClassVar[str] = "AWS::SNS::Topic"
    yaml_alias: ClassVar[str] = "topic"
    props_model: ClassVar[type[TopicProps]] = TopicProps
    name_property: ClassVar[str] = "TopicName"

    def __init__(self, scope: Any, id: str, **kwargs: Any) -> None:  # noqa: A002
        super().__init__(scope, id, **kwargs)
        self.topic_name = self._resource_name_attribute(get_att(self.logical_id, "TopicName"))
        self.topic_arn = self._resource_arn_attribute(
            ref(self.logical_id),
            lambda: ArnComponents(
                service="sns",
                resource=self.physical_name or "",
                arn_format=ArnFormat.NO_RESOURCE_NAME,
            ),
        )

    @property
    def resource_name(self) -> str:
        return self.topic_name

    @property
    def resource_arn(self) -> str:
        return self.topic_arn
