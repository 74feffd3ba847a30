"""SQS queue resource."""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Self

from pydantic import Field, model_validator

from stack_synth.core.arn import ArnComponents, ArnFormat
from stack_synth.core.resource import Resource
from stack_synth.resources.base import ResourceProps
from stack_synth.resources.markers import CfnProperty
from stack_synth.tokens.intrinsics import get_att


class QueueProps(ResourceProps):
    """Properties of an ``AWS::SQS::Queue``."""

    visibility_timeout: Annotated[int | None, CfnProperty("VisibilityTimeout")] = Field(
        default=None, ge=0, le=43200
    )
    retention_period: Annotated[int | None, CfnProperty("MessageRetentionPeriod")] = Field(
        default=None, ge=60, le=1209600
    )
    fifo: Annotated[bool | None, CfnProperty("FifoQueue")] = None
    dead_letter_target_arn: Annotated[
        str | None, CfnProperty("RedrivePolicy.deadLetterTargetArn")
    ] = Field(default=None, min_length=1)
    max_receive_count: Annotated[int | None, CfnProperty("RedrivePolicy.maxReceiveCount")] = (
        Field(default=None, ge=1)
    )

    @model_validator(mode="after")
    def _check_redrive(self) -> Self:
        if (self.dead_letter_target_arn is None) != (self.max_receive_count is None):
            raise ValueError(
                "'dead_letter_target_arn' and 'max_receive_count' must be set together"
            )
        return self


class Queue(Resource):
    """An SQS queue. ``queue_url`` is always the native ``Ref``."""

    cfn_type: ClassVar[str] = "AWS::SQS::Queue"
    yaml_alias: ClassVar[str] = "queue"
    props_model: ClassVar[type[QueueProps]] = QueueProps
    name_property: ClassVar[str] = "QueueName"

    def __init__(self, scope: Any, id: str, **kwargs: Any) -> None:  # noqa: A002
        super().__init__(scope, id, **kwargs)
        self.queue_url = self.ref
        self.queue_name = self._resource_name_attribute(get_att(self.logical_id, "QueueName"))
        self.queue_arn = self._resource_arn_attribute(
            get_att(self.logical_id, "Arn"),
            lambda: ArnComponents(
                service="sqs",
                resource=self.physical_name or "",
                arn_format=ArnFormat.NO_RESOURCE_NAME,
            ),
        )

    @property
    def resource_name(self) -> str:
        return self.queue_name

    @property
    def resource_arn(self) -> str:
        return self.queue_arn

    def attribute(self, name: str) -> str:
        if name == "url":
            return self.queue_url
        return super().attribute(name)

