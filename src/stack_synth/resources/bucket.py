"""S3 bucket resource."""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal, Self

from pydantic import Field, model_validator

from stack_synth.core.arn import ArnComponents, ArnFormat
from stack_synth.core.resource import Resource
from stack_synth.resources.base import ResourceProps
from stack_synth.resources.markers import CfnProperty
from stack_synth.tokens.intrinsics import get_att, ref


class BucketProps(ResourceProps):
    """Properties of an ``AWS::S3::Bucket``."""

    versioning: Annotated[
        Literal["Enabled", "Suspended"] | None, CfnProperty("VersioningConfiguration.Status")
    ] = None
    index_document: Annotated[str | None, CfnProperty("WebsiteConfiguration.IndexDocument")] = (
        Field(default=None, min_length=1)
    )
    error_document: Annotated[str | None, CfnProperty("WebsiteConfiguration.ErrorDocument")] = (
        Field(default=None, min_length=1)
    )

    @model_validator(mode="after")
    def _check_website(self) -> Self:
        if self.error_document is not None and self.index_document is None:
            raise ValueError("'error_document' requires 'index_document'")
        return self


class Bucket(Resource):
    """An S3 bucket.

    ``bucket_name`` resolves to ``Ref`` locally and to the physical name from
    other environments; ``bucket_arn`` to ``Fn::GetAtt Arn`` locally and to
    ``arn:<partition>:s3:::<name>`` from other environments.
    """

    cfn_type: ClassVar[str] = "AWS::S3::Bucket"
    yaml_alias: ClassVar[str] = "bucket"
    props_model: ClassVar[type[BucketProps]] = BucketProps
    name_property: ClassVar[str] = "BucketName"

    def __init__(self, scope: Any, id: str, **kwargs: Any) -> None:  # noqa: A002
        super().__init__(scope, id, **kwargs)
        self.bucket_name = self._resource_name_attribute(ref(self.logical_id))
        self.bucket_arn = self._resource_arn_attribute(
            get_att(self.logical_id, "Arn"),
            lambda: ArnComponents(
                service="s3",
                resource=self.physical_name or "",
                region="",
                account="",
                arn_format=ArnFormat.NO_RESOURCE_NAME,
            ),
        )

    @property
    def resource_name(self) -> str:
        return self.bucket_name

    @property
    def resource_arn(self) -> str:
        return self.bucket_arn

    def arn_for_objects(self, key_pattern: str) -> str:
        """ARN for objects in this bucket, e.g. ``arn_for_objects("logs/*")``."""
        return f"{self.bucket_arn}/{key_pattern}"
