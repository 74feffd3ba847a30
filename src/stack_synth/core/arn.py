"""ARN composition and parsing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stack_synth.tokens.registry import contains_token_marker


class ArnFormat(str, Enum):
    """How the resource name is attached to the resource type in an ARN."""

    NO_RESOURCE_NAME = "none"  # arn:aws:sqs:us-east-1:111111111111:my-queue
    COLON_RESOURCE_NAME = "colon"  # arn:aws:logs:us-east-1:111111111111:log-group:name
    SLASH_RESOURCE_NAME = "slash"  # arn:aws:iam::111111111111:role/name


@dataclass(frozen=True, slots=True)
class ArnComponents:
    """The parts of an ARN.

    ``partition``, ``region`` and ``account`` default to the owning stack's
    values when ``None``. Use ``""`` for services whose ARNs omit them (S3).
    """

    service: str
    resource: str
    resource_name: str | None = None
    partition: str | None = None
    region: str | None = None
    account: str | None = None
    arn_format: ArnFormat = ArnFormat.SLASH_RESOURCE_NAME


def format_arn(components: ArnComponents, *, partition: str, region: str, account: str) -> str:
    """Build an ARN string. Components may be encoded tokens.

    Raises:
        ValueError: If a resource name is given for ``ArnFormat.NO_RESOURCE_NAME``.
    """
    body = components.resource
    if components.resource_name is not None:
        if components.arn_format is ArnFormat.NO_RESOURCE_NAME:
            raise ValueError("resource_name cannot be used with ArnFormat.NO_RESOURCE_NAME")
        sep = ":" if components.arn_format is ArnFormat.COLON_RESOURCE_NAME else "/"
        body = f"{body}{sep}{components.resource_name}"

    return ":".join(
        [
            "arn",
            components.partition if components.partition is not None else partition,
            components.service,
            components.region if components.region is not None else region,
            components.account if components.account is not None else account,
            body,
        ]
    )


def parse_arn(arn: str, arn_format: ArnFormat | None = None) -> ArnComponents:
    """Split a concrete ARN into its components.

    When *arn_format* is omitted it is inferred from the first ``/`` or ``:``
    in the resource part.

    Raises:
        ValueError: If *arn* contains tokens or is not a well-formed ARN.
    """
    if contains_token_marker(arn):
        raise ValueError(f"Cannot parse an ARN containing unresolved tokens: {arn!r}")

    parts = arn.split(":", 5)
    if len(parts) != 6 or parts[0] != "arn" or not parts[1] or not parts[2]:
        raise ValueError(f"Malformed ARN: {arn!r}")
    _, partition, service, region, account, body = parts

    if arn_format is None:
        slash, colon = body.find("/"), body.find(":")
        if slash == -1 and colon == -1:
            arn_format = ArnFormat.NO_RESOURCE_NAME
        elif colon == -1 or (slash != -1 and slash < colon):
            arn_format = ArnFormat.SLASH_RESOURCE_NAME
        else:
            arn_format = ArnFormat.COLON_RESOURCE_NAME

    resource, resource_name = body, None
    if arn_format is not ArnFormat.NO_RESOURCE_NAME:
        sep = ":" if arn_format is ArnFormat.COLON_RESOURCE_NAME else "/"
        resource, found, name = body.partition(sep)
        resource_name = name if found else None

    if not resource:
        raise ValueError(f"Malformed ARN, missing resource: {arn!r}")

    return ArnComponents(
        service=service,
        resource=resource,
        resource_name=resource_name,
        partition=partition,
        region=region,
        account=account,
        arn_format=arn_format,
    )
