"""Tests for building and synthesizing apps from YAML configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from stack_synth.config import build, save, synth
from stack_synth.core import PhysicalNameState
from stack_synth.errors import CrossEnvironmentError
from stack_synth.resources import Bucket, Queue

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from stack_synth.config.schema import Config
    from stack_synth.synth import CloudAssembly


def _properties(assembly: CloudAssembly, stack: str, logical_id: str) -> dict[str, Any]:
    return assembly.get_stack(stack).template["Resources"][logical_id]["Properties"]


def _tags(assembly: CloudAssembly, stack: str, logical_id: str) -> dict[str, Any]:
    return {t["Key"]: t["Value"] for t in _properties(assembly, stack, logical_id)["Tags"]}


_SAME_ENV = """\
settings:
  default_account: "111111111111"
  default_region: us-east-1

stacks:
  - name: Consumer
    resources:
      - type: queue
        id: Jobs
        tags:
          source: ${ref:Producer/Data.arn}
  - name: Producer
    resources:
      - type: bucket
        id: Data
"""

_CROSS_ENV = """\
stacks:
  - name: Producer
    account: "111111111111"
    region: us-east-1
    resources:
      - type: bucket
        id: Data
        physical_name: GENERATE_IF_NEEDED
  - name: Consumer
    account: "222222222222"
    region: eu-west-1
    resources:
      - type: topic
        id: Events
        tags:
          bucket: ${ref:Producer/Data.name}
"""


class TestBuild:
    def test_stacks_and_resources(self, make_config: Callable[..., Config]) -> None:
        app = build(make_config(_SAME_ENV))

        assert [s.stack_name for s in app.stacks] == ["Consumer", "Producer"]
        producer = app.find("Producer")
        assert producer is not None
        assert producer.account == "111111111111"
        assert producer.region == "us-east-1"
        data = app.find("Producer/Data")
        assert isinstance(data, Bucket)
        assert isinstance(app.find("Consumer/Jobs"), Queue)

    def test_generate_if_needed(self, make_config: Callable[..., Config]) -> None:
        app = build(make_config(_CROSS_ENV))
        data = app.find("Producer/Data")
        assert isinstance(data, Bucket)
        assert data.physical_name_state is PhysicalNameState.DEFERRED_IF_NEEDED

    def test_resource_environment_override(self, make_config: Callable[..., Config]) -> None:
        yaml = (
            "stacks:\n  - name: A\n    account: '111111111111'\n    region: us-east-1\n"
            "    resources:\n      - type: queue\n        id: Q\n        region: eu-west-1\n"
        )
        queue = build(make_config(yaml)).find("A/Q")
        assert isinstance(queue, Queue)
        assert queue.env.account == "111111111111"
        assert queue.env.region == "eu-west-1"


class TestReferences:
    def test_same_stack_forward_reference(self, make_config: Callable[..., Config]) -> None:
        yaml = (
            "stacks:\n  - name: A\n    resources:\n"
            "      - type: queue\n        id: Jobs\n"
            "        dead_letter_target_arn: ${ref:A/Dead.arn}\n        max_receive_count: 3\n"
            "      - type: queue\n        id: Dead\n"
        )
        assembly = synth(make_config(yaml))
        assert _properties(assembly, "A", "Jobs")["RedrivePolicy"] == {
            "deadLetterTargetArn": {"Fn::GetAtt": ["Dead", "Arn"]},
            "maxReceiveCount": 3,
        }

    def test_reference_in_mixed_string(self, make_config: Callable[..., Config]) -> None:
        yaml = (
            "stacks:\n  - name: A\n    resources:\n"
            "      - type: bucket\n        id: Data\n"
            "      - type: queue\n        id: Jobs\n"
            "        tags:\n          path: s3://${ref:A/Data.name}/logs\n"
        )
        assembly = synth(make_config(yaml))
        assert _tags(assembly, "A", "Jobs") == {
            "path": {"Fn::Join": ["", ["s3://", {"Ref": "Data"}, "/logs"]]}
        }

    def test_same_environment_cross_stack(self, make_config: Callable[..., Config]) -> None:
        assembly = synth(make_config(_SAME_ENV))

        assert assembly.stack_names == ["Producer", "Consumer"]
        assert assembly.get_stack("Consumer").dependencies == ["Producer"]
        assert _tags(assembly, "Consumer", "Jobs") == {
            "source": {"Fn::ImportValue": "Producer:DataArn"}
        }
        outputs = assembly.get_stack("Producer").template["Outputs"]
        assert [o["Export"]["Name"] for o in outputs.values()] == ["Producer:DataArn"]

    def test_cross_environment(self, make_config: Callable[..., Config]) -> None:
        assembly = synth(make_config(_CROSS_ENV))

        generated = _properties(assembly, "Producer", "Data")["BucketName"]
        assert generated.startswith("producer")
        assert generated == generated.lower()
        assert _tags(assembly, "Consumer", "Events") == {"bucket": generated}
        assert assembly.get_stack("Consumer").dependencies == []

    def test_cross_environment_without_name(self, make_config: Callable[..., Config]) -> None:
        yaml = _CROSS_ENV.replace("        physical_name: GENERATE_IF_NEEDED\n", "")
        with pytest.raises(CrossEnvironmentError, match="Producer/Data"):
            synth(make_config(yaml))


class TestDependsOn:
    def test_same_stack(self, make_config: Callable[..., Config]) -> None:
        yaml = (
            "stacks:\n  - name: A\n    resources:\n"
            "      - type: bucket\n        id: Data\n"
            "      - type: queue\n        id: Jobs\n        depends_on: [Data]\n"
        )
        assembly = synth(make_config(yaml))
        resource = assembly.get_stack("A").template["Resources"]["Jobs"]
        assert resource["DependsOn"] == ["Data"]

    def test_other_stack(self, make_config: Callable[..., Config]) -> None:
        yaml = (
            "stacks:\n  - name: B\n    resources:\n"
            "      - type: queue\n        id: Jobs\n        depends_on: [A/Data]\n"
            "  - name: A\n    resources:\n"
            "      - type: bucket\n        id: Data\n"
        )
        assembly = synth(make_config(yaml))
        assert assembly.stack_names == ["A", "B"]
        assert "DependsOn" not in assembly.get_stack("B").template["Resources"]["Jobs"]
        assert assembly.get_stack("B").dependencies == ["A"]


class TestSave:
    def test_default_out_dir(self, make_config: Callable[..., Config], tmp_path: Path) -> None:
        config = make_config(_SAME_ENV)
        written = save(synth(config), config)
        assert {p.parent for p in written} == {tmp_path / "synth.out"}

    def test_explicit_out_dir(self, make_config: Callable[..., Config], tmp_path: Path) -> None:
        config = make_config(_SAME_ENV)
        save(synth(config), config, tmp_path / "elsewhere")
        assert (tmp_path / "elsewhere" / "manifest.json").is_file()
