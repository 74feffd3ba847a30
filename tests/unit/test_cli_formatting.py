"""Tests for CLI output formatting."""

from __future__ import annotations

from pathlib import Path

from stack_synth.cli.formatting import (
    format_stack_line,
    format_stack_list,
    format_synth_summary,
    styler,
)
from stack_synth.config.schema import Config, StackConfig, SynthSettings
from stack_synth.synth import CloudAssembly, StackArtifact


def _artifact(name: str, *, resources: int = 1, deps: list[str] | None = None) -> StackArtifact:
    return StackArtifact(
        stack_name=name,
        path=name,
        environment="aws://111111111111/us-east-1",
        dependencies=deps or [],
        template={"Resources": {f"R{i}": {"Type": "AWS::SQS::Queue"} for i in range(resources)}},
    )


class TestStyler:
    def test_passthrough_without_color(self) -> None:
        assert styler(False)("text", fg="red", bold=True) == "text"

    def test_styles_with_color(self) -> None:
        assert styler(True)("text", fg="red") != "text"


class TestFormatStackLine:
    def test_single_resource(self) -> None:
        line = format_stack_line(_artifact("A"), color=False)
        assert line == "A  aws://111111111111/us-east-1  [1 resource]"

    def test_dependencies(self) -> None:
        line = format_stack_line(_artifact("C", resources=2, deps=["A", "B"]), color=False)
        assert line == "C  aws://111111111111/us-east-1  [2 resources]  (depends on: A, B)"

    def test_empty_template(self) -> None:
        artifact = StackArtifact(stack_name="E", path="E", environment="aws://x/y", template={})
        assert format_stack_line(artifact, color=False).endswith("[0 resources]")


class TestFormatStackList:
    def test_empty(self) -> None:
        assert format_stack_list(Config(), color=False) == "No stacks declared."

    def test_environment_fallbacks(self) -> None:
        config = Config(
            settings=SynthSettings(default_region="us-east-1"),
            stacks=[StackConfig(name="A"), StackConfig(name="B", account="222222222222")],
        )
        assert format_stack_list(config, color=False).splitlines() == [
            "A  aws://unknown-account/us-east-1  [0 resources]",
            "B  aws://222222222222/us-east-1  [0 resources]",
        ]


class TestFormatSynthSummary:
    def test_plural(self) -> None:
        assembly = CloudAssembly(stacks=[_artifact("A"), _artifact("B")])
        summary = format_synth_summary(assembly, Path("out"), color=False)
        assert summary == "Synthesis complete! 2 stacks written to out."

    def test_singular(self) -> None:
        assembly = CloudAssembly(stacks=[_artifact("A")])
        summary = format_synth_summary(assembly, Path("out"), color=False)
        assert summary == "Synthesis complete! 1 stack written to out."
