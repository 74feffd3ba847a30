"""Tests for the physical-name lifecycle and deterministic name generation."""

from __future__ import annotations

import pytest

from stack_synth.core import (
    PhysicalName,
    PhysicalNameLifecycle,
    PhysicalNameState,
    enable_cross_environment,
    generate_physical_name,
)
from stack_synth.errors import (
    ConflictingPhysicalNameError,
    CrossEnvironmentError,
    PhysicalNameGenerationError,
)
from stack_synth.tokens import Constant, TokenRegistry

_PATH = "Producer/Data"


def _lifecycle(value: str | None, registry: TokenRegistry) -> PhysicalNameLifecycle:
    return PhysicalNameLifecycle.from_input(value, path=_PATH, registry=registry)


def _generate(registry: TokenRegistry, **overrides: str) -> str:
    kwargs = {
        "path": _PATH,
        "stack_name": "Producer",
        "unique_id": "ProducerDataA1B2C3D4",
        "region": "us-east-1",
        "account": "111111111111",
    }
    kwargs.update(overrides)
    return generate_physical_name(registry=registry, **kwargs)


class TestFromInput:
    def test_none_is_unset(self, registry: TokenRegistry) -> None:
        lc = _lifecycle(None, registry)
        assert lc.state is PhysicalNameState.UNSET
        assert lc.name is None
        assert not lc.allow_cross_environment

    def test_marker_is_deferred(self, registry: TokenRegistry) -> None:
        lc = _lifecycle(PhysicalName.GENERATE_IF_NEEDED, registry)
        assert lc.state is PhysicalNameState.DEFERRED_IF_NEEDED
        assert lc.name is None
        assert lc.allow_cross_environment

    def test_concrete_is_explicit(self, registry: TokenRegistry) -> None:
        lc = _lifecycle("my-bucket", registry)
        assert lc.state is PhysicalNameState.EXPLICIT
        assert lc.name == "my-bucket"
        assert lc.allow_cross_environment

    def test_tokenized_name_is_unset(self, registry: TokenRegistry) -> None:
        value = f"prefix-{registry.encode(Constant('x'))}"
        lc = _lifecycle(value, registry)
        assert lc.state is PhysicalNameState.UNSET
        assert lc.name == value
        assert not lc.allow_cross_environment

    def test_embedded_marker_conflicts(self, registry: TokenRegistry) -> None:
        with pytest.raises(ConflictingPhysicalNameError, match=_PATH):
            _lifecycle(f"prefix-{PhysicalName.GENERATE_IF_NEEDED}", registry)


class TestEnableCrossEnvironment:
    def test_unset_fails(self, registry: TokenRegistry) -> None:
        result = enable_cross_environment(
            _lifecycle(None, registry), path=_PATH, generate=lambda: "unused"
        )
        assert not result.ok
        assert result.lifecycle is None
        assert isinstance(result.error, CrossEnvironmentError)
        assert _PATH in str(result.error)
        assert "GENERATE_IF_NEEDED" in str(result.error)

    def test_deferred_generates(self, registry: TokenRegistry) -> None:
        result = enable_cross_environment(
            _lifecycle(PhysicalName.GENERATE_IF_NEEDED, registry),
            path=_PATH,
            generate=lambda: "generated-name",
        )
        assert result.ok
        assert result.lifecycle == PhysicalNameLifecycle(
            PhysicalNameState.GENERATED, "generated-name", allow_cross_environment=True
        )

    def test_generated_is_stable(self, registry: TokenRegistry) -> None:
        calls: list[str] = []

        def generate() -> str:
            calls.append("x")
            return f"name-{len(calls)}"

        first = enable_cross_environment(
            _lifecycle(PhysicalName.GENERATE_IF_NEEDED, registry), path=_PATH, generate=generate
        )
        assert first.lifecycle is not None
        second = enable_cross_environment(first.lifecycle, path=_PATH, generate=generate)
        assert second.lifecycle == first.lifecycle
        assert calls == ["x"]

    def test_explicit_unchanged(self, registry: TokenRegistry) -> None:
        lc = _lifecycle("my-bucket", registry)
        result = enable_cross_environment(lc, path=_PATH, generate=lambda: "unused")
        assert result.lifecycle is lc

    def test_generation_failure_is_returned(self, registry: TokenRegistry) -> None:
        def generate() -> str:
            raise PhysicalNameGenerationError(_PATH, "the region is unresolved or missing")

        result = enable_cross_environment(
            _lifecycle(PhysicalName.GENERATE_IF_NEEDED, registry), path=_PATH, generate=generate
        )
        assert isinstance(result.error, PhysicalNameGenerationError)

    def test_unwrap(self, registry: TokenRegistry) -> None:
        lc = _lifecycle("my-bucket", registry)
        assert enable_cross_environment(lc, path=_PATH, generate=lambda: "unused").unwrap() is lc

        failed = enable_cross_environment(
            _lifecycle(None, registry), path=_PATH, generate=lambda: "unused"
        )
        with pytest.raises(CrossEnvironmentError, match=_PATH):
            failed.unwrap()


class TestGeneratePhysicalName:
    def test_format(self, registry: TokenRegistry) -> None:
        name = _generate(registry)
        assert name == name.lower()
        assert name.startswith("producer" + "producerdataa1b2c3d4")
        assert len(name) == len("Producer") + len("ProducerDataA1B2C3D4") + 12

    def test_long_parts_truncated(self, registry: TokenRegistry) -> None:
        name = _generate(registry, stack_name="S" * 40, unique_id="U" * 10 + "V" * 24)
        assert name.startswith("s" * 25 + "v" * 24)
        assert len(name) == 25 + 24 + 12

    def test_deterministic_across_registries(self) -> None:
        assert _generate(TokenRegistry()) == _generate(TokenRegistry())

    @pytest.mark.parametrize(
        "override",
        [{"region": "eu-west-1"}, {"account": "222222222222"}, {"stack_name": "Other"}],
    )
    def test_inputs_change_hash(self, registry: TokenRegistry, override: dict[str, str]) -> None:
        assert _generate(registry)[-12:] != _generate(registry, **override)[-12:]

    def test_unresolved_region(self, registry: TokenRegistry) -> None:
        with pytest.raises(PhysicalNameGenerationError, match="region"):
            _generate(registry, region=registry.encode(Constant("x")))

    def test_missing_account(self, registry: TokenRegistry) -> None:
        with pytest.raises(PhysicalNameGenerationError, match="account"):
            _generate(registry, account="")
