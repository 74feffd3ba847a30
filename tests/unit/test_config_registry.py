"""Tests for the default resource type registry factory."""

from __future__ import annotations

from stack_synth.config.registry import default_registry
from stack_synth.config.schema import BucketEntry, QueueEntry, TopicEntry
from stack_synth.resources import Bucket, Queue, Topic


class TestDefaultRegistry:
    def test_builtin_types_registered(self) -> None:
        registry = default_registry()
        assert registry.get("bucket").construct is Bucket
        assert registry.get("queue").construct is Queue
        assert registry.get("topic").construct is Topic

    def test_aliases(self) -> None:
        assert default_registry().aliases() == ["bucket", "queue", "topic"]

    def test_config_entries_match_registered_types(self) -> None:
        registry = default_registry()
        for entry in (BucketEntry, QueueEntry, TopicEntry):
            alias = entry.model_fields["type"].default
            assert issubclass(entry, registry.get(alias).props_model)

    def test_fresh_registry_per_call(self) -> None:
        assert default_registry() is not default_registry()
