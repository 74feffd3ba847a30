"""Tests for the construct tree, paths and unique ids."""

from __future__ import annotations

import hashlib

import pytest

from stack_synth.core import App, Construct, Stack, make_unique_id
from stack_synth.errors import ConstructError
from stack_synth.tokens import Constant


def _hash(path: str) -> str:
    return hashlib.md5(path.encode(), usedforsecurity=False).hexdigest()[:8].upper()


class TestMakeUniqueId:
    def test_single_component_kept(self) -> None:
        assert make_unique_id(["Bucket"]) == "Bucket"

    def test_single_component_non_alnum_removed(self) -> None:
        assert make_unique_id(["my-bucket"]) == "mybucket"

    def test_multiple_components_hashed(self) -> None:
        assert make_unique_id(["Group", "Bucket"]) == "GroupBucket" + _hash("Group/Bucket")

    def test_default_dropped_from_human_part(self) -> None:
        assert make_unique_id(["Group", "Default"]) == "Group" + _hash("Group/Default")

    def test_consecutive_duplicates_collapsed(self) -> None:
        assert make_unique_id(["A", "A", "B"]) == "AB" + _hash("A/A/B")

    def test_distinct_paths_distinct_ids(self) -> None:
        assert make_unique_id(["A", "BC"]) != make_unique_id(["AB", "C"])

    def test_empty_path(self) -> None:
        with pytest.raises(ValueError, match="empty path"):
            make_unique_id([])


class TestConstructTree:
    def test_paths(self, app: App) -> None:
        stack = Stack(app, "Producer")
        group = Construct(stack, "Group")
        assert app.path == ""
        assert stack.path == "Producer"
        assert group.path == "Producer/Group"
        assert group.root is app
        assert group.app is app

    def test_find(self, app: App) -> None:
        stack = Stack(app, "Producer")
        group = Construct(stack, "Group")
        assert app.find("Producer/Group") is group
        assert app.find("Producer/Missing") is None

    def test_walk_is_preorder(self, app: App) -> None:
        a = Stack(app, "A")
        a1 = Construct(a, "One")
        b = Stack(app, "B")
        assert list(app.walk()) == [app, a, a1, b]

    def test_duplicate_id(self, app: App) -> None:
        Stack(app, "Producer")
        with pytest.raises(ConstructError, match="already a construct with id 'Producer'"):
            Stack(app, "Producer")

    def test_id_with_separator(self, app: App) -> None:
        with pytest.raises(ConstructError, match="must not contain"):
            Stack(app, "a/b")

    def test_empty_id(self, app: App) -> None:
        stack = Stack(app, "Producer")
        with pytest.raises(ConstructError, match="non-empty"):
            Construct(stack, "")

    def test_detached_tree_has_no_app(self) -> None:
        root = Construct(None, "")
        child = Construct(root, "Child")
        with pytest.raises(ConstructError, match="not attached to an App"):
            _ = child.app

    def test_encode_uses_app_registry(self, app: App) -> None:
        stack = Stack(app, "Producer")
        marker = stack.encode(Constant("v"))
        assert app.registry.lookup(marker).value == "v"
