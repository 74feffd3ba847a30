import pytest

from stack_synth.errors import DependencyCycleError
from stack_synth.synth.graph import DependencyGraph


def test_topological_order_deterministic() -> None:
    graph = DependencyGraph(nodes=["a", "b", "c"], dependencies={"b": ["a"], "c": ["a"]})
    assert graph.topological_order() == ["a", "b", "c"]


def test_dependencies_override_lexicographic_order() -> None:
    graph = DependencyGraph(
        nodes=["Consumer", "Producer"], dependencies={"Consumer": ["Producer"]}
    )
    assert graph.topological_order() == ["Producer", "Consumer"]


def test_topological_order_ignores_external_deps() -> None:
    graph = DependencyGraph(nodes=["a", "b"], dependencies={"b": ["external"]})
    assert graph.topological_order() == ["a", "b"]


def test_cycle_detection() -> None:
    graph = DependencyGraph(nodes=["a", "b", "c"], dependencies={"a": ["b"], "b": ["a"]})
    with pytest.raises(DependencyCycleError) as exc_info:
        graph.topological_order()
    assert exc_info.value.names == ["a", "b"]


def test_priority_ordering() -> None:
    """Nodes with lower priority come first when no deps constrain order."""
    graph = DependencyGraph(
        nodes=["high", "low"],
        dependencies={},
        priorities={"high": 100, "low": 0},
    )
    assert graph.topological_order() == ["low", "high"]
