from __future__ import annotations

from contract.models import ModuleKind, ModuleRecord
from graph.algos import (
    condensation_depth,
    enumerate_elementary_cycles,
    find_cycles,
    representative_walk,
    strongly_connected_components,
)
from graph.builder import DependencyGraph, build_graph
from graph.registry import ModuleRegistry


def _graph(adjacency: dict[str, list[str]]) -> DependencyGraph:
    registry = ModuleRegistry(
        [
            ModuleRecord(
                identity=name,
                origin_path=f"{name}.ts",
                kind=ModuleKind.UNKNOWN,
                declared_dependencies=deps,
            )
            for name, deps in adjacency.items()
        ]
    )
    return build_graph(registry)


def _assert_closed_walk(walk: list[str], graph: DependencyGraph) -> None:
    adjacency = graph.adjacency
    for source, target in zip(walk, [*walk[1:], walk[0]]):
        assert target in adjacency[source], f"{source} -> {target} is not an edge"


def test_find_cycles_two_node_cycle() -> None:
    graph = _graph({"B": ["A"], "A": ["B"]})

    assert find_cycles(graph) == [["A", "B"]]


def test_find_cycles_self_loop_is_a_length_one_cycle() -> None:
    graph = _graph({"A": ["A", "B"], "B": []})

    assert find_cycles(graph) == [["A"]]


def test_find_cycles_acyclic_graph_has_no_cycles() -> None:
    graph = _graph({"A": ["B", "C"], "B": ["C"], "C": []})

    assert find_cycles(graph) == []


def test_find_cycles_one_entry_per_component_sorted_by_lowest_identity() -> None:
    graph = _graph(
        {
            "Z": ["Y"],
            "Y": ["Z"],
            "C": ["D"],
            "D": ["E"],
            "E": ["C", "Y"],
            "M": ["M"],
        }
    )

    cycles = find_cycles(graph)

    assert [cycle[0] for cycle in cycles] == ["C", "M", "Y"]
    assert cycles[0] == ["C", "D", "E"]
    for cycle in cycles:
        _assert_closed_walk(cycle, graph)


def test_find_cycles_membership_matches_components() -> None:
    graph = _graph(
        {
            "A": ["B"],
            "B": ["C", "D"],
            "C": ["A"],
            "D": ["E"],
            "E": [],
            "F": ["F"],
        }
    )

    members = {node for cycle in find_cycles(graph) for node in cycle}

    assert members == {"A", "B", "C", "F"}


def test_representative_walk_revisits_hub_when_component_requires_it() -> None:
    # Star: every spoke only connects through the hub.
    adjacency = {
        "A": {"Hub"},
        "B": {"Hub"},
        "C": {"Hub"},
        "Hub": {"A", "B", "C"},
    }

    walk = representative_walk(["A", "B", "C", "Hub"], adjacency)

    assert walk == ["A", "Hub", "B", "Hub", "C", "Hub"]
    assert set(walk) == set(adjacency)


def test_representative_walk_returns_to_start_through_component() -> None:
    adjacency = {"A": {"B"}, "B": {"C"}, "C": {"D"}, "D": {"B", "A"}}
    # A -> B -> C -> D -> A already closes.
    assert representative_walk(["A", "B", "C", "D"], adjacency) == ["A", "B", "C", "D"]

    adjacency = {"A": {"B", "C"}, "B": {"A"}, "C": {"B"}}
    # After visiting B and C the walk must go back through B.
    assert representative_walk(["A", "B", "C"], adjacency) == ["A", "B", "A", "C", "B"]


def test_find_cycles_is_deterministic_regardless_of_input_order() -> None:
    forward = _graph({"A": ["B"], "B": ["C"], "C": ["A", "B"]})
    backward = _graph({"C": ["B", "A"], "B": ["C"], "A": ["B"]})

    assert find_cycles(forward) == find_cycles(backward)


def test_strongly_connected_components_are_reverse_topological() -> None:
    adjacency = {"A": {"B"}, "B": {"C"}, "C": {"B"}, "D": set()}

    components = strongly_connected_components(adjacency)

    assert components == [["B", "C"], ["A"], ["D"]]


def test_enumerate_elementary_cycles_lists_every_cycle_once() -> None:
    graph = _graph({"A": ["B", "C"], "B": ["A", "C"], "C": ["A"], "D": ["D"]})

    cycles = enumerate_elementary_cycles(graph)

    assert cycles == [["A", "B"], ["A", "B", "C"], ["A", "C"], ["D"]]


def test_enumerate_elementary_cycles_respects_bounds() -> None:
    graph = _graph({"A": ["B", "C"], "B": ["A", "C"], "C": ["A"]})

    assert enumerate_elementary_cycles(graph, max_length=2) == [["A", "B"], ["A", "C"]]
    assert enumerate_elementary_cycles(graph, max_cycles=1) == [["A", "B"]]


def test_condensation_depth_collapses_cycles() -> None:
    chain = _graph({"A": ["B"], "B": ["C"], "C": ["D"], "D": []})
    cyclic = _graph({"A": ["B"], "B": ["C"], "C": ["B", "D"], "D": []})
    looped = _graph({"A": ["A"]})

    assert condensation_depth(chain) == 3
    assert condensation_depth(cyclic) == 2
    assert condensation_depth(looped) == 0
    assert condensation_depth(_graph({})) == 0
