"""Graph algorithms over module dependency graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from graph.builder import DependencyGraph


class _TarjanState:
    """Mutable state container for Tarjan's SCC algorithm."""

    def __init__(self) -> None:
        self.index = 0
        self.indices: dict[str, int] = {}
        self.low_link: dict[str, int] = {}
        self.on_stack: set[str] = set()
        self.stack: list[str] = []
        self.sccs: list[list[str]] = []


def _extract_scc(state: _TarjanState, root: str) -> list[str]:
    """Extract a strongly connected component from the stack."""
    scc: list[str] = []
    while state.stack:
        w = state.stack.pop()
        state.on_stack.remove(w)
        scc.append(w)
        if w == root:
            break
    if root not in scc:
        msg = (
            f"Tarjan algorithm invariant violated: root node {root!r} "
            "not found in stack during SCC extraction."
        )
        raise RuntimeError(msg)
    return scc


def _visit(node: str, state: _TarjanState) -> None:
    state.indices[node] = state.index
    state.low_link[node] = state.index
    state.index += 1
    state.stack.append(node)
    state.on_stack.add(node)


def _strongconnect(root: str, graph: dict[str, set[str]], state: _TarjanState) -> None:
    """Process every node reachable from ``root`` in Tarjan's algorithm.

    Uses an explicit stack of (node, neighbour iterator) frames instead of
    recursion, so chain depth is not bounded by the interpreter.
    """
    _visit(root, state)
    frames: list[tuple[str, Iterator[str]]] = [
        (root, iter(sorted(graph.get(root, set()))))
    ]

    while frames:
        node, neighbors = frames[-1]
        descended = False
        for neighbor in neighbors:
            if neighbor not in state.indices:
                _visit(neighbor, state)
                frames.append((neighbor, iter(sorted(graph.get(neighbor, set())))))
                descended = True
                break
            if neighbor in state.on_stack:
                state.low_link[node] = min(
                    state.low_link[node], state.indices[neighbor]
                )
        if descended:
            continue

        frames.pop()
        if state.low_link[node] == state.indices[node]:
            state.sccs.append(sorted(_extract_scc(state, node)))
        if frames:
            parent = frames[-1][0]
            state.low_link[parent] = min(state.low_link[parent], state.low_link[node])


def strongly_connected_components(graph: dict[str, set[str]]) -> list[list[str]]:
    """Compute every strongly connected component, singletons included.

    Nodes are visited in ascending order so the result is reproducible.
    Components come back in reverse topological order: a component is
    listed after every component reachable from it. Members are sorted.
    """
    state = _TarjanState()

    for node in sorted(graph):
        if node not in state.indices:
            _strongconnect(node, graph, state)

    return state.sccs


def _shortest_path(
    start: str,
    goals: set[str],
    graph: dict[str, set[str]],
    members: set[str],
) -> list[str]:
    """Breadth-first path from ``start`` to the nearest node in ``goals``.

    Stays inside ``members``. Among equally near goals the lowest identity
    wins. The returned path excludes ``start`` and ends at the goal, which
    may be ``start`` itself.
    """
    parents: dict[str, str] = {}
    visited = {start}
    frontier = [start]
    while frontier:
        goal_parents: dict[str, str] = {}
        next_frontier: list[str] = []
        for node in frontier:
            for neighbor in sorted(graph.get(node, set()) & members):
                if neighbor in goals:
                    goal_parents.setdefault(neighbor, node)
                if neighbor not in visited:
                    visited.add(neighbor)
                    parents[neighbor] = node
                    next_frontier.append(neighbor)
        if goal_parents:
            goal = min(goal_parents)
            path = [goal]
            step = goal_parents[goal]
            while step != start:
                path.append(step)
                step = parents[step]
            path.reverse()
            return path
        frontier = next_frontier

    msg = f"No path from {start!r} inside its strongly connected component"
    raise RuntimeError(msg)


def representative_walk(component: list[str], graph: dict[str, set[str]]) -> list[str]:
    """Return a closed walk through every node of a strongly connected component.

    The walk starts at the lowest identity, repeatedly moves to the nearest
    unvisited member, then heads back to the start. The closing return to
    the start is not repeated in the result, but intermediate nodes may
    appear more than once when the component forces it.
    """
    members = set(component)
    start = min(component)
    if len(component) == 1:
        return [start]

    walk = [start]
    unvisited = members - {start}
    current = start
    while unvisited:
        path = _shortest_path(current, unvisited, graph, members)
        walk.extend(path)
        current = path[-1]
        unvisited.difference_update(path)

    if start not in graph.get(current, set()):
        walk.extend(_shortest_path(current, {start}, graph, members)[:-1])
    return walk


def find_cycles(dependency_graph: DependencyGraph) -> list[list[str]]:
    """Find circular dependencies, one entry per cyclic component.

    Every strongly connected component with two or more modules, and every
    module that depends on itself, yields one closed walk. Cycles are
    ordered by their first (lowest) identity.

    Args:
        dependency_graph: Graph to analyze

    Returns:
        List of cycles, where each cycle is a list of module identities
    """
    graph = dependency_graph.adjacency
    cycles: list[list[str]] = []
    for component in strongly_connected_components(graph):
        node = component[0]
        if len(component) > 1 or node in graph[node]:
            cycles.append(representative_walk(component, graph))
    cycles.sort(key=lambda cycle: cycle[0])
    return cycles


def enumerate_elementary_cycles(
    dependency_graph: DependencyGraph,
    *,
    max_length: int = 8,
    max_cycles: int = 1000,
) -> list[list[str]]:
    """List elementary cycles of at most ``max_length`` modules.

    Each cycle is rooted at its lowest identity and found exactly once by
    only extending paths through higher identities of the same component.
    Worst-case cost grows exponentially with ``max_length``; the search
    stops once ``max_cycles`` cycles are collected.
    """
    graph = dependency_graph.adjacency
    cycles: list[list[str]] = []

    components = sorted(strongly_connected_components(graph), key=lambda c: c[0])
    for component in components:
        members = set(component)
        for root in component:
            if len(cycles) >= max_cycles:
                return cycles
            if root in graph[root]:
                cycles.append([root])
            if len(component) == 1:
                continue

            path = [root]
            on_path = {root}
            iterators = [iter(sorted(graph[root] & members))]
            while iterators:
                advanced = False
                for neighbor in iterators[-1]:
                    if neighbor == root and len(path) > 1:
                        cycles.append(list(path))
                        if len(cycles) >= max_cycles:
                            return cycles
                    elif (
                        neighbor > root
                        and neighbor not in on_path
                        and len(path) < max_length
                    ):
                        path.append(neighbor)
                        on_path.add(neighbor)
                        iterators.append(iter(sorted(graph[neighbor] & members)))
                        advanced = True
                        break
                if not advanced:
                    iterators.pop()
                    on_path.discard(path.pop())

    return cycles


def condensation_depth(dependency_graph: DependencyGraph) -> int:
    """Longest path (in edges) through the acyclic condensation of the graph.

    Each strongly connected component collapses to one node, so cycles
    never make the depth unbounded.
    """
    graph = dependency_graph.adjacency
    components = strongly_connected_components(graph)

    component_of: dict[str, int] = {}
    for position, component in enumerate(components):
        for node in component:
            component_of[node] = position

    # Reverse topological order: successors are settled before predecessors.
    depth: list[int] = [0] * len(components)
    for position, component in enumerate(components):
        best = 0
        for node in component:
            for neighbor in graph[node]:
                target = component_of[neighbor]
                if target != position:
                    best = max(best, depth[target] + 1)
        depth[position] = best

    return max(depth, default=0)


__all__ = [
    "_TarjanState",
    "_extract_scc",
    "_strongconnect",
    "condensation_depth",
    "enumerate_elementary_cycles",
    "find_cycles",
    "representative_walk",
    "strongly_connected_components",
]
