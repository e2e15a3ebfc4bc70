"""Dependency graph construction from a module registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from graph.resolve import default_resolver

if TYPE_CHECKING:
    from collections.abc import Mapping

    from contract.models import ModuleKind
    from graph.registry import ModuleRegistry
    from graph.resolve import Resolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyGraph:
    """Immutable directed graph of module dependencies.

    ``nodes`` and ``edges`` keep registry and discovery order. ``external``
    holds, per node, the declared identifiers that matched no module.
    """

    nodes: tuple[str, ...]
    kinds: Mapping[str, ModuleKind]
    edges: tuple[tuple[str, str], ...]
    external: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def adjacency(self) -> dict[str, set[str]]:
        """Successor sets for every node (nodes without edges map to an empty set)."""
        successors: dict[str, set[str]] = {node: set() for node in self.nodes}
        for source, target in self.edges:
            successors[source].add(target)
        return successors

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def has_self_loop(self, node: str) -> bool:
        return (node, node) in self.edges


def build_graph(
    registry: ModuleRegistry,
    resolver: Resolver | None = None,
) -> DependencyGraph:
    """Build the dependency graph for a classified registry.

    Args:
        registry: Registry whose records all carry a resolved kind
        resolver: Identifier resolution strategy; defaults to exact then
            normalized matching

    Returns:
        DependencyGraph with one node per record and one edge per distinct
        resolved (from, to) pair
    """
    if resolver is None:
        resolver = default_resolver(registry)

    kinds: dict[str, ModuleKind] = {}
    edges: list[tuple[str, str]] = []
    seen_edges: set[tuple[str, str]] = set()
    external: dict[str, tuple[str, ...]] = {}

    for record in registry:
        if record.kind is None:
            msg = f"Module {record.identity!r} has not been classified"
            raise ValueError(msg)
        kinds[record.identity] = record.kind

        unresolved: list[str] = []
        for identifier in record.declared_dependencies:
            target = resolver.resolve(identifier, source=record.identity)
            if target is None:
                if identifier not in unresolved:
                    unresolved.append(identifier)
                continue
            edge = (record.identity, target)
            if edge not in seen_edges:
                seen_edges.add(edge)
                edges.append(edge)

        if unresolved:
            logger.debug(
                "%s: %d external dependencies (%s)",
                record.identity,
                len(unresolved),
                ", ".join(unresolved),
            )
        external[record.identity] = tuple(unresolved)

    graph = DependencyGraph(
        nodes=tuple(kinds),
        kinds=MappingProxyType(kinds),
        edges=tuple(edges),
        external=MappingProxyType(external),
    )
    logger.info(
        "Built dependency graph: %d modules, %d edges",
        len(graph.nodes),
        graph.edge_count,
    )
    return graph


__all__ = ["DependencyGraph", "build_graph"]
