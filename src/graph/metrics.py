"""Architecture metrics over a classified registry and its graph."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from contract.models import ArchitectureMetrics, ModuleKind
from graph.algos import condensation_depth

if TYPE_CHECKING:
    from graph.builder import DependencyGraph
    from graph.registry import ModuleRegistry


def compute_fan_stats(
    edges: tuple[tuple[str, str], ...] | list[tuple[str, str]],
) -> tuple[dict[str, int], dict[str, int]]:
    """Compute fan-in and fan-out statistics from edges."""
    fan_in: dict[str, int] = {}
    fan_out: dict[str, int] = {}

    for source, target in edges:
        fan_out[source] = fan_out.get(source, 0) + 1
        fan_in[target] = fan_in.get(target, 0) + 1

    return fan_in, fan_out


def coupling_factor(edge_count: int, node_count: int) -> float:
    """Direct dependencies over all possible ordered module pairs."""
    if node_count <= 1:
        return 0.0
    return edge_count / (node_count * (node_count - 1))


def compute_metrics(
    registry: ModuleRegistry, graph: DependencyGraph
) -> ArchitectureMetrics:
    """Compute aggregate architecture metrics."""
    total = len(graph.nodes)
    per_kind = Counter(record.kind for record in registry)

    return ArchitectureMetrics(
        total_modules=total,
        core_modules=per_kind[ModuleKind.CORE],
        shared_modules=per_kind[ModuleKind.SHARED],
        feature_modules=per_kind[ModuleKind.FEATURE],
        average_dependencies_per_module=graph.edge_count / total if total else 0.0,
        max_dependency_depth=condensation_depth(graph),
        coupling_factor=coupling_factor(graph.edge_count, total),
    )


__all__ = ["compute_fan_stats", "compute_metrics", "coupling_factor"]
