"""Plain-text console rendering of an analysis report."""

from __future__ import annotations

from typing import TYPE_CHECKING

from contract.models import ModuleKind
from graph.metrics import compute_fan_stats

if TYPE_CHECKING:
    from contract.models import AnalysisReport
    from graph.builder import DependencyGraph

_KIND_ORDER = (
    ModuleKind.CORE,
    ModuleKind.SHARED,
    ModuleKind.FEATURE,
    ModuleKind.UNKNOWN,
)


def render_console(report: AnalysisReport, graph: DependencyGraph) -> str:
    metrics = report.metrics
    lines = [
        "=== Module Architecture Report ===",
        "",
        "Architecture Metrics",
        f"  Total Modules: {metrics.total_modules}",
        f"  Core Modules: {metrics.core_modules}",
        f"  Shared Modules: {metrics.shared_modules}",
        f"  Feature Modules: {metrics.feature_modules}",
        "  Average Dependencies per Module: "
        f"{metrics.average_dependencies_per_module:.2f}",
        f"  Max Dependency Depth: {metrics.max_dependency_depth}",
        f"  Coupling Factor: {metrics.coupling_factor:.2f}",
        "",
    ]

    if report.dependency_violations:
        lines.append(f"Dependency Violations ({len(report.dependency_violations)})")
        lines.extend(
            f"  {v.from_module} -> {v.to_module}: {v.description}"
            for v in report.dependency_violations
        )
        lines.append("")

    if report.circular_dependencies:
        lines.append(f"Circular Dependencies ({len(report.circular_dependencies)})")
        lines.extend(
            "  " + " -> ".join([*cycle, cycle[0]])
            for cycle in report.circular_dependencies
        )
        lines.append("")

    fan_in, fan_out = compute_fan_stats(graph.edges)
    lines.append("Modules by Type")
    for kind in _KIND_ORDER:
        members = [m for m in report.modules if m.kind is kind]
        if not members:
            continue
        lines.append(f"  {kind.value}:")
        for module in members:
            external = len(graph.external.get(module.identity, ()))
            lines.append(
                f"    - {module.identity} "
                f"({fan_out.get(module.identity, 0)} dependencies, "
                f"{fan_in.get(module.identity, 0)} dependents, "
                f"{external} external)"
            )
    lines.append("")

    if not report.dependency_violations and not report.circular_dependencies:
        lines.append("No dependency violations or cycles found.")
    return "\n".join(lines) + "\n"
