"""Graphviz DOT rendering of a module dependency graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

from contract.models import ModuleKind
from graph.algos import strongly_connected_components

if TYPE_CHECKING:
    from contract.models import AnalysisReport
    from graph.builder import DependencyGraph

KIND_COLORS: dict[ModuleKind, str] = {
    ModuleKind.CORE: "lightblue",
    ModuleKind.SHARED: "lightgreen",
    ModuleKind.FEATURE: "lightyellow",
    ModuleKind.UNKNOWN: "lightgray",
}


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _quote(value: str) -> str:
    return f'"{_escape(value)}"'


def render_dot(report: AnalysisReport, graph: DependencyGraph) -> str:
    """Render the report's modules and the graph's edges as a DOT digraph.

    Violating edges are red and labelled with the violation type. Edges
    whose ends share a strongly connected component lie on a cycle and are
    dashed, whichever cycle mode produced the report.
    """
    violations = {
        (v.from_module, v.to_module): v.violation_type.value
        for v in report.dependency_violations
    }
    component_of: dict[str, int] = {}
    for position, component in enumerate(
        strongly_connected_components(graph.adjacency)
    ):
        for node in component:
            component_of[node] = position

    lines = [
        "digraph modules {",
        "  rankdir=TB;",
        "  node [shape=box, style=filled];",
        "",
    ]

    for module in report.modules:
        kind = module.kind or ModuleKind.UNKNOWN
        label = f'"{_escape(module.identity)}\\n({kind.value})"'
        fill = KIND_COLORS[kind]
        lines.append(f"  {_quote(module.identity)} [label={label}, fillcolor={fill}];")

    lines.append("")

    for source, target in graph.edges:
        attrs: list[str] = []
        violation = violations.get((source, target))
        if violation is not None:
            attrs.extend(["color=red", "penwidth=2.0", f"label={_quote(violation)}"])
        if component_of[source] == component_of[target]:
            attrs.append("style=dashed")
        suffix = f" [{', '.join(attrs)}]" if attrs else ""
        lines.append(f"  {_quote(source)} -> {_quote(target)}{suffix};")

    lines.append("}")
    return "\n".join(lines) + "\n"
