from __future__ import annotations

from typing import TYPE_CHECKING

from artifacts.console import render_console
from artifacts.dot import render_dot
from artifacts.utils import _dumps_json, _write_json, _write_text

if TYPE_CHECKING:
    from pathlib import Path

    from contract.models import AnalysisReport
    from graph.builder import DependencyGraph

REPORT_FORMATS = ("console", "json")
DEFAULT_DOT_FILENAME = "dependency-graph.dot"


def render_report(report: AnalysisReport, graph: DependencyGraph, fmt: str) -> str:
    """Render a report as console text or JSON."""
    if fmt == "json":
        return render_json(report)
    if fmt == "console":
        return render_console(report, graph)
    msg = f"Unsupported report format: {fmt!r} (expected one of {REPORT_FORMATS})"
    raise ValueError(msg)


def render_json(report: AnalysisReport) -> str:
    return _dumps_json(report).decode("utf-8")


def write_report_json(path: Path, report: AnalysisReport) -> None:
    _write_json(path, report)


def write_dot(path: Path, report: AnalysisReport, graph: DependencyGraph) -> None:
    _write_text(path, render_dot(report, graph))
