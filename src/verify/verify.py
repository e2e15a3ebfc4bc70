"""Determinism verification for analysis reports."""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from analyze import analyze_graph, analyze_project
from artifacts.write import render_json
from contract.validation import load_module_records
from rules.config import load_config

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import NgArchConfig


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)


def verify_determinism(
    *,
    root: Path,
    report_path: Path,
    records_path: Path | None = None,
    config: NgArchConfig | None = None,
) -> DeterminismResult:
    """Verify that a stored JSON report matches a fresh analysis.

    Re-runs the analysis of ``root``, or of the records in ``records_path``
    when given, and compares the JSON rendering byte-for-byte against
    ``report_path``.

    Args:
        root: Project root to analyze.
        report_path: Previously written JSON report.
        records_path: Optional JSON file of module records analyzed in
            place of scanning ``root``.
        config: Optional configuration (loaded from ``root`` when omitted).

    Returns:
        DeterminismResult with ok status and the differing report lines
        as a unified diff.

    Raises:
        FileNotFoundError: If report_path does not exist.
        IsADirectoryError: If report_path is a directory.
        MalformedRecordError: If records_path cannot be loaded.
    """
    if not report_path.exists():
        msg = f"Report file does not exist: {report_path}"
        raise FileNotFoundError(msg)
    if report_path.is_dir():
        msg = f"Report path is a directory: {report_path}"
        raise IsADirectoryError(msg)

    if records_path is None:
        report, _ = analyze_project(root, config)
    else:
        if config is None:
            config = load_config(root)
        report, _ = analyze_graph(load_module_records(records_path), config=config)
    regenerated = render_json(report)
    original = report_path.read_text(encoding="utf-8")

    if regenerated == original:
        return DeterminismResult(ok=True)

    diff = difflib.unified_diff(
        original.splitlines(),
        regenerated.splitlines(),
        fromfile=str(report_path),
        tofile="regenerated",
        lineterm="",
    )
    return DeterminismResult(ok=False, mismatches=tuple(diff))
