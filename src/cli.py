"""Command-line interface for ngarch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from analyze import analyze_graph, analyze_project
from artifacts.write import (
    DEFAULT_DOT_FILENAME,
    REPORT_FORMATS,
    render_report,
    write_dot,
)
from contract.validation import (
    MalformedRecordError,
    load_module_records,
    validate_module_records,
)
from graph.registry import DuplicateModuleIdentityError
from rules.config import ConfigError, load_config
from verify.verify import verify_determinism

if TYPE_CHECKING:
    from contract.models import AnalysisReport
    from graph.builder import DependencyGraph


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )
    parser.add_argument(
        "--records",
        default=None,
        help="Analyze a JSON file of module records instead of scanning root",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ngarch")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze", help="Analyze module dependencies"
    )
    _add_common_paths(analyze_parser)
    analyze_parser.add_argument(
        "--format",
        choices=REPORT_FORMATS,
        default="console",
        help="Report format (default: console)",
    )
    analyze_parser.add_argument(
        "--out",
        default=None,
        help="Write the report to this file instead of stdout",
    )
    analyze_parser.add_argument(
        "--fail-on-violations",
        action="store_true",
        help="Exit with status 1 when violations or cycles are found",
    )

    graph_parser = subparsers.add_parser("graph", help="Generate dependency graph")
    _add_common_paths(graph_parser)
    graph_parser.add_argument(
        "--out",
        default=DEFAULT_DOT_FILENAME,
        help=f"Output file for the DOT graph (default: {DEFAULT_DOT_FILENAME})",
    )

    validate_parser = subparsers.add_parser(
        "validate", help="Validate a module records file"
    )
    validate_parser.add_argument("records", help="JSON file of module records")

    verify_parser = subparsers.add_parser(
        "verify", help="Verify a stored JSON report is reproducible"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--report",
        required=True,
        help="Previously written JSON report",
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _require_root(root: Path, records_path: str | None) -> None:
    if records_path is None and not root.is_dir():
        msg = f"Project root is not a directory: {root}"
        raise NotADirectoryError(msg)


def _run_analysis(
    root: Path, records_path: str | None
) -> tuple[AnalysisReport, DependencyGraph]:
    _require_root(root, records_path)
    config = load_config(root)
    if records_path is None:
        return analyze_project(root, config)
    records = load_module_records(Path(records_path).expanduser().resolve())
    return analyze_graph(records, config=config)


def _handle_analyze(
    root: Path,
    records_path: str | None,
    fmt: str,
    out: str | None,
    fail_on_violations: bool,
) -> int:
    report, graph = _run_analysis(root, records_path)
    rendered = render_report(report, graph, fmt)

    if out is None:
        sys.stdout.write(rendered)
    else:
        out_path = Path(out).expanduser().resolve()
        out_path.write_text(rendered, encoding="utf-8", newline="\n")
        sys.stderr.write(f"Report written to: {out_path}\n")

    if fail_on_violations and (
        report.dependency_violations or report.circular_dependencies
    ):
        return 1
    return 0


def _handle_graph(root: Path, records_path: str | None, out: str) -> int:
    report, graph = _run_analysis(root, records_path)
    out_path = Path(out).expanduser().resolve()
    write_dot(out_path, report, graph)
    sys.stdout.write(f"Dependency graph written to: {out_path}\n")
    return 0


def _handle_validate(records_path: str) -> int:
    result = validate_module_records(Path(records_path).expanduser().resolve())
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    sys.stdout.write(f"{len(result.records)} module records OK\n")
    return 0


def _handle_verify(root: Path, records_path: str | None, report: str) -> int:
    _require_root(root, records_path)
    report_path = Path(report).expanduser().resolve()
    records: Path | None = None
    if records_path is not None:
        records = Path(records_path).expanduser().resolve()
    try:
        result = verify_determinism(
            root=root, report_path=report_path, records_path=records
        )
    except (FileNotFoundError, IsADirectoryError) as exc:
        sys.stderr.write(f"report: {report_path}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for line in result.mismatches:
            sys.stderr.write(f"{line}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "validate":
        return _handle_validate(args.records)

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "analyze":
            return _handle_analyze(
                root, args.records, args.format, args.out, args.fail_on_violations
            )

        if args.command == "graph":
            return _handle_graph(root, args.records, args.out)

        if args.command == "verify":
            return _handle_verify(root, args.records, args.report)
    except (
        ConfigError,
        DuplicateModuleIdentityError,
        MalformedRecordError,
        NotADirectoryError,
    ) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
