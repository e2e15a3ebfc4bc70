"""Analysis entry points: module records in, architecture report out."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contract.models import AnalysisReport
from graph.algos import enumerate_elementary_cycles, find_cycles
from graph.builder import build_graph
from graph.metrics import compute_metrics
from graph.registry import ModuleRegistry
from graph.resolve import default_resolver
from parse.ngmodule import extract_module_record
from rules.config import NgArchConfig, load_config
from rules.layers import check_violations
from scan.files import find_module_files

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from contract.models import ModuleRecord
    from graph.builder import DependencyGraph
    from graph.resolve import Resolver

logger = logging.getLogger(__name__)


def detect_cycles(graph: DependencyGraph, config: NgArchConfig) -> list[list[str]]:
    """Report cycles at the granularity the configuration asks for."""
    if config.cycles.mode == "elementary":
        return enumerate_elementary_cycles(
            graph,
            max_length=config.cycles.max_length,
            max_cycles=config.cycles.max_cycles,
        )
    return find_cycles(graph)


def analyze_graph(
    records: Sequence[ModuleRecord],
    *,
    config: NgArchConfig | None = None,
    resolver: Resolver | None = None,
) -> tuple[AnalysisReport, DependencyGraph]:
    """Run the engine and also hand back the graph it built.

    Raises:
        DuplicateModuleIdentityError: If two records share an identity.
    """
    if config is None:
        config = NgArchConfig()

    registry = ModuleRegistry.classified(records, config.classification)
    if resolver is None:
        resolver = default_resolver(registry, normalized=config.resolution.normalized)
    graph = build_graph(registry, resolver)

    violations = check_violations(graph)
    cycles = detect_cycles(graph, config)
    metrics = compute_metrics(registry, graph)
    logger.info(
        "Analysis complete: %d modules, %d violations, %d cycles",
        metrics.total_modules,
        len(violations),
        len(cycles),
    )

    report = AnalysisReport(
        modules=list(registry.records),
        dependency_violations=violations,
        circular_dependencies=cycles,
        metrics=metrics,
    )
    return report, graph


def analyze_records(
    records: Sequence[ModuleRecord],
    *,
    config: NgArchConfig | None = None,
    resolver: Resolver | None = None,
) -> AnalysisReport:
    """Classify, build the graph, check rules, find cycles and compute metrics.

    Args:
        records: Module records with unique identities
        config: Analysis configuration (defaults when omitted)
        resolver: Optional identifier resolution strategy

    Returns:
        The complete analysis report; an empty input gives an all-zero report

    Raises:
        DuplicateModuleIdentityError: If two records share an identity.
    """
    report, _ = analyze_graph(records, config=config, resolver=resolver)
    return report


def collect_module_records(root: Path, config: NgArchConfig) -> list[ModuleRecord]:
    """Discover and extract every module under ``root``.

    Unreadable files are skipped with a warning. The result is complete
    before the engine sees any of it.
    """
    records: list[ModuleRecord] = []
    for file_path in find_module_files(
        root,
        module_glob=config.module_glob,
        include_patterns=config.include,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    ):
        try:
            records.append(extract_module_record(file_path, root))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable module file %s: %s", file_path, exc)
    logger.info("Discovered %d module files under %s", len(records), root)
    return records


def analyze_project(
    root: Path, config: NgArchConfig | None = None
) -> tuple[AnalysisReport, DependencyGraph]:
    """Analyze the module files of a project directory."""
    if config is None:
        config = load_config(root)
    records = collect_module_records(root, config)
    return analyze_graph(records, config=config)


__all__ = [
    "analyze_graph",
    "analyze_project",
    "analyze_records",
    "collect_module_records",
    "detect_cycles",
]
