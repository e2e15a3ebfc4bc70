"""Module kind classification and layering violation detection."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from contract.models import DependencyViolation, ModuleKind, ViolationType
from utils import identifier_tokens, path_segments

if TYPE_CHECKING:
    from collections.abc import Callable

    from contract.models import ModuleRecord
    from graph.builder import DependencyGraph
    from rules.config import ClassificationConfig


class ClassificationRule(NamedTuple):
    name: str
    match: Callable[[ModuleRecord, ClassificationConfig], ModuleKind | None]


def _declared_kind(
    record: ModuleRecord, config: ClassificationConfig
) -> ModuleKind | None:
    if record.kind is None or record.kind is ModuleKind.UNKNOWN:
        return None
    return record.kind


def _path_kind(record: ModuleRecord, config: ClassificationConfig) -> ModuleKind | None:
    segments = set(path_segments(record.origin_path))
    for kind, markers in (
        (ModuleKind.CORE, config.core_segments),
        (ModuleKind.SHARED, config.shared_segments),
        (ModuleKind.FEATURE, config.feature_segments),
    ):
        if segments.intersection(markers):
            return kind
    return None


_NAME_QUALIFIERS = {
    "core": ModuleKind.CORE,
    "shared": ModuleKind.SHARED,
    "feature": ModuleKind.FEATURE,
}


def _name_kind(record: ModuleRecord, config: ClassificationConfig) -> ModuleKind | None:
    tokens = identifier_tokens(record.identity)
    if len(tokens) > 1 and tokens[-1] == "module":
        tokens = tokens[:-1]
    if not tokens:
        return None
    return _NAME_QUALIFIERS.get(tokens[-1])


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("declared", _declared_kind),
    ClassificationRule("path", _path_kind),
    ClassificationRule("name", _name_kind),
)


def classify_module(
    record: ModuleRecord,
    config: ClassificationConfig,
    rules: tuple[ClassificationRule, ...] = CLASSIFICATION_RULES,
) -> ModuleKind:
    """Classify a module into an architectural kind.

    Uses first-match-wins semantics over ``rules``; when nothing matches
    the configured fallback kind (``Unknown`` by default) is returned, so
    classification never fails.
    """
    for rule in rules:
        kind = rule.match(record, config)
        if kind is not None:
            return kind
    return config.fallback_kind


VIOLATION_POLICY: dict[tuple[ModuleKind, ModuleKind], tuple[ViolationType, str]] = {
    (ModuleKind.CORE, ModuleKind.FEATURE): (
        ViolationType.CORE_DEPENDS_ON_FEATURE,
        "Core module depends on Feature module",
    ),
    (ModuleKind.SHARED, ModuleKind.FEATURE): (
        ViolationType.SHARED_DEPENDS_ON_FEATURE,
        "Shared module depends on Feature module",
    ),
    (ModuleKind.FEATURE, ModuleKind.FEATURE): (
        ViolationType.FEATURE_DEPENDS_ON_FEATURE,
        "Feature module depends directly on another Feature module",
    ),
}


def violation_for(
    from_kind: ModuleKind, to_kind: ModuleKind
) -> tuple[ViolationType, str] | None:
    """Look up the policy row for a (source kind, target kind) pair."""
    return VIOLATION_POLICY.get((from_kind, to_kind))


def check_violations(graph: DependencyGraph) -> list[DependencyViolation]:
    """Evaluate every edge against the layering policy.

    Violations come back in edge discovery order. Self-loops are left to
    cycle detection.
    """
    violations: list[DependencyViolation] = []
    for source, target in graph.edges:
        if source == target:
            continue
        row = violation_for(graph.kinds[source], graph.kinds[target])
        if row is None:
            continue
        violation_type, description = row
        violations.append(
            DependencyViolation(
                from_module=source,
                to_module=target,
                violation_type=violation_type,
                description=description,
            )
        )
    return violations


__all__ = [
    "CLASSIFICATION_RULES",
    "VIOLATION_POLICY",
    "ClassificationRule",
    "check_violations",
    "classify_module",
    "violation_for",
]
