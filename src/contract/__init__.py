"""Stable boundary of the analysis engine.

Module records go in, an analysis report comes out. Treat these exports as
the contract shared by extraction, the engine, and the renderers.
"""

from contract.models import (
    AnalysisReport,
    ArchitectureMetrics,
    DependencyViolation,
    ModuleKind,
    ModuleRecord,
    ViolationType,
)


def __getattr__(name: str) -> object:
    if name in {
        "MalformedRecordError",
        "ValidationMessage",
        "ValidationResult",
        "load_module_records",
        "validate_module_records",
    }:
        from contract import validation

        return getattr(validation, name)

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "AnalysisReport",
    "ArchitectureMetrics",
    "DependencyViolation",
    "MalformedRecordError",
    "ModuleKind",
    "ModuleRecord",
    "ValidationMessage",
    "ValidationResult",
    "ViolationType",
    "load_module_records",
    "validate_module_records",
]
