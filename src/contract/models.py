"""Records and report models exchanged at the engine boundary.

Module records come in from extraction (or a records file); the analysis
report goes out to the renderers. Everything here is immutable once built.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ModuleKind(str, Enum):
    """Architectural kind of a module."""

    CORE = "Core"
    SHARED = "Shared"
    FEATURE = "Feature"
    UNKNOWN = "Unknown"


class ViolationType(str, Enum):
    """Layering rule broken by a dependency edge."""

    CORE_DEPENDS_ON_FEATURE = "CoreDependsOnFeature"
    SHARED_DEPENDS_ON_FEATURE = "SharedDependsOnFeature"
    FEATURE_DEPENDS_ON_FEATURE = "FeatureDependsOnFeature"


class ModuleRecord(BaseModel):
    """One discovered module and the dependencies it declares.

    ``kind`` is None until classification has run, unless the source
    states it explicitly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    identity: str = Field(min_length=1)
    origin_path: str
    kind: ModuleKind | None = None
    declared_dependencies: list[str] = Field(default_factory=list)
    exports: list[str] = Field(default_factory=list)
    providers: list[str] = Field(default_factory=list)
    declarations: list[str] = Field(default_factory=list)


class DependencyViolation(BaseModel):
    """A dependency edge that breaks the layering policy."""

    model_config = ConfigDict(frozen=True)

    from_module: str
    to_module: str
    violation_type: ViolationType
    description: str


class ArchitectureMetrics(BaseModel):
    """Aggregate statistics over the registry and its dependency graph."""

    model_config = ConfigDict(frozen=True)

    total_modules: int = 0
    core_modules: int = 0
    shared_modules: int = 0
    feature_modules: int = 0
    average_dependencies_per_module: float = 0.0
    max_dependency_depth: int = 0
    coupling_factor: float = 0.0


class AnalysisReport(BaseModel):
    """Everything one analysis run produces."""

    model_config = ConfigDict(frozen=True)

    modules: list[ModuleRecord] = Field(default_factory=list)
    dependency_violations: list[DependencyViolation] = Field(default_factory=list)
    circular_dependencies: list[list[str]] = Field(default_factory=list)
    metrics: ArchitectureMetrics = Field(default_factory=ArchitectureMetrics)


__all__ = [
    "AnalysisReport",
    "ArchitectureMetrics",
    "DependencyViolation",
    "ModuleKind",
    "ModuleRecord",
    "ViolationType",
]
