from __future__ import annotations

from pathlib import Path
from typing import Literal

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

from contract.models import ModuleKind

CONFIG_FILENAME = "ngarch.toml"

CycleMode = Literal["components", "elementary"]


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ClassificationConfig(_StrictModel):
    """Structural hints used to classify modules without an explicit kind."""

    core_segments: list[str] = Field(
        default_factory=lambda: ["core"],
        description="Path segments marking a Core module",
    )
    shared_segments: list[str] = Field(
        default_factory=lambda: ["shared"],
        description="Path segments marking a Shared module",
    )
    feature_segments: list[str] = Field(
        default_factory=lambda: ["features", "feature"],
        description="Path segments marking a Feature module",
    )
    fallback_kind: ModuleKind = Field(
        default=ModuleKind.UNKNOWN,
        description="Kind assigned when no hint matches",
    )

    @field_validator("core_segments", "shared_segments", "feature_segments")
    @classmethod
    def lower_segments(cls, v: list[str]) -> list[str]:
        """Path matching is case-insensitive, so store segments lower-cased."""
        return [segment.lower() for segment in v]


class ResolutionConfig(_StrictModel):
    """How declared dependency identifiers are matched to modules."""

    normalized: bool = Field(
        default=True,
        description="Fall back to case/path-prefix insensitive matching",
    )


class CyclesConfig(_StrictModel):
    """Cycle reporting granularity."""

    mode: CycleMode = Field(
        default="components",
        description="One entry per strongly connected component, or every "
        "elementary cycle up to max_length",
    )
    max_length: int = Field(default=8, ge=1)
    max_cycles: int = Field(default=1000, ge=1)


class NgArchConfig(_StrictModel):
    """Configuration for a module architecture analysis run."""

    module_glob: str = Field(
        default="*.module.ts",
        description="File name pattern identifying module files",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all module files)",
    )
    exclude: list[str] = Field(
        default_factory=lambda: ["node_modules/**", "**/node_modules/**", "dist/**"],
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    classification: ClassificationConfig = Field(
        default_factory=ClassificationConfig,
    )
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    cycles: CyclesConfig = Field(default_factory=CyclesConfig)


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> NgArchConfig:
    """Load configuration from ngarch.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return NgArchConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return NgArchConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
