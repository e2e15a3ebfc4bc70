"""Layering rules and analysis configuration."""

from rules.config import (
    ClassificationConfig,
    ConfigError,
    CyclesConfig,
    NgArchConfig,
    ResolutionConfig,
    load_config,
)
from rules.layers import (
    CLASSIFICATION_RULES,
    VIOLATION_POLICY,
    check_violations,
    classify_module,
    violation_for,
)

__all__ = [
    "CLASSIFICATION_RULES",
    "VIOLATION_POLICY",
    "ClassificationConfig",
    "ConfigError",
    "CyclesConfig",
    "NgArchConfig",
    "ResolutionConfig",
    "check_violations",
    "classify_module",
    "load_config",
    "violation_for",
]
