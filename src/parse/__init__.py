"""Parsing utilities for NgModule sources."""

from parse.ngmodule import (
    extract_module_name,
    extract_module_record,
    extract_ngmodule_array,
    extract_package_imports,
)

__all__ = [
    "extract_module_name",
    "extract_module_record",
    "extract_ngmodule_array",
    "extract_package_imports",
]
