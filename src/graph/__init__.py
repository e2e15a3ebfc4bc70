"""Dependency graph construction and algorithms."""
