"""Shared utilities for identifier and path handling."""

from __future__ import annotations

import re
from pathlib import PurePosixPath

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")
_SOURCE_SUFFIXES = (".ts", ".tsx", ".js", ".mjs")


def path_segments(path: str) -> list[str]:
    """Split a path on either separator into lower-case, non-empty segments.

    Examples:
        >>> path_segments("src\\\\app/Core/core.module.ts")
        ['src', 'app', 'core', 'core.module.ts']
    """
    return [part.lower() for part in path.replace("\\", "/").split("/") if part]


def identifier_tokens(identifier: str) -> list[str]:
    """Split an identifier into lower-case word tokens.

    camelCase boundaries, dashes, underscores and dots all separate tokens.

    Examples:
        >>> identifier_tokens("UserFeatureModule")
        ['user', 'feature', 'module']
        >>> identifier_tokens("order-feature.module")
        ['order', 'feature', 'module']
    """
    spaced = _CAMEL_BOUNDARY.sub(" ", identifier)
    return [token.lower() for token in _SEPARATORS.split(spaced) if token]


def normalize_identifier(identifier: str) -> str:
    """Reduce an identifier or import path to a case- and prefix-free key.

    Only the last path segment survives, without a source extension,
    separators, or a trailing ``module`` token, so that ``SharedModule``,
    ``./shared/shared.module`` and ``@app/shared/shared.module.ts`` all
    normalize to ``shared``.

    Examples:
        >>> normalize_identifier("SharedModule")
        'shared'
        >>> normalize_identifier("../features/orders/order-list.module")
        'orderlist'
    """
    segments = [part for part in identifier.replace("\\", "/").split("/") if part]
    if not segments:
        return ""

    name = segments[-1]
    for suffix in _SOURCE_SUFFIXES:
        if name.lower().endswith(suffix):
            name = name[: -len(suffix)]
            break

    key = "".join(identifier_tokens(name))
    if key.endswith("module") and len(key) > len("module"):
        key = key[: -len("module")]
    return key


def file_name(path: str) -> str:
    """Return the last segment of a POSIX or Windows style path."""
    return PurePosixPath(path.replace("\\", "/")).name


__all__ = ["file_name", "identifier_tokens", "normalize_identifier", "path_segments"]
