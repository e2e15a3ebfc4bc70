"""Discovery of module definition files under a project root."""

from __future__ import annotations

import logging
from collections.abc import Callable
from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)

GitignoreMatcher = Callable[[str], bool]


def _resolves_inside(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
    except (OSError, ValueError):
        return False
    return True


def _skip_reason(
    path: Path,
    root: Path,
    gitignore_matches: GitignoreMatcher | None,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> str | None:
    """Return why ``path`` is not a module file to analyze, or None to keep it."""
    if path.is_symlink():
        return "symlink"
    if not path.is_file():
        return "not a regular file"
    if not _resolves_inside(path, root):
        return "outside project root"

    rel_path = path.relative_to(root).as_posix()
    if gitignore_matches is not None and gitignore_matches(str(path)):
        return "gitignored"
    if include_patterns and not any(fnmatch(rel_path, p) for p in include_patterns):
        return "not included"
    if exclude_patterns and any(fnmatch(rel_path, p) for p in exclude_patterns):
        return "excluded"
    return None


def _gitignore_files(root: Path, *, nested: bool) -> list[Path]:
    """The root .gitignore, plus every nested one when ``nested`` is set.

    Sorted by relative path so matchers are always applied in one order.
    """
    candidates = [root / ".gitignore"]
    if nested:
        candidates.extend(root.rglob(".gitignore"))
    found = {path for path in candidates if path.is_file()}
    return sorted(found, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> GitignoreMatcher | None:
    gitignore_paths = _gitignore_files(root, nested=nested_gitignore)
    if not gitignore_paths:
        return None
    if not nested_gitignore:
        return cast("GitignoreMatcher", parse_gitignore(gitignore_paths[0]))

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # Path lies outside this .gitignore's base directory.
                continue
        return False

    return matches


def find_module_files(
    directory: Path,
    *,
    module_glob: str = "*.module.ts",
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find the module definition files of a project, respecting .gitignore.

    Args:
        directory: Project root to search
        module_glob: File name pattern of a module file
        include_patterns: Optional fnmatch patterns over root-relative
            paths; when given, a file must match at least one
        exclude_patterns: Optional fnmatch patterns; matching files are
            dropped
        nested_gitignore: Honour .gitignore files below the root as well

    Yields:
        Module file paths sorted by root-relative POSIX path, so discovery
        order never depends on the file system.
    """
    gitignore_matches = _build_gitignore_matcher(
        directory,
        nested_gitignore=nested_gitignore,
    )

    kept: list[Path] = []
    for path in directory.rglob(module_glob):
        reason = _skip_reason(
            path,
            directory,
            gitignore_matches,
            include_patterns,
            exclude_patterns,
        )
        if reason is None:
            kept.append(path)
        else:
            logger.debug("Skipping %s (%s)", path, reason)

    kept.sort(key=lambda p: p.relative_to(directory).as_posix())
    yield from kept


__all__ = ["find_module_files"]
