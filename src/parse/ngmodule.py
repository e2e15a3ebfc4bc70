"""Regex-based extraction of NgModule metadata from TypeScript sources."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from contract.models import ModuleRecord

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_CLASS_NAME = re.compile(r"export\s+class\s+(\w+Module)\b")
_NGMODULE_DECORATOR = re.compile(r"@NgModule\s*\(")
_ES_IMPORT = re.compile(
    r"""import\s+(?:type\s+)?[\w$*{}\s,]+?\s+from\s+["']([^"']+)["']"""
)
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT = re.compile(r"(^|\s)//[^\n]*")
_LEADING_IDENTIFIER = re.compile(r"^(?:\.\.\.)?\s*([A-Za-z_$][\w$]*)")

_OPENERS = {"[": "]", "(": ")", "{": "}"}
_CLOSERS = {"]", ")", "}"}


def _strip_comments(content: str) -> str:
    return _LINE_COMMENT.sub(r"\1", _BLOCK_COMMENT.sub("", content))


def _balanced_span(content: str, open_index: int) -> str:
    """Return the text between the bracket at ``open_index`` and its match.

    An unterminated bracket yields everything to the end of ``content``.
    """
    depth = 0
    quote: str | None = None
    for index in range(open_index, len(content)):
        char = content[index]
        if quote is not None:
            if char == quote and content[index - 1] != "\\":
                quote = None
            continue
        if char in "'\"`":
            quote = char
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
            if depth == 0:
                return content[open_index + 1 : index]
    return content[open_index + 1 :]


def _split_top_level(text: str) -> list[str]:
    """Split on commas that are not nested inside brackets or strings."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    current: list[str] = []
    for char in text:
        if quote is not None:
            current.append(char)
            if char == quote:
                quote = None
            continue
        if char in "'\"`":
            quote = char
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return [" ".join(part.split()) for part in parts if part.strip()]


def _ngmodule_body(content: str) -> str:
    match = _NGMODULE_DECORATOR.search(content)
    if match is None:
        return content
    return _balanced_span(content, match.end() - 1)


def extract_ngmodule_array(content: str, field: str) -> list[str]:
    """Extract the entries of one NgModule metadata array.

    Entries are reduced to their leading identifier, so
    ``RouterModule.forRoot(routes)`` becomes ``RouterModule``; entries
    without one (object literals) are kept with whitespace collapsed.
    """
    body = _ngmodule_body(_strip_comments(content))
    match = re.search(rf"\b{re.escape(field)}\s*:\s*\[", body)
    if match is None:
        return []

    entries: list[str] = []
    for raw in _split_top_level(_balanced_span(body, match.end() - 1)):
        ident = _LEADING_IDENTIFIER.match(raw)
        entries.append(ident.group(1) if ident else raw)
    return entries


def extract_package_imports(content: str) -> list[str]:
    """ES import specifiers that are neither relative nor Angular framework."""
    return [
        specifier
        for specifier in _ES_IMPORT.findall(_strip_comments(content))
        if not specifier.startswith(".") and not specifier.startswith("@angular/")
    ]


def extract_module_name(path: Path, content: str) -> str:
    match = _CLASS_NAME.search(content)
    if match:
        return match.group(1)
    name = path.name
    return name[: -len(".ts")] if name.endswith(".ts") else path.stem


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def extract_module_record(path: Path, root: Path) -> ModuleRecord:
    """Build a module record from one module source file.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    content = path.read_text(encoding="utf-8")
    imports = extract_ngmodule_array(content, "imports")
    record = ModuleRecord(
        identity=extract_module_name(path, content),
        origin_path=path.relative_to(root).as_posix(),
        declared_dependencies=_unique(imports + extract_package_imports(content)),
        exports=extract_ngmodule_array(content, "exports"),
        providers=extract_ngmodule_array(content, "providers"),
        declarations=extract_ngmodule_array(content, "declarations"),
    )
    logger.debug(
        "Extracted %s from %s (%d dependencies)",
        record.identity,
        record.origin_path,
        len(record.declared_dependencies),
    )
    return record


__all__ = [
    "extract_module_name",
    "extract_module_record",
    "extract_ngmodule_array",
    "extract_package_imports",
]
