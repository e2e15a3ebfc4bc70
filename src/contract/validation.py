"""Validation of externally supplied module record files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import ValidationError

from contract.models import ModuleRecord

if TYPE_CHECKING:
    from pathlib import Path


class MalformedRecordError(ValueError):
    """Raised when a records file cannot be turned into module records."""


@dataclass(frozen=True)
class ValidationMessage:
    path: Path
    message: str
    index: int | None = None

    def location(self) -> str:
        if self.index is None:
            return str(self.path)
        return f"{self.path}[{self.index}]"

    def to_dict(self) -> dict[str, object]:
        return {
            "path": str(self.path),
            "index": self.index,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    records: list[ModuleRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ())) or "<record>"
    return f"{loc}: {err.get('msg', 'invalid value')}"


def validate_module_records(path: Path) -> ValidationResult:
    """Validate a JSON array of module records.

    Every entry is checked; the result carries the records that parsed
    and one message per entry that did not. Duplicate identities are
    reported here too, since the engine refuses them.
    """
    result = ValidationResult()

    if not path.is_file():
        result.errors.append(
            ValidationMessage(path=path, message="Records file does not exist.")
        )
        return result

    try:
        payload: Any = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        result.errors.append(
            ValidationMessage(path=path, message=f"Invalid JSON: {exc}")
        )
        return result

    if not isinstance(payload, list):
        result.errors.append(
            ValidationMessage(
                path=path, message="Records file must contain a JSON array."
            )
        )
        return result

    seen: dict[str, int] = {}
    for index, entry in enumerate(payload):
        try:
            record = ModuleRecord.model_validate(entry)
        except ValidationError as exc:
            result.errors.append(
                ValidationMessage(path=path, index=index, message=_first_error(exc))
            )
            continue

        if record.identity in seen:
            result.errors.append(
                ValidationMessage(
                    path=path,
                    index=index,
                    message=(
                        f"Duplicate module identity {record.identity!r} "
                        f"(first seen at index {seen[record.identity]})."
                    ),
                )
            )
            continue

        seen[record.identity] = index
        result.records.append(record)

    return result


def load_module_records(path: Path) -> list[ModuleRecord]:
    """Load module records, failing on the first malformed entry."""
    result = validate_module_records(path)
    if result.errors:
        first = result.errors[0]
        msg = f"{first.location()}: {first.message}"
        raise MalformedRecordError(msg)
    return result.records


__all__ = [
    "MalformedRecordError",
    "ValidationMessage",
    "ValidationResult",
    "load_module_records",
    "validate_module_records",
]
