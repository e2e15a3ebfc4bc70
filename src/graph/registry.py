"""Registry of classified module records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rules.config import ClassificationConfig
from rules.layers import classify_module

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from contract.models import ModuleRecord

logger = logging.getLogger(__name__)


class DuplicateModuleIdentityError(ValueError):
    """Raised when two module records share an identity."""

    def __init__(self, identity: str, first_path: str, second_path: str) -> None:
        self.identity = identity
        self.first_path = first_path
        self.second_path = second_path
        super().__init__(
            f"Duplicate module identity {identity!r}: "
            f"declared in {first_path!r} and {second_path!r}"
        )


class ModuleRegistry:
    """Classified module records indexed by identity.

    Records keep their input order. Each stored record has its ``kind``
    resolved; the input records themselves are never modified.
    """

    def __init__(self, records: Sequence[ModuleRecord]) -> None:
        self._records: tuple[ModuleRecord, ...] = tuple(records)
        self._index: dict[str, ModuleRecord] = {}
        for record in self._records:
            existing = self._index.get(record.identity)
            if existing is not None:
                raise DuplicateModuleIdentityError(
                    record.identity, existing.origin_path, record.origin_path
                )
            self._index[record.identity] = record

    @classmethod
    def classified(
        cls,
        records: Sequence[ModuleRecord],
        config: ClassificationConfig | None = None,
    ) -> ModuleRegistry:
        """Build a registry whose records all carry a resolved kind."""
        if config is None:
            config = ClassificationConfig()

        classified: list[ModuleRecord] = []
        for record in records:
            kind = classify_module(record, config)
            if record.kind is not kind:
                logger.debug("Classified %s as %s", record.identity, kind.value)
            classified.append(record.model_copy(update={"kind": kind}))
        return cls(classified)

    def __iter__(self) -> Iterator[ModuleRecord]:
        return iter(self._records)

    def __contains__(self, identity: object) -> bool:
        return identity in self._index

    @property
    def records(self) -> tuple[ModuleRecord, ...]:
        return self._records


__all__ = ["DuplicateModuleIdentityError", "ModuleRegistry"]
