"""Strategies for resolving declared dependency identifiers to modules."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from utils import file_name, normalize_identifier

if TYPE_CHECKING:
    from collections.abc import Sequence

    from graph.registry import ModuleRegistry

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    def resolve(self, identifier: str, *, source: str | None = None) -> str | None:
        """Return the identity of the module ``identifier`` names, if any.

        ``source`` is the identity of the module declaring the dependency.
        """
        ...


class ExactResolver:
    """Match an identifier against module identities verbatim."""

    def __init__(self, registry: ModuleRegistry) -> None:
        self._registry = registry

    def resolve(self, identifier: str, *, source: str | None = None) -> str | None:
        return identifier if identifier in self._registry else None


class NormalizedResolver:
    """Match on case- and path-prefix-insensitive keys.

    Keys are derived from each module's identity and from the file name of
    its origin path. A key claimed by more than one module is ambiguous and
    never resolves. A key that leads back to the declaring module does not
    resolve either: only the last path segment survives normalization, so a
    module importing its own barrel (``@app/features/users`` inside
    ``UsersModule``) would otherwise depend on itself.
    """

    def __init__(self, registry: ModuleRegistry) -> None:
        owners: dict[str, set[str]] = {}
        for record in registry:
            for source in (record.identity, file_name(record.origin_path)):
                key = normalize_identifier(source)
                if key:
                    owners.setdefault(key, set()).add(record.identity)

        self._index: dict[str, str] = {}
        for key, identities in owners.items():
            if len(identities) == 1:
                self._index[key] = next(iter(identities))
            else:
                logger.debug(
                    "Normalized key %r is ambiguous between %s",
                    key,
                    ", ".join(sorted(identities)),
                )

    def resolve(self, identifier: str, *, source: str | None = None) -> str | None:
        identity = self._index.get(normalize_identifier(identifier))
        if identity is not None and identity == source:
            logger.debug(
                "%s: %r normalizes to itself; left external", source, identifier
            )
            return None
        return identity


class ChainResolver:
    """Try each resolver in order; the first hit wins."""

    def __init__(self, resolvers: Sequence[Resolver]) -> None:
        self._resolvers = tuple(resolvers)

    def resolve(self, identifier: str, *, source: str | None = None) -> str | None:
        for resolver in self._resolvers:
            identity = resolver.resolve(identifier, source=source)
            if identity is not None:
                return identity
        return None


def default_resolver(registry: ModuleRegistry, *, normalized: bool = True) -> Resolver:
    """Exact identity match, then (optionally) normalized match."""
    resolvers: list[Resolver] = [ExactResolver(registry)]
    if normalized:
        resolvers.append(NormalizedResolver(registry))
    return ChainResolver(resolvers)


__all__ = [
    "ChainResolver",
    "ExactResolver",
    "NormalizedResolver",
    "Resolver",
    "default_resolver",
]
