"""Catalog check entities."""

from __future__ import annotations

from dataclasses import dataclass

from schema_sync.configuration.runtime_settings import Configuration
from schema_sync.diagnostics import Diagnostic
from schema_sync.entity_registry import EntityRegistry


@dataclass(frozen=True)
class CheckRequest:
    """Input contract for one catalog check run."""

    config_path: str
    entity_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class EntityCheckResult:
    """Outcome of checking one entity."""

    entity_name: str
    diagnostic: Diagnostic | None

    @property
    def is_ok(self) -> bool:
        """Return True when no diagnostic was produced."""
        return self.diagnostic is None


@dataclass(frozen=True)
class CheckOutcome:
    """Output contract for one completed check run."""

    results: tuple[EntityCheckResult, ...]
    skipped: tuple[str, ...]

    @property
    def failures(self) -> tuple[EntityCheckResult, ...]:
        return tuple(result for result in self.results if not result.is_ok)

    @property
    def is_ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class CatalogArtifacts:
    """Loaded configuration and the registry built from it."""

    configuration: Configuration
    registry: EntityRegistry
