"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DocumentSource:
    """JSON document text and the file it was read from, if any."""

    text: str
    source_path: Path | None


@dataclass(frozen=True)
class EntityConfig:
    """One catalog entity."""

    name: str
    schema: DocumentSource
    example: DocumentSource | None
    runtime_type: str | None


@dataclass(frozen=True)
class ConsistencySettings:
    """Options for runtime shape consistency checks."""

    server_defined_fields: tuple[str, ...]


@dataclass(frozen=True)
class OutputSettings:
    """Options for published documents."""

    reference_prefix: str


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    entities: tuple[EntityConfig, ...]
    consistency: ConsistencySettings
    output: OutputSettings
