"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from schema_sync.diagnostics import SchemaError
from schema_sync.entity_registry import parse_example
from schema_sync.reference_resolution import COMPONENTS_PREFIX
from schema_sync.schema_model import parse_schema

from .runtime_settings import (
    Configuration,
    ConsistencySettings,
    DocumentSource,
    EntityConfig,
    OutputSettings,
)

_DEFAULT_SERVER_DEFINED_FIELDS = ("id",)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    entities = _parse_entities_section(parsed.get("entities"), path.parent)
    consistency = _parse_consistency_section(parsed.get("consistency"))
    output = _parse_output_section(parsed.get("output"))

    return Configuration(
        path=path,
        entities=entities,
        consistency=consistency,
        output=output,
    )


def _parse_entities_section(value: Any, base_path: Path) -> tuple[EntityConfig, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str) or not value:
        raise ConfigurationError("Configuration section 'entities' must be a non-empty list.")

    entities: list[EntityConfig] = []
    seen_names: set[str] = set()
    for index, item in enumerate(value):
        label = f"entities[{index}]"
        section = _require_mapping(item, label)
        name = _require_non_empty_string(section.get("name"), f"{label}.name")
        if name in seen_names:
            raise ConfigurationError(f"{label}.name '{name}' is defined more than once.")
        seen_names.add(name)

        schema = _load_document(section.get("schema"), base_path, f"{label}.schema")
        try:
            parse_schema(schema.text)
        except SchemaError as exc:
            raise ConfigurationError(f"{label}.schema: {exc}") from exc

        example = None
        if section.get("example") is not None:
            example = _load_document(section.get("example"), base_path, f"{label}.example")
            try:
                parse_example(example.text, name)
            except SchemaError as exc:
                raise ConfigurationError(f"{label}.example: {exc}") from exc

        runtime_type = _optional_string(section.get("runtime_type"), f"{label}.runtime_type")
        if runtime_type is not None and ":" not in runtime_type:
            raise ConfigurationError(
                f"{label}.runtime_type must use the 'package.module:TypeName' form."
            )

        entities.append(
            EntityConfig(name=name, schema=schema, example=example, runtime_type=runtime_type)
        )
    return tuple(entities)


def _load_document(definition: Any, base_path: Path, label: str) -> DocumentSource:
    if isinstance(definition, str):
        if not definition.strip():
            raise ConfigurationError(f"{label} text cannot be empty.")
        return DocumentSource(text=definition, source_path=None)
    mapping = _require_mapping(definition, label)
    inline = mapping.get("inline")
    path_value = mapping.get("path")
    if inline and path_value:
        raise ConfigurationError(f"{label} must not set both inline and path.")
    if inline:
        if not isinstance(inline, str):
            raise ConfigurationError(f"{label} inline value must be a string.")
        return DocumentSource(text=inline, source_path=None)
    if path_value:
        if not isinstance(path_value, str):
            raise ConfigurationError(f"{label} path must be a string.")
        document_path = _resolve_path(base_path, path_value)
        if not document_path.exists():
            raise ConfigurationError(f"{label} file not found: {document_path}")
        return DocumentSource(
            text=document_path.read_text(encoding="utf-8"), source_path=document_path
        )
    raise ConfigurationError(f"{label} requires either inline or path.")


def _parse_consistency_section(value: Any) -> ConsistencySettings:
    if value is None:
        return ConsistencySettings(server_defined_fields=_DEFAULT_SERVER_DEFINED_FIELDS)
    section = _require_mapping(value, "consistency")
    fields = section.get("server_defined_fields", list(_DEFAULT_SERVER_DEFINED_FIELDS))
    return ConsistencySettings(
        server_defined_fields=_normalize_string_sequence(
            fields, "consistency.server_defined_fields"
        )
    )


def _parse_output_section(value: Any) -> OutputSettings:
    if value is None:
        return OutputSettings(reference_prefix=COMPONENTS_PREFIX)
    section = _require_mapping(value, "output")
    prefix = _require_non_empty_string(
        section.get("reference_prefix", COMPONENTS_PREFIX), "output.reference_prefix"
    )
    if not prefix.endswith("/"):
        raise ConfigurationError("output.reference_prefix must end with '/'.")
    return OutputSettings(reference_prefix=prefix)


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None
