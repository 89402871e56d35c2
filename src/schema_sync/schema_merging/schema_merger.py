"""Merge object schemas and example payloads into one document."""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from schema_sync.diagnostics import SchemaSyncError


class SchemaMergeError(SchemaSyncError):
    """Raised when schemas or examples cannot be merged."""


class MergeStrategy(str, Enum):
    """How to treat a property defined by more than one schema."""

    OVERWRITE = "overwrite"
    ERROR_ON_DUPLICATES = "error"
    KEEP_EXISTING = "keep"


def merge_schemas(
    *schemas: bytes | str | Mapping[str, Any],
    strategy: MergeStrategy = MergeStrategy.OVERWRITE,
) -> str:
    """Fold the properties and required lists of several object schemas together."""
    if not schemas:
        return "{}"

    properties: dict[str, Any] = {}
    required: set[str] = set()
    for schema in schemas:
        current = _decode_object(schema, "schema")
        for name, definition in _mapping_or_empty(current.get("properties")).items():
            if name in properties:
                if strategy is MergeStrategy.ERROR_ON_DUPLICATES:
                    raise SchemaMergeError(f"duplicate property found: {name}")
                if strategy is MergeStrategy.KEEP_EXISTING:
                    continue
            properties[name] = definition
        required.update(item for item in current.get("required") or () if isinstance(item, str))

    result: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        result["required"] = sorted(required)
    return json.dumps(result, indent=2, sort_keys=True)


def merge_examples(*examples: bytes | str | Mapping[str, Any]) -> str:
    """Shallow-merge example objects; later keys win."""
    if not examples:
        return "{}"
    result: dict[str, Any] = {}
    for example in examples:
        result.update(_decode_object(example, "example"))
    return json.dumps(result, indent=2, sort_keys=True)


def _decode_object(value: bytes | str | Mapping[str, Any], label: str) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError as exc:
        raise SchemaMergeError(f"failed to unmarshal {label}: {exc}") from exc
    if not isinstance(decoded, Mapping):
        raise SchemaMergeError(f"{label} must be a JSON object")
    return decoded


def _mapping_or_empty(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}
