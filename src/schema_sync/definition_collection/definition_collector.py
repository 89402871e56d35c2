"""Merge named schema definitions collected from many entities into one table."""

from __future__ import annotations

import difflib
import json
import logging
from dataclasses import dataclass

from schema_sync.diagnostics import (
    CaseInsensitiveCollisionError,
    ConflictingDefinitionError,
    DefinitionConflictError,
)
from schema_sync.schema_model import SchemaNode, canonical_schema_text, parse_schema

_LOGGER = logging.getLogger(__name__)

DefinitionsTable = dict[str, SchemaNode]


@dataclass(frozen=True)
class _CollectedDefinition:
    name: str
    schema: SchemaNode
    canonical: str


class DefinitionCollector:
    """Accumulates definitions keyed case-insensitively.

    Adding the same name twice is allowed only when both schemas are identical
    once examples are ignored; the copy carrying examples is kept. Nested
    ``definitions`` are flattened into the same table. Not thread-safe: callers
    serialize ``add``.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _CollectedDefinition] = {}

    def add(self, name: str, schema: SchemaNode) -> None:
        if not name:
            raise DefinitionConflictError("definition name cannot be empty")
        node = parse_schema(schema)
        canonical = canonical_schema_text(node)
        key = name.lower()

        existing = self._entries.get(key)
        if existing is not None:
            if existing.name != name:
                raise CaseInsensitiveCollisionError(existing.name, name)
            if existing.canonical != canonical:
                diff = _canonical_diff(existing.canonical, canonical, name)
                _LOGGER.debug("conflicting definition %s:\n%s", name, diff)
                raise ConflictingDefinitionError(name, diff=diff)
            if not node.examples or existing.schema.examples:
                return
            _LOGGER.debug("replacing definition %s with an example-carrying copy", name)
        else:
            _LOGGER.debug("collecting definition %s", name)

        self._entries[key] = _CollectedDefinition(name=name, schema=node, canonical=canonical)
        for nested_name, nested in (node.definitions or {}).items():
            if isinstance(nested, SchemaNode):
                self.add(nested_name, nested)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def finalize(self) -> DefinitionsTable:
        """Return the collected table sorted by name, nested definitions removed."""
        table: DefinitionsTable = {}
        for entry in sorted(self._entries.values(), key=lambda item: item.name):
            committed = entry.schema.copy()
            committed.definitions = None
            table[entry.name] = committed
        return table


def _canonical_diff(existing: str, new: str, name: str) -> str:
    existing_lines = json.dumps(json.loads(existing), indent=2, sort_keys=True).splitlines()
    new_lines = json.dumps(json.loads(new), indent=2, sort_keys=True).splitlines()
    return "\n".join(
        difflib.unified_diff(
            existing_lines,
            new_lines,
            fromfile=f"{name} (existing)",
            tofile=f"{name} (new)",
            lineterm="",
        )
    )
