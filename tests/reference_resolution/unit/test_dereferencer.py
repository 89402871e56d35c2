"""Reference resolution tests."""

from __future__ import annotations

import json

import pytest
from schema_sync.diagnostics import NotSchemaCapableError, UnresolvedReferenceError
from schema_sync.entity_registry import EntityDescriptor, EntityRegistry
from schema_sync.reference_resolution import (
    COMPONENTS_PREFIX,
    DEFINITIONS_PREFIX,
    dereference,
    dereference_transitively,
    reference_identifier,
    rewrite_for_output,
)
from schema_sync.schema_model import parse_schema

HEALTH_SCHEMA = {
    "type": "object",
    "properties": {"status": {"type": "string"}},
    "additionalProperties": False,
}
REPORT_SCHEMA = {
    "type": "object",
    "properties": {"health": {"$ref": "#/definitions/Health"}},
    "additionalProperties": False,
}


def _registry(**schemas: dict | None) -> EntityRegistry:
    return EntityRegistry(
        EntityDescriptor(name=name, schema=None if schema is None else parse_schema(schema))
        for name, schema in schemas.items()
    )


class _CountingRegistry:
    def __init__(self) -> None:
        self.lookups: list[str] = []

    def lookup(self, name: str) -> EntityDescriptor | None:
        self.lookups.append(name)
        return None


def test_document_without_references_is_unchanged() -> None:
    document = {
        "type": "array",
        "items": {"type": "object", "properties": {"n": {"type": "integer"}}},
    }

    result = dereference(json.dumps(document), _registry(Health=HEALTH_SCHEMA))

    assert result.to_json() == document


def test_external_reference_is_inlined_as_local_definition() -> None:
    result = dereference(REPORT_SCHEMA, _registry(Health=HEALTH_SCHEMA))

    assert result.definitions == {"Health": parse_schema(HEALTH_SCHEMA)}
    assert result.to_json()["properties"]["health"] == {"$ref": "#/definitions/Health"}


def test_local_definitions_are_not_looked_up() -> None:
    registry = _CountingRegistry()
    document = {**REPORT_SCHEMA, "definitions": {"Health": HEALTH_SCHEMA}}

    result = dereference(document, registry)

    assert registry.lookups == []
    assert result.to_json() == document


def test_unresolved_reference_names_the_identifier() -> None:
    with pytest.raises(UnresolvedReferenceError) as exc_info:
        dereference(REPORT_SCHEMA, _registry())

    assert exc_info.value.identifier == "Health"
    assert str(exc_info.value) == "entity Health not found"


def test_entity_without_schema_is_not_schema_capable() -> None:
    with pytest.raises(NotSchemaCapableError) as exc_info:
        dereference(REPORT_SCHEMA, _registry(Health=None))

    assert exc_info.value.identifier == "Health"


def test_components_prefixed_references_resolve_against_registry() -> None:
    document = {"$ref": "#/components/schemas/Health"}

    result = dereference(document, _registry(Health=HEALTH_SCHEMA))

    assert result.definitions is not None
    assert set(result.definitions) == {"Health"}


def test_input_node_is_not_mutated() -> None:
    node = parse_schema(REPORT_SCHEMA)

    dereference(node, _registry(Health=HEALTH_SCHEMA))

    assert node.definitions is None


def test_single_pass_does_not_resolve_inlined_references() -> None:
    dashboard = {"type": "object", "properties": {"report": {"$ref": "#/definitions/Report"}}}
    registry = _registry(Report=REPORT_SCHEMA)

    single = dereference(dashboard, registry)

    assert single.definitions is not None
    assert set(single.definitions) == {"Report"}
    with pytest.raises(UnresolvedReferenceError, match="Health"):
        dereference_transitively(dashboard, registry)


def test_transitive_dereference_collects_reference_chain() -> None:
    dashboard = {"type": "object", "properties": {"report": {"$ref": "#/definitions/Report"}}}
    registry = _registry(Report=REPORT_SCHEMA, Health=HEALTH_SCHEMA)

    result = dereference_transitively(dashboard, registry)

    assert result.definitions is not None
    assert set(result.definitions) == {"Health", "Report"}


def test_transitive_dereference_hoists_nested_definitions() -> None:
    nested_report = {**REPORT_SCHEMA, "definitions": {"Health": HEALTH_SCHEMA}}
    registry = _CountingRegistry()
    document = {
        "type": "object",
        "properties": {"report": {"$ref": "#/definitions/Report"}},
        "definitions": {"Report": nested_report},
    }

    result = dereference_transitively(document, registry)

    assert registry.lookups == []
    assert result.definitions is not None
    assert set(result.definitions) == {"Health", "Report"}


def test_rewrite_for_output_moves_reference_prefix() -> None:
    rewritten = rewrite_for_output(REPORT_SCHEMA, DEFINITIONS_PREFIX, COMPONENTS_PREFIX)

    assert rewritten.to_json()["properties"]["health"] == {"$ref": "#/components/schemas/Health"}
    assert REPORT_SCHEMA["properties"]["health"] == {"$ref": "#/definitions/Health"}


def test_rewrite_for_output_is_idempotent_and_reversible() -> None:
    once = rewrite_for_output(REPORT_SCHEMA)
    twice = rewrite_for_output(once)
    restored = rewrite_for_output(twice, COMPONENTS_PREFIX, DEFINITIONS_PREFIX)

    assert twice.to_json() == once.to_json()
    assert restored.to_json() == REPORT_SCHEMA


def test_rewrite_for_output_handles_unknown_prefixes() -> None:
    rewritten = rewrite_for_output({"$ref": "other.json#/types/Health"})

    assert rewritten.ref == "#/components/schemas/Health"


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("#/definitions/Health", "Health"),
        ("#/components/schemas/Health", "Health"),
        ("#/x/y/Health", "Health"),
        ("Health", "Health"),
    ],
)
def test_reference_identifier_strips_known_prefixes(token: str, expected: str) -> None:
    assert reference_identifier(token) == expected
