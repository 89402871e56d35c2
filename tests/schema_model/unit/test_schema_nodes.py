"""Schema node model tests."""

from __future__ import annotations

import json

import pytest
from schema_sync.diagnostics import SchemaError
from schema_sync.schema_model import SchemaNode, canonical_schema_text, dump_schema, parse_schema


def test_parse_schema_keeps_unmodelled_keywords() -> None:
    document = {
        "type": "object",
        "description": "A widget",
        "properties": {
            "name": {"type": "string", "format": "hostname", "enum": ["a", "b"]},
            "open": True,
        },
        "required": ["name"],
        "additionalProperties": False,
        "examples": [{"name": "a"}],
    }

    node = parse_schema(json.dumps(document))

    assert node.type == "object"
    assert node.required == ("name",)
    assert node.additional_properties is False
    assert node.properties is not None
    assert node.properties["open"] is True
    assert node.extra == {"description": "A widget"}
    assert node.to_json() == document


def test_parse_schema_reads_tuple_items_and_type_unions() -> None:
    node = parse_schema(
        {
            "type": ["array", "null"],
            "items": [{"type": "string"}, {"type": "integer"}],
            "additionalItems": False,
        }
    )

    assert node.type == ("array", "null")
    assert isinstance(node.items, list)
    assert [item.type for item in node.items if isinstance(item, SchemaNode)] == [
        "string",
        "integer",
    ]
    assert node.to_json()["type"] == ["array", "null"]


def test_parse_schema_reports_position_of_malformed_nodes() -> None:
    with pytest.raises(SchemaError) as exc_info:
        parse_schema({"type": "object", "properties": {"count": {"type": 5}}})

    assert exc_info.value.breadcrumb == "#/properties/count"


@pytest.mark.parametrize(
    "source",
    [
        "not json",
        "[1, 2]",
        {"required": "name"},
        {"allOf": {"type": "string"}},
        {"$ref": 42},
    ],
)
def test_parse_schema_rejects_invalid_documents(source: object) -> None:
    with pytest.raises(SchemaError):
        parse_schema(source)  # type: ignore[arg-type]


def test_parse_schema_copies_existing_nodes() -> None:
    original = parse_schema({"type": "object", "properties": {"a": {"type": "string"}}})

    copied = parse_schema(original)
    copied.with_definition("Extra", SchemaNode(type="string"))

    assert original.definitions is None
    assert copied.definitions == {"Extra": SchemaNode(type="string")}


def test_canonical_text_ignores_examples_and_key_order() -> None:
    first = parse_schema('{"type": "string", "format": "email", "examples": ["a@b.c"]}')
    second = parse_schema('{"format": "email", "type": "string"}')

    assert canonical_schema_text(first) == canonical_schema_text(second)
    assert first.examples == ["a@b.c"]


def test_dump_schema_emits_ref_keyword() -> None:
    node = SchemaNode(ref="#/definitions/Owner")

    assert json.loads(dump_schema(node)) == {"$ref": "#/definitions/Owner"}
