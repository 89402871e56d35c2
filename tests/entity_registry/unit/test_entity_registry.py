"""Entity registry tests."""

from __future__ import annotations

import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import pytest
from schema_sync.diagnostics import DuplicateEntityError, SchemaError
from schema_sync.entity_registry import (
    NIL_ENTITY_NAME,
    EntityDescriptor,
    EntityRegistry,
    NilEntity,
    parse_example,
)
from schema_sync.runtime_shapes import FieldKind
from schema_sync.schema_model import parse_schema


class HealthEntity:
    def __init__(self, schema: bytes = b'{"type": "object"}', example: bytes = b"") -> None:
        self._schema = schema
        self._example = example

    def name(self) -> str:
        return "Health"

    def schema(self) -> bytes:
        return self._schema

    def example(self) -> bytes:
        return self._example


class NameOnlyEntity:
    def name(self) -> str:
        return "Opaque"


@dataclass
class Device:
    ident: uuid.UUID
    reading: complex

    def name(self) -> str:
        return "Device"

    def schema(self) -> bytes:
        return b'{"type": "object"}'

    def example(self) -> bytes:
        return b""


@dataclass
class Sensor:
    ident: uuid.UUID

    def name(self) -> str:
        return "Sensor"


def _descriptor(name: str, schema: str = '{"type": "string"}') -> EntityDescriptor:
    return EntityDescriptor(name=name, schema=parse_schema(schema))


def test_registry_looks_up_registered_descriptors() -> None:
    registry = EntityRegistry([_descriptor("Widget"), _descriptor("Owner")])

    assert registry.names() == ["Owner", "Widget"]
    assert "Widget" in registry
    assert len(registry) == 2
    assert registry.lookup("Widget") == _descriptor("Widget")
    assert registry.lookup("Missing") is None


def test_registering_entity_objects_parses_schema_and_example() -> None:
    registry = EntityRegistry()

    descriptor = registry.register(HealthEntity(example=b'{"status": "ok"}'))

    assert descriptor.name == "Health"
    assert descriptor.schema_capable is True
    assert descriptor.schema == parse_schema('{"type": "object"}')
    assert descriptor.example == {"status": "ok"}
    assert descriptor.runtime_shape is None


def test_uuid_fields_are_described_as_strings() -> None:
    descriptor = EntityRegistry().register(Sensor(ident=uuid.uuid4()))

    assert descriptor.runtime_shape is not None
    assert descriptor.runtime_shape.fields[0].shape.kind is FieldKind.STRING
    assert descriptor.runtime_shape_error is None


def test_undescribable_dataclass_still_registers_its_schema() -> None:
    registry = EntityRegistry()

    descriptor = registry.register(Device(ident=uuid.uuid4(), reading=1j))

    assert descriptor.schema == parse_schema('{"type": "object"}')
    assert descriptor.runtime_shape is None
    assert descriptor.runtime_shape_error is not None
    assert "complex" in descriptor.runtime_shape_error
    assert registry.lookup("Device") is descriptor


def test_nil_entity_registers_as_strict_empty_object() -> None:
    descriptor = EntityRegistry().register(NilEntity())

    assert descriptor.name == NIL_ENTITY_NAME
    assert descriptor.schema is not None
    assert descriptor.schema.additional_properties is False
    assert descriptor.schema.properties == {}
    assert descriptor.example == {}


def test_name_only_entity_has_no_schema() -> None:
    descriptor = EntityRegistry().register(NameOnlyEntity())

    assert descriptor.schema is None
    assert descriptor.schema_capable is False


def test_identical_registration_is_a_no_op() -> None:
    registry = EntityRegistry()
    first = registry.register(HealthEntity())

    second = registry.register(HealthEntity())

    assert second is first
    assert len(registry) == 1


def test_conflicting_registration_is_rejected() -> None:
    registry = EntityRegistry([HealthEntity()])

    with pytest.raises(DuplicateEntityError, match="Health"):
        registry.register(HealthEntity(schema=b'{"type": "string"}'))


def test_invalid_entity_schema_is_reported_with_entity_name() -> None:
    with pytest.raises(SchemaError, match="error parsing schema for Health"):
        EntityRegistry().register(HealthEntity(schema=b"{not json"))


def test_registering_unnamed_value_is_a_type_error() -> None:
    with pytest.raises(TypeError):
        EntityRegistry().register(object())  # type: ignore[arg-type]


def test_parse_example_handles_empty_and_invalid_payloads() -> None:
    assert parse_example(b"", "Health") is None
    assert parse_example("  ", "Health") is None
    assert parse_example('{"a": 1}', "Health") == {"a": 1}
    with pytest.raises(SchemaError, match="error parsing example for Health"):
        parse_example("{", "Health")


def test_concurrent_registration_keeps_every_entity() -> None:
    registry = EntityRegistry()
    names = [f"Entity{index}" for index in range(50)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda name: registry.register(_descriptor(name)), names))

    assert registry.names() == sorted(names)
