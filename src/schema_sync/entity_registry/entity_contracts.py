"""Entity registry entities."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import Any, Protocol

from schema_sync.capabilities import Named, SchemaCapable
from schema_sync.diagnostics import RuntimeShapeError, SchemaError
from schema_sync.runtime_shapes import RuntimeType, shape_of_value
from schema_sync.schema_model import SchemaNode, parse_schema


@dataclass(frozen=True)
class EntityDescriptor:
    """Named type with its schema, example payload and runtime shape.

    ``schema`` is None for entities that only expose a name. A dataclass entity
    whose fields cannot be described keeps ``runtime_shape`` None and records
    the reason in ``runtime_shape_error``.
    """

    name: str
    schema: SchemaNode | None
    example: Any = None
    runtime_shape: RuntimeType | None = None
    runtime_shape_error: str | None = None

    @property
    def schema_capable(self) -> bool:
        return self.schema is not None

    @classmethod
    def from_entity(cls, entity: Named) -> EntityDescriptor:
        """Describe an object exposing ``name()`` and optionally ``schema()``/``example()``."""
        if not isinstance(entity, Named):
            raise TypeError(f"{type(entity).__name__} does not expose name()")
        name = entity.name()
        runtime_shape, runtime_shape_error = _describe_runtime_shape(entity)
        if not isinstance(entity, SchemaCapable):
            return cls(
                name=name,
                schema=None,
                runtime_shape=runtime_shape,
                runtime_shape_error=runtime_shape_error,
            )

        try:
            schema = parse_schema(entity.schema())
        except SchemaError as exc:
            raise SchemaError(f"error parsing schema for {name}: {exc}") from exc
        return cls(
            name=name,
            schema=schema,
            example=parse_example(entity.example(), name),
            runtime_shape=runtime_shape,
            runtime_shape_error=runtime_shape_error,
        )


class EntityLookup(Protocol):
    """Read access to registered entities by name."""

    def lookup(self, name: str) -> EntityDescriptor | None: ...


def parse_example(raw: bytes | str | None, name: str) -> Any:
    """Decode an example payload; empty payloads mean no example."""
    if raw is None or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"error parsing example for {name}: {exc}") from exc


def _describe_runtime_shape(entity: object) -> tuple[RuntimeType | None, str | None]:
    if not dataclasses.is_dataclass(entity):
        return None, None
    try:
        return shape_of_value(entity), None
    except RuntimeShapeError as exc:
        return None, str(exc)
