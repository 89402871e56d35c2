"""Structural descriptors of runtime types."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class FieldKind(str, Enum):
    """Kinds a runtime value can take on the wire."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    BYTES = "bytes"
    TIMESTAMP = "timestamp"
    OBJECT = "object"
    MAP = "map"
    ARRAY = "array"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class RuntimeType:  # pylint: disable=too-many-instance-attributes
    """Shape of one runtime type.

    ``nullable`` marks optional (may be absent or None) values. ``fields`` is
    only populated for ``OBJECT`` kinds and ``element`` only for ``ARRAY`` and
    ``MAP`` kinds.
    """

    kind: FieldKind
    nullable: bool = False
    fields: tuple[RuntimeField, ...] = ()
    element: RuntimeType | None = None
    type_name: str = ""
    schema_capable: bool = False
    validation_exempt: bool = False

    def describe(self) -> str:
        label = self.type_name or self.kind.value
        return f"optional {label}" if self.nullable else label


@dataclass(frozen=True)
class RuntimeField:
    """One declared field of a structured runtime type."""

    declared_name: str
    wire_name: str
    shape: RuntimeType
    skip_when_empty: bool = False

    @property
    def kind(self) -> FieldKind:
        return self.shape.kind

    @property
    def nullable(self) -> bool:
        return self.shape.nullable


def primitive(kind: FieldKind, *, nullable: bool = False) -> RuntimeType:
    return RuntimeType(kind=kind, nullable=nullable)


def optional(shape: RuntimeType) -> RuntimeType:
    return replace(shape, nullable=True)


def array_of(element: RuntimeType, *, nullable: bool = False) -> RuntimeType:
    return RuntimeType(kind=FieldKind.ARRAY, element=element, nullable=nullable)


def map_of(element: RuntimeType, *, nullable: bool = False) -> RuntimeType:
    return RuntimeType(kind=FieldKind.MAP, element=element, nullable=nullable)


def structure(
    type_name: str, *fields: RuntimeField, nullable: bool = False, schema_capable: bool = False
) -> RuntimeType:
    return RuntimeType(
        kind=FieldKind.OBJECT,
        fields=tuple(fields),
        type_name=type_name,
        nullable=nullable,
        schema_capable=schema_capable,
    )
