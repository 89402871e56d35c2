"""Build runtime shape descriptors from dataclasses and type annotations."""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import inspect
import types
import uuid
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union, get_args, get_origin, get_type_hints

from schema_sync.capabilities import SchemaCapable, ValidationExemptible
from schema_sync.diagnostics import RuntimeShapeError

from .shape_models import FieldKind, RuntimeField, RuntimeType

WIRE_NAME = "wire_name"
OMIT_EMPTY = "omit_empty"

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Iterable,
    collections.abc.Collection,
)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_PRIMITIVE_KINDS: tuple[tuple[type, FieldKind], ...] = (
    (bool, FieldKind.BOOLEAN),
    (int, FieldKind.INTEGER),
    (float, FieldKind.NUMBER),
    (Decimal, FieldKind.NUMBER),
    (str, FieldKind.STRING),
    (bytes, FieldKind.BYTES),
    (bytearray, FieldKind.BYTES),
    (datetime.date, FieldKind.TIMESTAMP),
    (datetime.time, FieldKind.TIMESTAMP),
    (uuid.UUID, FieldKind.STRING),
)


def shape_of(annotation: Any) -> RuntimeType:
    """Describe a type annotation (dataclass, primitive, container, Optional ...).

    Dataclass fields map to wire names through ``field(metadata=...)``:
    ``wire_name`` renames a field (``"-"`` drops it) and ``omit_empty`` marks
    fields skipped when empty.
    """
    return _ShapeBuilder().build(annotation)


def shape_of_value(value: Any) -> RuntimeType:
    """Describe the type of ``value``, asking the instance itself about validation exemption."""
    return _ShapeBuilder(instance=value).build(type(value))


class _ShapeBuilder:
    def __init__(self, instance: Any = None) -> None:
        self._instance = instance
        self._building: set[type] = set()

    def build(self, annotation: Any) -> RuntimeType:
        if annotation is Any or annotation is object:
            return RuntimeType(kind=FieldKind.OPAQUE)

        origin = get_origin(annotation)
        if origin is Annotated:
            return self.build(get_args(annotation)[0])
        if origin is Union or origin is types.UnionType:
            return self._build_union(annotation)
        if origin is Literal:
            return self._build_literal(annotation)
        if origin in _SEQUENCE_ORIGINS:
            return RuntimeType(kind=FieldKind.ARRAY, element=self._sequence_element(annotation))
        if origin in _MAPPING_ORIGINS:
            args = get_args(annotation)
            element = self.build(args[1]) if len(args) == 2 else RuntimeType(FieldKind.OPAQUE)
            return RuntimeType(kind=FieldKind.MAP, element=element)

        if not isinstance(annotation, type):
            raise RuntimeShapeError(f"cannot describe type annotation {annotation!r}")
        return self._build_class(annotation)

    def _build_union(self, annotation: Any) -> RuntimeType:
        args = get_args(annotation)
        members = [arg for arg in args if arg is not type(None)]
        nullable = len(members) != len(args)
        if len(members) == 1:
            shape = self.build(members[0])
        else:
            # several concrete members have no single fixed shape
            shape = RuntimeType(kind=FieldKind.OPAQUE)
        return replace(shape, nullable=shape.nullable or nullable)

    def _build_literal(self, annotation: Any) -> RuntimeType:
        value_types = {type(value) for value in get_args(annotation)}
        if len(value_types) != 1:
            return RuntimeType(kind=FieldKind.OPAQUE)
        return self._build_class(value_types.pop())

    def _sequence_element(self, annotation: Any) -> RuntimeType:
        args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
        if not args:
            return RuntimeType(kind=FieldKind.OPAQUE)
        elements = [self.build(arg) for arg in args]
        if all(element == elements[0] for element in elements):
            return elements[0]
        return RuntimeType(kind=FieldKind.OPAQUE)

    def _build_class(self, cls: type) -> RuntimeType:
        if dataclasses.is_dataclass(cls):
            return self._build_dataclass(cls)
        if cls in _SEQUENCE_ORIGINS:
            return RuntimeType(kind=FieldKind.ARRAY, element=RuntimeType(FieldKind.OPAQUE))
        if cls in _MAPPING_ORIGINS:
            return RuntimeType(kind=FieldKind.MAP, element=RuntimeType(FieldKind.OPAQUE))
        if issubclass(cls, Enum) and not issubclass(cls, (str, int)):
            return RuntimeType(kind=FieldKind.OPAQUE, type_name=cls.__name__)
        for base, kind in _PRIMITIVE_KINDS:
            if issubclass(cls, base):
                return RuntimeType(kind=kind, validation_exempt=self._is_validation_exempt(cls))
        raise RuntimeShapeError(f"cannot describe type {cls.__qualname__}")

    def _build_dataclass(self, cls: type) -> RuntimeType:
        if cls in self._building:
            raise RuntimeShapeError(f"recursive type {cls.__qualname__} cannot be described")
        try:
            hints = get_type_hints(cls, include_extras=True)
        except NameError as exc:
            raise RuntimeShapeError(
                f"cannot resolve annotations of {cls.__qualname__}: {exc}"
            ) from exc

        self._building.add(cls)
        try:
            fields = tuple(
                RuntimeField(
                    declared_name=field.name,
                    wire_name=field.metadata.get(WIRE_NAME, field.name),
                    shape=self.build(hints[field.name]),
                    skip_when_empty=bool(field.metadata.get(OMIT_EMPTY, False)),
                )
                for field in dataclasses.fields(cls)
                if field.metadata.get(WIRE_NAME, field.name) != "-"
            )
        finally:
            self._building.discard(cls)

        return RuntimeType(
            kind=FieldKind.OBJECT,
            fields=fields,
            type_name=cls.__name__,
            schema_capable=issubclass(cls, SchemaCapable),
            validation_exempt=self._is_validation_exempt(cls),
        )

    def _is_validation_exempt(self, cls: type) -> bool:
        if not issubclass(cls, ValidationExemptible):
            return False
        if self._instance is not None and type(self._instance) is cls:
            return bool(self._instance.should_skip_schema_validation())
        hook = inspect.getattr_static(cls, "should_skip_schema_validation")
        if not isinstance(hook, (classmethod, staticmethod)):
            raise RuntimeShapeError(
                f"{cls.__qualname__}.should_skip_schema_validation must be a classmethod "
                "or staticmethod to be evaluated without an instance"
            )
        return bool(cls.should_skip_schema_validation())  # type: ignore[call-arg]
