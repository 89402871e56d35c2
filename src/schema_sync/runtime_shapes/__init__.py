"""Runtime shape descriptor exports."""

from .shape_builder import OMIT_EMPTY, WIRE_NAME, shape_of, shape_of_value
from .shape_models import (
    FieldKind,
    RuntimeField,
    RuntimeType,
    array_of,
    map_of,
    optional,
    primitive,
    structure,
)

__all__ = [
    "FieldKind",
    "OMIT_EMPTY",
    "RuntimeField",
    "RuntimeType",
    "WIRE_NAME",
    "array_of",
    "map_of",
    "optional",
    "primitive",
    "shape_of",
    "shape_of_value",
    "structure",
]
