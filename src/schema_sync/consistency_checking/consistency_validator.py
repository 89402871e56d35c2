"""Runtime shape vs JSON Schema consistency checks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from schema_sync.diagnostics import (
    AdditionalPropertyError,
    CyclicSchemaError,
    Diagnostic,
    InterfaceWithoutSchemaError,
    MissingPropertyInSchemaError,
    MissingSchemaTypeError,
    NotNullableError,
    NotSchemaCapableError,
    OpenStructSchemaError,
    RuntimeShapeError,
    SchemaSyncError,
    SchemaTypeMismatchError,
    StrictMapMismatchError,
    UnresolvedReferenceError,
    UnsupportedTypeUnionError,
)
from schema_sync.entity_registry import EntityLookup
from schema_sync.reference_resolution import (
    DEFINITIONS_PREFIX,
    SchemaSource,
    dereference_transitively,
    reference_identifier,
)
from schema_sync.runtime_shapes import FieldKind, RuntimeType
from schema_sync.schema_model import SchemaNode, SchemaOrBool, parse_schema

# Fields assigned by the server; they may be missing from an entity schema.
DEFAULT_SERVER_DEFINED_FIELDS = frozenset({"id"})

_OPAQUE = RuntimeType(kind=FieldKind.OPAQUE)
_PRIMITIVE_MATCHES: dict[str, frozenset[FieldKind]] = {
    "boolean": frozenset({FieldKind.BOOLEAN}),
    "integer": frozenset({FieldKind.INTEGER}),
    "number": frozenset({FieldKind.INTEGER, FieldKind.NUMBER}),
    "string": frozenset({FieldKind.STRING, FieldKind.BYTES, FieldKind.TIMESTAMP}),
}


@dataclass(frozen=True)
class _CheckContext:
    """Read-only state shared by one consistency pass."""

    root: SchemaNode
    server_defined_fields: frozenset[str]


def check_consistency(
    schema: SchemaSource,
    shape: RuntimeType,
    root_name: str,
    *,
    server_defined_fields: Iterable[str] = DEFAULT_SERVER_DEFINED_FIELDS,
) -> None:
    """Raise the first mismatch between ``shape`` and its dereferenced ``schema``.

    Local references are resolved against the schema's own ``definitions``;
    dereference external references first. Breadcrumbs start at ``root_name``.
    """
    document = parse_schema(schema)
    context = _CheckContext(root=document, server_defined_fields=frozenset(server_defined_fields))
    _traverse(document, shape, context, omit_empty=False, breadcrumb=root_name, is_root=True)


def is_consistent(
    schema: SchemaSource,
    shape: RuntimeType,
    root_name: str,
    *,
    server_defined_fields: Iterable[str] = DEFAULT_SERVER_DEFINED_FIELDS,
) -> Diagnostic | None:
    """Return the first mismatch as a diagnostic, or None when consistent."""
    try:
        check_consistency(
            schema, shape, root_name, server_defined_fields=server_defined_fields
        )
    except SchemaSyncError as exc:
        return exc.to_diagnostic()
    return None


def check_entity_consistency(
    registry: EntityLookup,
    name: str,
    *,
    server_defined_fields: Iterable[str] = DEFAULT_SERVER_DEFINED_FIELDS,
) -> None:
    """Dereference a registered entity's schema and check it against its runtime shape."""
    descriptor = registry.lookup(name)
    if descriptor is None:
        raise UnresolvedReferenceError(name)
    if descriptor.schema is None:
        raise NotSchemaCapableError(name)
    if descriptor.runtime_shape is None:
        reason = descriptor.runtime_shape_error or "no runtime shape to compare"
        raise RuntimeShapeError(f"entity {name}: {reason}")
    document = dereference_transitively(descriptor.schema, registry)
    check_consistency(
        document, descriptor.runtime_shape, name, server_defined_fields=server_defined_fields
    )


def _traverse(
    node: SchemaNode | None,
    shape: RuntimeType,
    context: _CheckContext,
    *,
    omit_empty: bool,
    breadcrumb: str,
    is_root: bool,
) -> None:
    if shape.validation_exempt:
        return
    if node is None:
        if shape.kind is not FieldKind.OPAQUE:
            raise InterfaceWithoutSchemaError(shape.describe(), breadcrumb=breadcrumb)
        return

    node, ref_nullable = _resolve(node, context, breadcrumb)
    if shape.kind is FieldKind.OPAQUE:
        # opaque values leave structure entirely to the schema
        return

    schema_type, type_nullable = _schema_type(node, breadcrumb)
    _check_nullability(
        shape,
        ref_nullable or type_nullable,
        exempt=is_root or shape.schema_capable or omit_empty,
        breadcrumb=breadcrumb,
    )

    if schema_type in _PRIMITIVE_MATCHES:
        if shape.kind not in _PRIMITIVE_MATCHES[schema_type]:
            raise SchemaTypeMismatchError(schema_type, shape.describe(), breadcrumb=breadcrumb)
    elif schema_type == "object":
        _check_object(node, shape, context, breadcrumb)
    elif schema_type == "array":
        _check_array(node, shape, context, breadcrumb)
    else:
        raise SchemaTypeMismatchError(schema_type, shape.describe(), breadcrumb=breadcrumb)


def _resolve(
    node: SchemaNode, context: _CheckContext, breadcrumb: str
) -> tuple[SchemaNode, bool]:
    """Follow ``$ref`` and unwrap the ``oneOf: [null, {$ref}]`` nullable idiom."""
    if node.ref is not None:
        return _lookup_definition(node.ref, context, breadcrumb), False
    if node.type is not None or not node.one_of:
        return node, False

    nullable = False
    candidates: list[SchemaNode] = []
    for member in node.one_of:
        if isinstance(member, bool):
            continue
        if member.type == "null":
            nullable = True
        else:
            candidates.append(member)
    if len(candidates) != 1:
        return node, nullable
    inner, inner_nullable = _resolve(candidates[0], context, breadcrumb)
    return inner, nullable or inner_nullable


def _lookup_definition(token: str, context: _CheckContext, breadcrumb: str) -> SchemaNode:
    seen: set[str] = set()
    while True:
        identifier = reference_identifier(token, DEFINITIONS_PREFIX)
        if identifier in seen:
            raise CyclicSchemaError(f"reference {token} refers to itself", breadcrumb=breadcrumb)
        seen.add(identifier)
        definition = (context.root.definitions or {}).get(identifier)
        if definition is None or isinstance(definition, bool):
            raise UnresolvedReferenceError(identifier, breadcrumb=breadcrumb)
        if definition.ref is None:
            return definition
        token = definition.ref


def _schema_type(node: SchemaNode, breadcrumb: str) -> tuple[str, bool]:
    if node.type is None:
        raise MissingSchemaTypeError(breadcrumb=breadcrumb)
    if isinstance(node.type, str):
        return node.type, False

    # the only supported unions are of the form ["null", "<type>"]
    members = [member for member in node.type if member != "null"]
    if len(members) != 1:
        raise UnsupportedTypeUnionError(node.type, breadcrumb=breadcrumb)
    return members[0], len(members) != len(node.type)


def _check_nullability(
    shape: RuntimeType, nullable: bool, *, exempt: bool, breadcrumb: str
) -> None:
    if exempt:
        return
    if shape.nullable and not nullable:
        raise NotNullableError(breadcrumb=breadcrumb)
    if shape.kind is FieldKind.MAP:
        if not nullable:
            raise NotNullableError(breadcrumb=breadcrumb)
        return
    if nullable and not shape.nullable:
        raise NotNullableError(
            breadcrumb=breadcrumb,
            detail=f"schema is nullable but runtime type {shape.describe()} cannot be null",
        )


def _check_object(
    node: SchemaNode, shape: RuntimeType, context: _CheckContext, breadcrumb: str
) -> None:
    if shape.kind is FieldKind.OBJECT:
        _check_structure(node, shape, context, breadcrumb)
    elif shape.kind is FieldKind.MAP:
        _check_map(node, shape, context, breadcrumb)
    else:
        raise SchemaTypeMismatchError("map or object", shape.describe(), breadcrumb=breadcrumb)


def _check_structure(
    node: SchemaNode, shape: RuntimeType, context: _CheckContext, breadcrumb: str
) -> None:
    properties = node.properties or {}
    fields = [field for field in shape.fields if field.wire_name]
    if fields and node.additional_properties is True:
        raise OpenStructSchemaError(breadcrumb=breadcrumb)

    for field in fields:
        if field.wire_name not in properties:
            if field.wire_name in context.server_defined_fields:
                continue
            raise MissingPropertyInSchemaError(field.wire_name, breadcrumb=breadcrumb)
        prop = properties[field.wire_name]
        if isinstance(prop, bool):
            continue
        _traverse(
            prop,
            field.shape,
            context,
            omit_empty=field.skip_when_empty,
            breadcrumb=f"{breadcrumb}.{field.wire_name}",
            is_root=False,
        )

    wire_names = {field.wire_name for field in fields}
    for name in properties:
        if name not in wire_names:
            raise AdditionalPropertyError(name, breadcrumb=breadcrumb)


def _check_map(
    node: SchemaNode, shape: RuntimeType, context: _CheckContext, breadcrumb: str
) -> None:
    properties = node.properties or {}
    if node.additional_properties is False:
        raise StrictMapMismatchError(tuple(sorted(properties)), breadcrumb=breadcrumb)

    element = shape.element or _OPAQUE
    key_breadcrumb = f"{breadcrumb}[key]"
    if isinstance(node.additional_properties, SchemaNode):
        _traverse(
            node.additional_properties,
            element,
            context,
            omit_empty=False,
            breadcrumb=key_breadcrumb,
            is_root=False,
        )
    for name in sorted(properties):
        _traverse_schema_or_bool(
            properties[name], element, context, breadcrumb=f"{key_breadcrumb}.{name}"
        )


def _check_array(
    node: SchemaNode, shape: RuntimeType, context: _CheckContext, breadcrumb: str
) -> None:
    if shape.kind is not FieldKind.ARRAY:
        raise SchemaTypeMismatchError("array", shape.describe(), breadcrumb=breadcrumb)

    element = shape.element or _OPAQUE
    for members in (node.all_of, node.one_of, node.any_of):
        for index, member in enumerate(members or ()):
            _traverse_schema_or_bool(member, element, context, breadcrumb=f"{breadcrumb}.{index}")

    if node.items is None:
        return
    if isinstance(node.items, list):
        first: SchemaOrBool | None = node.items[0] if node.items else None
    else:
        first = node.items
    _traverse(
        first if isinstance(first, SchemaNode) else None,
        element,
        context,
        omit_empty=False,
        breadcrumb=f"{breadcrumb}.0",
        is_root=False,
    )


def _traverse_schema_or_bool(
    value: SchemaOrBool, shape: RuntimeType, context: _CheckContext, *, breadcrumb: str
) -> None:
    if isinstance(value, bool):
        return
    _traverse(value, shape, context, omit_empty=False, breadcrumb=breadcrumb, is_root=False)
