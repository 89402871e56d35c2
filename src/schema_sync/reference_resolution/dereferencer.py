"""Resolve schema references against local definitions and the entity registry."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from schema_sync.diagnostics import NotSchemaCapableError, UnresolvedReferenceError
from schema_sync.entity_registry import EntityLookup
from schema_sync.graph_walking import RefSlot, collect_refs, walk
from schema_sync.schema_model import SchemaNode, parse_schema

from .reference_tokens import COMPONENTS_PREFIX, DEFINITIONS_PREFIX, reference_identifier

_LOGGER = logging.getLogger(__name__)

SchemaSource = SchemaNode | Mapping[str, Any] | str | bytes


def dereference(schema: SchemaSource, registry: EntityLookup) -> SchemaNode:
    """Return a copy of ``schema`` whose external references are inlined as definitions.

    References already satisfied by the document's own ``definitions`` are left
    alone. Every other reference is looked up in ``registry`` and the entity
    schema is added under its identifier. Inlined schemas are not resolved
    further; call again to resolve transitive references.
    """
    document = parse_schema(schema)
    local_names = set(document.definitions or {})
    for slot in collect_refs(document):
        identifier = reference_identifier(slot.value, DEFINITIONS_PREFIX)
        if identifier in local_names:
            continue
        descriptor = registry.lookup(identifier)
        if descriptor is None:
            raise UnresolvedReferenceError(identifier)
        if descriptor.schema is None:
            raise NotSchemaCapableError(identifier)
        _LOGGER.debug("inlining definition %s", identifier)
        document.with_definition(identifier, descriptor.schema.copy())
        local_names.add(identifier)
    return document


def dereference_transitively(
    schema: SchemaSource, registry: EntityLookup, *, max_rounds: int = 32
) -> SchemaNode:
    """Repeat ``dereference`` until the document is self-contained."""
    document = parse_schema(schema)
    for _ in range(max_rounds):
        before = set(document.definitions or {})
        document = dereference(_hoist_nested_definitions(document), registry)
        if set(document.definitions or {}) == before:
            return document
    return document


def rewrite_for_output(
    schema: SchemaSource,
    from_prefix: str = DEFINITIONS_PREFIX,
    to_prefix: str = COMPONENTS_PREFIX,
) -> SchemaNode:
    """Return a copy of ``schema`` with every reference moved from one prefix to another.

    Definitions nested below the root are rewritten as well.
    """
    document = parse_schema(schema)
    for slot in _refs_including_nested_definitions(document):
        slot.value = to_prefix + reference_identifier(slot.value, from_prefix, to_prefix)
    return document


def _refs_including_nested_definitions(document: SchemaNode) -> list[RefSlot]:
    slots: list[RefSlot] = []
    pending = [document]
    while pending:
        root = pending.pop()
        slots.extend(collect_refs(root))

        def _queue_nested(node: SchemaNode, root: SchemaNode = root) -> None:
            if node is not root:
                pending.extend(
                    nested
                    for nested in (node.definitions or {}).values()
                    if isinstance(nested, SchemaNode)
                )

        walk(root, _queue_nested)
    return slots


def _hoist_nested_definitions(document: SchemaNode) -> SchemaNode:
    """Lift definitions carried by inlined definitions up to the root table."""
    pending = list((document.definitions or {}).values())
    while pending:
        definition = pending.pop()
        if isinstance(definition, bool) or not definition.definitions:
            continue
        for name, nested in definition.definitions.items():
            if name not in (document.definitions or {}):
                document.with_definition(name, nested)
                pending.append(nested)
    return document
