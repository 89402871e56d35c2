"""Assemble the published definitions table of an API document."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError as JsonSchemaDefinitionError

from schema_sync.definition_collection import DefinitionCollector, DefinitionsTable
from schema_sync.diagnostics import NotSchemaCapableError, SchemaError, UnresolvedReferenceError
from schema_sync.entity_registry import NIL_ENTITY_NAME, EntityDescriptor
from schema_sync.graph_walking import collect_refs
from schema_sync.reference_resolution import (
    COMPONENTS_PREFIX,
    DEFINITIONS_PREFIX,
    reference_identifier,
    rewrite_for_output,
)
from schema_sync.schema_model import SchemaNode

_LOGGER = logging.getLogger(__name__)


def entity_document(
    descriptor: EntityDescriptor, *, reference_prefix: str = COMPONENTS_PREFIX
) -> SchemaNode:
    """Return the entity schema with its example attached and references published."""
    if descriptor.schema is None:
        raise NotSchemaCapableError(descriptor.name)
    document = rewrite_for_output(descriptor.schema, DEFINITIONS_PREFIX, reference_prefix)
    if descriptor.example is not None:
        document.examples = [copy.deepcopy(descriptor.example)]
    return document


def collect_entity_definitions(
    descriptors: Iterable[EntityDescriptor], *, reference_prefix: str = COMPONENTS_PREFIX
) -> DefinitionsTable:
    """Merge every entity document into one table; empty-payload entities are skipped."""
    collector = DefinitionCollector()
    for descriptor in descriptors:
        if descriptor.name == NIL_ENTITY_NAME:
            continue
        collector.add(
            descriptor.name, entity_document(descriptor, reference_prefix=reference_prefix)
        )
    table = collector.finalize()
    _LOGGER.debug("collected %d definitions", len(table))
    return table


def assemble_components(
    descriptors: Iterable[EntityDescriptor],
    *,
    reference_prefix: str = COMPONENTS_PREFIX,
    check_schemas: bool = True,
) -> dict[str, Any]:
    """Build ``{"components": {"schemas": ...}}`` from entity descriptors.

    Every reference in the table must name another entry. With
    ``check_schemas`` each entry must also be a valid JSON Schema.
    """
    table = collect_entity_definitions(descriptors, reference_prefix=reference_prefix)
    _check_references(table, reference_prefix)
    if check_schemas:
        _check_schemas(table)
    return {"components": {"schemas": {name: node.to_json() for name, node in table.items()}}}


def _check_references(table: DefinitionsTable, reference_prefix: str) -> None:
    for name, node in table.items():
        for slot in collect_refs(node):
            identifier = reference_identifier(slot.value, reference_prefix)
            if not slot.value.startswith(reference_prefix) or identifier not in table:
                raise UnresolvedReferenceError(identifier, breadcrumb=name)


def _check_schemas(table: DefinitionsTable) -> None:
    for name, node in table.items():
        try:
            Draft7Validator.check_schema(node.to_json())
        except JsonSchemaDefinitionError as exc:
            raise SchemaError(f"invalid JSON schema: {exc.message}", breadcrumb=name) from exc
