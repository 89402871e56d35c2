"""Catalog check use-case services."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import Any

from schema_sync.configuration import ConfigurationError, EntityConfig, load_configuration
from schema_sync.consistency_checking import check_entity_consistency
from schema_sync.diagnostics import (
    NotSchemaCapableError,
    RuntimeShapeError,
    SchemaSyncError,
    UnresolvedReferenceError,
)
from schema_sync.document_assembly import assemble_components
from schema_sync.entity_registry import EntityDescriptor, EntityRegistry, parse_example
from schema_sync.payload_validation import validate_value
from schema_sync.reference_resolution import (
    DEFINITIONS_PREFIX,
    dereference,
    dereference_transitively,
    rewrite_for_output,
)
from schema_sync.runtime_shapes import RuntimeType, shape_of
from schema_sync.schema_model import SchemaNode, parse_schema

from .check_contracts import (
    CatalogArtifacts,
    CheckOutcome,
    CheckRequest,
    EntityCheckResult,
)

_LOGGER = logging.getLogger(__name__)


class CatalogCheckError(Exception):
    """Raised when a catalog use case cannot be completed."""


def load_catalog(config_path: str) -> CatalogArtifacts:
    """Load the configuration and register every configured entity."""
    try:
        configuration = load_configuration(config_path)
        registry = EntityRegistry(_to_descriptor(entity) for entity in configuration.entities)
    except (ConfigurationError, SchemaSyncError, OSError) as exc:
        raise CatalogCheckError(str(exc)) from exc
    return CatalogArtifacts(configuration=configuration, registry=registry)


def dereference_entity(
    config_path: str, entity_name: str, *, transitive: bool = False
) -> SchemaNode:
    """Return the schema of one entity with external references inlined."""
    artifacts = load_catalog(config_path)
    descriptor = artifacts.registry.lookup(entity_name)
    try:
        if descriptor is None:
            raise UnresolvedReferenceError(entity_name)
        if descriptor.schema is None:
            raise NotSchemaCapableError(entity_name)
        resolve = dereference_transitively if transitive else dereference
        return resolve(descriptor.schema, artifacts.registry)
    except SchemaSyncError as exc:
        raise CatalogCheckError(str(exc)) from exc


def run_consistency_checks(request: CheckRequest) -> CheckOutcome:
    """Check every selected entity that declares a runtime type against its schema."""
    artifacts = load_catalog(request.config_path)
    server_defined_fields = artifacts.configuration.consistency.server_defined_fields

    def _check(descriptor: EntityDescriptor) -> bool:
        if descriptor.runtime_shape is None and descriptor.runtime_shape_error is None:
            return False
        check_entity_consistency(
            artifacts.registry,
            descriptor.name,
            server_defined_fields=server_defined_fields,
        )
        return True

    return _run_entity_checks(artifacts, request, _check)


def run_example_checks(request: CheckRequest) -> CheckOutcome:
    """Validate every selected entity example against its dereferenced schema."""
    artifacts = load_catalog(request.config_path)

    def _check(descriptor: EntityDescriptor) -> bool:
        if descriptor.example is None or descriptor.schema is None:
            return False
        document = dereference_transitively(descriptor.schema, artifacts.registry)
        local_document = rewrite_for_output(document, to_prefix=DEFINITIONS_PREFIX)
        validate_value(local_document, descriptor.example)
        return True

    return _run_entity_checks(artifacts, request, _check)


def assemble_definitions(config_path: str) -> dict[str, Any]:
    """Assemble the published definitions table for every configured entity."""
    artifacts = load_catalog(config_path)
    try:
        return assemble_components(
            artifacts.registry.descriptors(),
            reference_prefix=artifacts.configuration.output.reference_prefix,
        )
    except SchemaSyncError as exc:
        raise CatalogCheckError(str(exc)) from exc


def _run_entity_checks(
    artifacts: CatalogArtifacts,
    request: CheckRequest,
    check: Callable[[EntityDescriptor], bool],
) -> CheckOutcome:
    results: list[EntityCheckResult] = []
    skipped: list[str] = []
    for descriptor in _selected_descriptors(artifacts.registry, request.entity_names):
        try:
            checked = check(descriptor)
        except SchemaSyncError as exc:
            _LOGGER.debug("entity %s failed: %s", descriptor.name, exc)
            results.append(
                EntityCheckResult(entity_name=descriptor.name, diagnostic=exc.to_diagnostic())
            )
            continue
        if checked:
            results.append(EntityCheckResult(entity_name=descriptor.name, diagnostic=None))
        else:
            skipped.append(descriptor.name)
    return CheckOutcome(results=tuple(results), skipped=tuple(skipped))


def _selected_descriptors(
    registry: EntityRegistry, entity_names: tuple[str, ...]
) -> list[EntityDescriptor]:
    if not entity_names:
        return registry.descriptors()
    selected = []
    for name in entity_names:
        descriptor = registry.lookup(name)
        if descriptor is None:
            raise CatalogCheckError(f"entity {name} is not defined in the configuration")
        selected.append(descriptor)
    return selected


def _to_descriptor(entity: EntityConfig) -> EntityDescriptor:
    return EntityDescriptor(
        name=entity.name,
        schema=parse_schema(entity.schema.text),
        example=parse_example(entity.example.text, entity.name) if entity.example else None,
        runtime_shape=_import_runtime_shape(entity.runtime_type) if entity.runtime_type else None,
    )


def _import_runtime_shape(reference: str) -> RuntimeType:
    module_name, _, attribute_path = reference.partition(":")
    try:
        target: Any = importlib.import_module(module_name)
        for attribute in attribute_path.split("."):
            target = getattr(target, attribute)
    except (ImportError, AttributeError) as exc:
        raise RuntimeShapeError(f"cannot import runtime type {reference}: {exc}") from exc
    return shape_of(target)
