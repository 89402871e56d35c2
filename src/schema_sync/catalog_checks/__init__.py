"""Catalog check domain exports."""

from .catalog_use_cases import (
    CatalogCheckError,
    assemble_definitions,
    dereference_entity,
    load_catalog,
    run_consistency_checks,
    run_example_checks,
)
from .check_contracts import CatalogArtifacts, CheckOutcome, CheckRequest, EntityCheckResult

__all__ = [
    "CatalogArtifacts",
    "CatalogCheckError",
    "CheckOutcome",
    "CheckRequest",
    "EntityCheckResult",
    "assemble_definitions",
    "dereference_entity",
    "load_catalog",
    "run_consistency_checks",
    "run_example_checks",
]
