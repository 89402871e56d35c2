"""Consistency checking exports."""

from .consistency_validator import (
    DEFAULT_SERVER_DEFINED_FIELDS,
    check_consistency,
    check_entity_consistency,
    is_consistent,
)

__all__ = [
    "DEFAULT_SERVER_DEFINED_FIELDS",
    "check_consistency",
    "check_entity_consistency",
    "is_consistent",
]
