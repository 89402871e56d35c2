"""Payload validation exports."""

from .payload_validator import (
    EmptyBodyError,
    FieldError,
    PayloadValidationError,
    validate_payload,
    validate_value,
)

__all__ = [
    "EmptyBodyError",
    "FieldError",
    "PayloadValidationError",
    "validate_payload",
    "validate_value",
]
