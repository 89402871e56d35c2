"""Validate JSON payloads against entity schemas with the jsonschema engine."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError as JsonSchemaDefinitionError
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

from schema_sync.diagnostics import SchemaError, SchemaSyncError
from schema_sync.reference_resolution import SchemaSource
from schema_sync.schema_model import parse_schema

# Composition errors are reported through the failures of their sub-schemas.
_COMPOSITION_VALIDATORS = frozenset({"allOf", "anyOf", "oneOf"})


@dataclass(frozen=True)
class FieldError:
    """One payload field that failed validation."""

    field: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


class PayloadValidationError(SchemaSyncError):
    """Raised when a payload does not satisfy its schema."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = sorted(errors, key=lambda error: error.message)
        super().__init__(self.to_json())

    def to_json(self) -> str:
        return json.dumps({"errors": [{"message": error.message} for error in self.errors]})


class EmptyBodyError(PayloadValidationError):
    """Raised when the payload is empty."""

    def __init__(self) -> None:
        super().__init__([FieldError(field="", message="body is empty")])


def validate_payload(schema: SchemaSource, body: bytes | str) -> Any:
    """Validate raw JSON ``body`` against a dereferenced ``schema`` and return the decoded value."""
    if not body or not body.strip():
        raise EmptyBodyError()
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise PayloadValidationError(
            [FieldError(field="", message=f"body is not valid JSON: {exc}")]
        ) from exc
    validate_value(schema, payload)
    return payload


def validate_value(schema: SchemaSource, value: Any) -> None:
    """Validate an already decoded value."""
    document = parse_schema(schema).to_json()
    try:
        Draft7Validator.check_schema(document)
    except JsonSchemaDefinitionError as exc:
        raise SchemaError(f"invalid JSON schema: {exc.message}") from exc

    validator = Draft7Validator(document, format_checker=Draft7Validator.FORMAT_CHECKER)
    errors = [
        _to_field_error(leaf)
        for error in validator.iter_errors(value)
        for leaf in _leaf_errors(error)
    ]
    if errors:
        raise PayloadValidationError(errors)


def _leaf_errors(error: JsonSchemaValidationError) -> Iterator[JsonSchemaValidationError]:
    if error.validator in _COMPOSITION_VALIDATORS and error.context:
        for child in error.context:
            yield from _leaf_errors(child)
    else:
        yield error


def _to_field_error(error: JsonSchemaValidationError) -> FieldError:
    field_path = _field_path(error)
    details: dict[str, Any] = {"validator": error.validator, "constraint": error.validator_value}
    formatter = _MESSAGE_FORMATTERS.get(str(error.validator))
    if formatter is None:
        message = f"[{error.validator}]: {error.message}"
    else:
        message = formatter(field_path, error)
    return FieldError(field=field_path, message=message, details=details)


def _field_path(error: JsonSchemaValidationError) -> str:
    path = ".".join(str(part) for part in error.absolute_path)
    return path or "(root)"


def _missing_property(error: JsonSchemaValidationError) -> str:
    # one error per missing name, each reported as "<repr(name)> is a required property"
    instance = error.instance if isinstance(error.instance, dict) else {}
    missing = [name for name in error.validator_value if name not in instance]
    for name in missing:
        if error.message.startswith(repr(name)):
            return name
    return ", ".join(missing) or error.message


def _unexpected_keys(error: JsonSchemaValidationError) -> str:
    allowed = error.schema.get("properties", {}) if isinstance(error.schema, dict) else {}
    instance = error.instance if isinstance(error.instance, dict) else {}
    return ", ".join(sorted(key for key in instance if key not in allowed))


_MESSAGE_FORMATTERS: dict[str, Callable[[str, JsonSchemaValidationError], str]] = {
    "required": lambda field_path, error: f"Param '{_missing_property(error)}' is missing",
    "minLength": lambda field_path, error: f"Param '{field_path}' is too short",
    "maxLength": lambda field_path, error: f"Param '{field_path}' is too long",
    "minItems": lambda field_path, error: (
        f"Param '{field_path}' must contain at least {error.validator_value} items"
    ),
    "maxItems": lambda field_path, error: (
        f"Param '{field_path}' must contain at most {error.validator_value} items"
    ),
    "additionalProperties": lambda field_path, error: (
        f"Param '{field_path}' doesn't allow key: {_unexpected_keys(error)}"
    ),
    "type": lambda field_path, error: (
        f"Param '{field_path}' should be of type {error.validator_value}"
    ),
    "pattern": lambda field_path, error: (
        f"Param '{field_path}' should match pattern {error.validator_value}"
    ),
    "format": lambda field_path, error: (
        f"Param '{field_path}' should be a valid {error.validator_value}"
    ),
}
