"""In-memory JSON Schema document model."""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from schema_sync.diagnostics import SchemaError

SchemaOrBool = Union["SchemaNode", bool]

_SINGLE_SCHEMA_KEYWORDS = {
    "additionalItems": "additional_items",
    "contains": "contains",
    "additionalProperties": "additional_properties",
    "not": "not_",
}
_SCHEMA_LIST_KEYWORDS = {
    "allOf": "all_of",
    "anyOf": "any_of",
    "oneOf": "one_of",
}
_KNOWN_KEYWORDS = frozenset(
    {
        "$ref",
        "type",
        "properties",
        "items",
        "definitions",
        "required",
        "examples",
        *_SINGLE_SCHEMA_KEYWORDS,
        *_SCHEMA_LIST_KEYWORDS,
    }
)


@dataclass
class SchemaNode:  # pylint: disable=too-many-instance-attributes
    """One JSON Schema node.

    Keywords the resolver and validator reason about get their own attribute.
    Everything else (``format``, ``enum``, ``description`` ...) is kept verbatim
    in ``extra`` so that documents survive a parse/serialize round trip.
    """

    type: str | tuple[str, ...] | None = None
    properties: dict[str, SchemaOrBool] | None = None
    items: SchemaOrBool | list[SchemaOrBool] | None = None
    additional_items: SchemaOrBool | None = None
    contains: SchemaOrBool | None = None
    additional_properties: SchemaOrBool | None = None
    all_of: list[SchemaOrBool] | None = None
    any_of: list[SchemaOrBool] | None = None
    one_of: list[SchemaOrBool] | None = None
    not_: SchemaOrBool | None = None
    ref: str | None = None
    definitions: dict[str, SchemaOrBool] | None = None
    required: tuple[str, ...] | None = None
    examples: list[Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, value: Any, *, path: str = "#") -> SchemaNode:
        """Build a node from decoded JSON; the value must be an object."""
        if not isinstance(value, Mapping):
            raise SchemaError(
                f"schema node must be an object, got {type(value).__name__}", breadcrumb=path
            )

        node = cls(
            type=_parse_type(value.get("type"), path),
            ref=_parse_ref(value.get("$ref"), path),
            properties=_parse_schema_map(value.get("properties"), f"{path}/properties"),
            definitions=_parse_schema_map(value.get("definitions"), f"{path}/definitions"),
            items=_parse_items(value.get("items"), f"{path}/items"),
            required=_parse_required(value.get("required"), path),
            examples=_parse_examples(value.get("examples"), path),
            extra={
                key: copy.deepcopy(item)
                for key, item in value.items()
                if key not in _KNOWN_KEYWORDS
            },
        )
        for keyword, attribute in _SINGLE_SCHEMA_KEYWORDS.items():
            if keyword in value:
                setattr(node, attribute, _parse_schema_or_bool(value[keyword], f"{path}/{keyword}"))
        for keyword, attribute in _SCHEMA_LIST_KEYWORDS.items():
            if keyword in value:
                setattr(node, attribute, _parse_schema_list(value[keyword], f"{path}/{keyword}"))
        return node

    def to_json(self) -> dict[str, Any]:
        """Return the wire (decoded JSON) form of this node."""
        result: dict[str, Any] = {}
        if self.ref is not None:
            result["$ref"] = self.ref
        if self.type is not None:
            result["type"] = self.type if isinstance(self.type, str) else list(self.type)
        for key, item in self.extra.items():
            result[key] = copy.deepcopy(item)
        if self.properties is not None:
            result["properties"] = _dump_schema_map(self.properties)
        if self.required is not None:
            result["required"] = list(self.required)
        if self.additional_properties is not None:
            result["additionalProperties"] = _dump_schema_or_bool(self.additional_properties)
        if self.items is not None:
            if isinstance(self.items, list):
                result["items"] = [_dump_schema_or_bool(item) for item in self.items]
            else:
                result["items"] = _dump_schema_or_bool(self.items)
        if self.additional_items is not None:
            result["additionalItems"] = _dump_schema_or_bool(self.additional_items)
        if self.contains is not None:
            result["contains"] = _dump_schema_or_bool(self.contains)
        for keyword, attribute in _SCHEMA_LIST_KEYWORDS.items():
            members = getattr(self, attribute)
            if members is not None:
                result[keyword] = [_dump_schema_or_bool(member) for member in members]
        if self.not_ is not None:
            result["not"] = _dump_schema_or_bool(self.not_)
        if self.definitions is not None:
            result["definitions"] = _dump_schema_map(self.definitions)
        if self.examples is not None:
            result["examples"] = copy.deepcopy(self.examples)
        return result

    def copy(self) -> SchemaNode:
        return copy.deepcopy(self)

    def with_definition(self, name: str, schema: SchemaOrBool) -> None:
        if self.definitions is None:
            self.definitions = {}
        self.definitions[name] = schema


def parse_schema(source: SchemaNode | Mapping[str, Any] | str | bytes) -> SchemaNode:
    """Parse a schema document from text, bytes, decoded JSON or an existing node.

    Existing nodes are deep-copied so callers never share mutable state.
    """
    if isinstance(source, SchemaNode):
        return source.copy()
    if isinstance(source, (str, bytes, bytearray)):
        try:
            decoded = json.loads(source)
        except json.JSONDecodeError as exc:
            raise SchemaError(f"Invalid JSON schema: {exc}") from exc
        return SchemaNode.from_json(decoded)
    return SchemaNode.from_json(source)


def dump_schema(node: SchemaNode, *, indent: int | None = None) -> str:
    return json.dumps(node.to_json(), indent=indent)


def canonical_schema_text(node: SchemaNode) -> str:
    """Serialize ``node`` without examples and with sorted keys for equality checks."""
    stripped = node.copy()
    stripped.examples = None
    return json.dumps(stripped.to_json(), sort_keys=True, separators=(",", ":"))


def _parse_type(value: Any, path: str) -> str | tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, Sequence) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise SchemaError("type must be a string or a list of strings", breadcrumb=path)


def _parse_ref(value: Any, path: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SchemaError("$ref must be a string", breadcrumb=path)
    return value


def _parse_required(value: Any, path: str) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise SchemaError("required must be a list of strings", breadcrumb=path)
    if not all(isinstance(item, str) for item in value):
        raise SchemaError("required must be a list of strings", breadcrumb=path)
    return tuple(value)


def _parse_examples(value: Any, path: str) -> list[Any] | None:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise SchemaError("examples must be a list", breadcrumb=path)
    return copy.deepcopy(list(value))


def _parse_schema_or_bool(value: Any, path: str) -> SchemaOrBool:
    if isinstance(value, bool):
        return value
    return SchemaNode.from_json(value, path=path)


def _parse_schema_map(value: Any, path: str) -> dict[str, SchemaOrBool] | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise SchemaError("expected an object of schemas", breadcrumb=path)
    return {key: _parse_schema_or_bool(item, f"{path}/{key}") for key, item in value.items()}


def _parse_schema_list(value: Any, path: str) -> list[SchemaOrBool]:
    if isinstance(value, (str, Mapping)) or not isinstance(value, Sequence):
        raise SchemaError("expected a list of schemas", breadcrumb=path)
    return [_parse_schema_or_bool(item, f"{path}/{index}") for index, item in enumerate(value)]


def _parse_items(value: Any, path: str) -> SchemaOrBool | list[SchemaOrBool] | None:
    if value is None:
        return None
    if isinstance(value, list):
        return _parse_schema_list(value, path)
    return _parse_schema_or_bool(value, path)


def _dump_schema_or_bool(value: SchemaOrBool) -> Any:
    if isinstance(value, bool):
        return value
    return value.to_json()


def _dump_schema_map(value: Mapping[str, SchemaOrBool]) -> dict[str, Any]:
    return {key: _dump_schema_or_bool(item) for key, item in value.items()}
