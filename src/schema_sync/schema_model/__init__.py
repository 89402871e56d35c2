"""Schema document model exports."""

from .schema_nodes import (
    SchemaNode,
    SchemaOrBool,
    canonical_schema_text,
    dump_schema,
    parse_schema,
)

__all__ = [
    "SchemaNode",
    "SchemaOrBool",
    "canonical_schema_text",
    "dump_schema",
    "parse_schema",
]
