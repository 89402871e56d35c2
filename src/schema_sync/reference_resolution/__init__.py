"""Reference resolution exports."""

from .dereferencer import (
    SchemaSource,
    dereference,
    dereference_transitively,
    rewrite_for_output,
)
from .reference_tokens import (
    COMPONENTS_PREFIX,
    DEFINITIONS_PREFIX,
    KNOWN_PREFIXES,
    reference_identifier,
)

__all__ = [
    "COMPONENTS_PREFIX",
    "DEFINITIONS_PREFIX",
    "KNOWN_PREFIXES",
    "SchemaSource",
    "dereference",
    "dereference_transitively",
    "reference_identifier",
    "rewrite_for_output",
]
