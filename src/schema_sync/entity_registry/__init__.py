"""Entity registry exports."""

from .entity_contracts import EntityDescriptor, EntityLookup, parse_example
from .nil_entity import NIL_ENTITY_NAME, NilEntity
from .registry import EntityRegistry

__all__ = [
    "EntityDescriptor",
    "EntityLookup",
    "EntityRegistry",
    "NIL_ENTITY_NAME",
    "NilEntity",
    "parse_example",
]
