"""Document assembly exports."""

from .components_assembly import assemble_components, collect_entity_definitions, entity_document

__all__ = ["assemble_components", "collect_entity_definitions", "entity_document"]
