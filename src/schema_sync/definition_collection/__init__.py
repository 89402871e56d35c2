"""Definition collection exports."""

from .definition_collector import DefinitionCollector, DefinitionsTable

__all__ = ["DefinitionCollector", "DefinitionsTable"]
