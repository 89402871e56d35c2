"""Process-wide mapping from entity name to entity descriptor."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from schema_sync.capabilities import Named
from schema_sync.diagnostics import DuplicateEntityError

from .entity_contracts import EntityDescriptor

_LOGGER = logging.getLogger(__name__)


class EntityRegistry:
    """Entity descriptors keyed by name.

    Populated during start-up and read afterwards. Registration and lookup share
    one lock so a lookup never observes a half-registered entity.
    """

    def __init__(self, entities: Iterable[EntityDescriptor | Named] = ()) -> None:
        self._entities: dict[str, EntityDescriptor] = {}
        self._lock = threading.RLock()
        for entity in entities:
            self.register(entity)

    def register(self, entity: EntityDescriptor | Named) -> EntityDescriptor:
        """Register an entity or descriptor; re-registering an identical one is a no-op."""
        descriptor = (
            entity if isinstance(entity, EntityDescriptor) else EntityDescriptor.from_entity(entity)
        )
        with self._lock:
            existing = self._entities.get(descriptor.name)
            if existing is not None:
                if existing != descriptor:
                    raise DuplicateEntityError(descriptor.name)
                return existing
            self._entities[descriptor.name] = descriptor
        _LOGGER.debug("registered entity %s", descriptor.name)
        return descriptor

    def lookup(self, name: str) -> EntityDescriptor | None:
        with self._lock:
            return self._entities.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._entities)

    def descriptors(self) -> list[EntityDescriptor]:
        with self._lock:
            return [self._entities[name] for name in sorted(self._entities)]

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._entities

    def __len__(self) -> int:
        with self._lock:
            return len(self._entities)
