"""Capability interfaces an entity or runtime value may expose."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Named(Protocol):
    """Anything with a registry name."""

    def name(self) -> str: ...


@runtime_checkable
class SchemaCapable(Named, Protocol):
    """Entity exposing its JSON Schema and an example payload as raw JSON bytes."""

    def schema(self) -> bytes: ...

    def example(self) -> bytes: ...


@runtime_checkable
class ValidationExemptible(Protocol):
    """Value that may opt out of schema consistency checks.

    Implement as a classmethod or staticmethod when the type is nested inside
    another type, since nested fields are described without an instance.
    """

    def should_skip_schema_validation(self) -> bool: ...
