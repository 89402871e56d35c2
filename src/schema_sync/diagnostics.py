"""Structured failures raised by schema resolution, consistency checks and merging."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Diagnostic:
    """First failure found by a resolution, validation or merge pass."""

    kind: str
    breadcrumb: str
    detail: str

    def __str__(self) -> str:
        if self.breadcrumb:
            return f"{self.breadcrumb}: {self.detail}"
        return self.detail


class SchemaSyncError(Exception):
    """Base class for every schema-sync failure."""

    def __init__(self, detail: str, *, breadcrumb: str = "") -> None:
        self.detail = detail
        self.breadcrumb = breadcrumb
        super().__init__(f"{breadcrumb}: {detail}" if breadcrumb else detail)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(kind=self.kind, breadcrumb=self.breadcrumb, detail=self.detail)


class SchemaError(SchemaSyncError):
    """Raised when a schema document cannot be parsed."""


class CyclicSchemaError(SchemaSyncError):
    """Raised when a schema node is reachable from itself."""


class ReferenceResolutionError(SchemaSyncError):
    """Base class for reference resolution failures."""


class UnresolvedReferenceError(ReferenceResolutionError):
    """A reference points to no local definition and no registered entity."""

    def __init__(self, identifier: str, *, breadcrumb: str = "") -> None:
        self.identifier = identifier
        super().__init__(f"entity {identifier} not found", breadcrumb=breadcrumb)


class NotSchemaCapableError(ReferenceResolutionError):
    """A referenced entity exists but cannot supply a schema."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"entity {identifier} does not expose a schema")


class DuplicateEntityError(SchemaSyncError):
    """A different entity is already registered under the same name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"entity {name} is already registered with a different definition")


class RuntimeShapeError(SchemaSyncError):
    """A Python type cannot be described as a runtime shape."""


class ConsistencyError(SchemaSyncError):
    """Base class for runtime shape vs schema mismatches."""


class UnsupportedTypeUnionError(ConsistencyError):
    """A type union other than ``[null, X]``."""

    def __init__(self, types: tuple[str, ...], *, breadcrumb: str = "") -> None:
        self.types = types
        super().__init__(
            f"multiple types are not supported: {list(types)}", breadcrumb=breadcrumb
        )


class MissingSchemaTypeError(ConsistencyError):
    """A schema node compared against a concrete value declares no type."""

    def __init__(self, *, breadcrumb: str = "") -> None:
        super().__init__("schema is missing a type", breadcrumb=breadcrumb)


class NotNullableError(ConsistencyError):
    """Nullability of a field disagrees between schema and runtime shape."""

    def __init__(self, *, breadcrumb: str, detail: str = "must be nullable") -> None:
        super().__init__(detail, breadcrumb=breadcrumb)


class SchemaTypeMismatchError(ConsistencyError):
    """A schema type disagrees with the runtime kind."""

    def __init__(self, expected: str, got: str, *, breadcrumb: str) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"got {got} when schema expects {expected}", breadcrumb=breadcrumb)


class MissingPropertyInSchemaError(ConsistencyError):
    """A runtime field has no schema property."""

    def __init__(self, prop: str, *, breadcrumb: str) -> None:
        self.property = prop
        super().__init__(f"schema is missing property {prop}", breadcrumb=breadcrumb)


class AdditionalPropertyError(ConsistencyError):
    """A schema property has no runtime field."""

    def __init__(self, prop: str, *, breadcrumb: str) -> None:
        self.property = prop
        super().__init__(f"schema has an additional property {prop}", breadcrumb=breadcrumb)


class OpenStructSchemaError(ConsistencyError):
    """A structured runtime kind is described by a schema allowing additional properties."""

    def __init__(self, *, breadcrumb: str) -> None:
        super().__init__(
            "struct schemas should not allow additional properties", breadcrumb=breadcrumb
        )


class StrictMapMismatchError(ConsistencyError):
    """A closed-enumeration object schema paired with an open map kind."""

    def __init__(self, keys: tuple[str, ...], *, breadcrumb: str) -> None:
        self.keys = keys
        super().__init__(
            "schema strictly enumerates all valid keys "
            f"(e.g. {list(keys)}); the runtime type should be a structure, not a map",
            breadcrumb=breadcrumb,
        )


class InterfaceWithoutSchemaError(ConsistencyError):
    """A concrete runtime value lacks any schema."""

    def __init__(self, got: str, *, breadcrumb: str) -> None:
        self.got = got
        super().__init__(
            f"a non-opaque value ({got}) should have a definite schema", breadcrumb=breadcrumb
        )


class DefinitionConflictError(SchemaSyncError):
    """Base class for definition merge conflicts."""


class ConflictingDefinitionError(DefinitionConflictError):
    """The same name was defined twice with different schemas."""

    def __init__(self, name: str, *, diff: str = "") -> None:
        self.name = name
        self.diff = diff
        super().__init__(
            f"definition with name [{name}] already exists but with a different definition"
        )


class CaseInsensitiveCollisionError(DefinitionConflictError):
    """Two definition names differ only by letter case."""

    def __init__(self, existing_name: str, new_name: str) -> None:
        self.existing_name = existing_name
        self.new_name = new_name
        super().__init__(f"conflicting definitions: {existing_name!r} and {new_name!r}")
