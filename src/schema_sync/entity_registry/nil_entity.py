"""Entity representing an empty payload."""

from __future__ import annotations

from dataclasses import dataclass

NIL_ENTITY_NAME = "NilEntity"


@dataclass(frozen=True)
class NilEntity:
    """Empty object; used for operations without a request or response body."""

    def name(self) -> str:
        return NIL_ENTITY_NAME

    def schema(self) -> bytes:
        return b'{"type":"object","properties":{},"additionalProperties":false,"required":[]}'

    def example(self) -> bytes:
        return b"{}"
