"""Reference token prefixes and identifier extraction."""

from __future__ import annotations

DEFINITIONS_PREFIX = "#/definitions/"
COMPONENTS_PREFIX = "#/components/schemas/"
KNOWN_PREFIXES = (DEFINITIONS_PREFIX, COMPONENTS_PREFIX)


def reference_identifier(token: str, *prefixes: str) -> str:
    """Return the identifier a reference token points at.

    The first matching prefix among ``prefixes`` and the known prefixes is
    stripped. Tokens with no known prefix yield the text after the last ``/``.
    """
    for prefix in (*prefixes, *KNOWN_PREFIXES):
        if prefix and token.startswith(prefix):
            return token[len(prefix) :]
    return token.rsplit("/", 1)[-1]
