"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "schema-sync.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Entity catalog for schema-sync.
# Replace every <REQUIRED> placeholder before running dereference, check-* or assemble.
# Replace <OPTIONAL> placeholders only when your setup needs them.

entities:
  # One entry per named entity. Names must be unique; references such as
  # "#/definitions/<name>" are resolved against these names.
  - name: "<REQUIRED>"
    # Provide either inline JSON schema text or a path relative to this file.
    schema:
      path: "<REQUIRED>"
      # inline: "<OPTIONAL>"
    example:
      path: "<OPTIONAL>"
      # inline: "<OPTIONAL>"
    # Dataclass describing the runtime shape, as "package.module:TypeName".
    runtime_type: "<OPTIONAL>"

consistency:
  # Fields assigned by the server that may be absent from entity schemas.
  server_defined_fields:
    - "id"

output:
  # Prefix of references in the assembled definitions table.
  reference_prefix: "#/components/schemas/"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML catalog configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder catalog configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
