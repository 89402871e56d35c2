"""JSON Schema reference resolution, definition merging and consistency checks."""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
