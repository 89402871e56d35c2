"""Schema graph traversal exports."""

from .schema_walker import NodeVisitor, RefSlot, collect_refs, walk

__all__ = ["NodeVisitor", "RefSlot", "collect_refs", "walk"]
