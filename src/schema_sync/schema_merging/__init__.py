"""Schema merging exports."""

from .schema_merger import MergeStrategy, SchemaMergeError, merge_examples, merge_schemas

__all__ = ["MergeStrategy", "SchemaMergeError", "merge_examples", "merge_schemas"]
