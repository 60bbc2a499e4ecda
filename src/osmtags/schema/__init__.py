"""Schema loading, indexing and name resolution."""

from .index import TagIndex, build_index, tag_id
from .loader import SchemaLoader, SchemaSnapshot
from .names import NameOrder, NameResolver, field_path, humanize

__all__ = [
    "SchemaLoader",
    "SchemaSnapshot",
    "TagIndex",
    "build_index",
    "tag_id",
    "NameOrder",
    "NameResolver",
    "field_path",
    "humanize",
]
