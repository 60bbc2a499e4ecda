"""Query operations over a loaded tagging schema.

Every operation takes the SchemaLoader as its first argument, awaits the
current snapshot and then runs synchronously over it.
"""

from .catalog import get_categories, get_category, get_category_tags, get_schema_stats
from .presets import (
    TEMPLATES,
    expand_field_references,
    find_matching_presets,
    get_preset_details,
    get_preset_tags,
    search_presets,
)
from .tags import get_related_tags, get_tag_info, get_tag_values, search_tags
from .validation import (
    check_deprecated,
    suggest_improvements,
    validate_tag,
    validate_tag_collection,
)

__all__ = [
    "search_presets",
    "find_matching_presets",
    "get_preset_tags",
    "get_preset_details",
    "expand_field_references",
    "TEMPLATES",
    "search_tags",
    "get_tag_values",
    "get_tag_info",
    "get_related_tags",
    "validate_tag",
    "validate_tag_collection",
    "check_deprecated",
    "suggest_improvements",
    "get_schema_stats",
    "get_categories",
    "get_category_tags",
    "get_category",
]
