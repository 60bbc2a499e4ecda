"""Command implementations for osmtags CLI."""

from .convert import add_convert_arguments, handle_flat_to_json, handle_json_to_flat
from .presets import add_match_arguments, add_preset_arguments, handle_match, handle_preset
from .search import (
    add_related_arguments,
    add_search_presets_arguments,
    add_search_tags_arguments,
    handle_related,
    handle_search_presets,
    handle_search_tags,
)
from .status import add_category_arguments, handle_categories, handle_category, handle_stats
from .tags import add_key_arguments, handle_info, handle_values
from .validate import (
    add_collection_arguments,
    add_deprecated_arguments,
    add_tag_arguments,
    handle_deprecated,
    handle_suggest,
    handle_validate,
    handle_validate_collection,
)

__all__ = [
    "add_search_presets_arguments",
    "add_search_tags_arguments",
    "add_related_arguments",
    "handle_search_presets",
    "handle_search_tags",
    "handle_related",
    "add_key_arguments",
    "handle_values",
    "handle_info",
    "add_preset_arguments",
    "add_match_arguments",
    "handle_preset",
    "handle_match",
    "add_tag_arguments",
    "add_deprecated_arguments",
    "add_collection_arguments",
    "handle_validate",
    "handle_validate_collection",
    "handle_suggest",
    "handle_deprecated",
    "add_category_arguments",
    "handle_stats",
    "handle_categories",
    "handle_category",
    "add_convert_arguments",
    "handle_flat_to_json",
    "handle_json_to_flat",
]
