"""Core types, configuration and exceptions for osmtags."""

from .config import DEFAULT_SCHEMA_URI, Config, SchemaConfig
from .exceptions import (
    CategoryNotFoundError,
    EmptyKeyError,
    EmptyValueError,
    MissingSeparatorError,
    NotFoundError,
    OsmTagsError,
    PresetNotFoundError,
    SchemaError,
    SchemaLoadError,
    SchemaNotLoadedError,
    SchemaStructureError,
    SourceError,
    SourceFetchError,
    TagInputError,
    TagParseError,
)
from .types import (
    GEOMETRY_KINDS,
    WILDCARD,
    Category,
    CategoryDetails,
    CategoryInfo,
    CollectionValidationResult,
    DeprecatedTagRule,
    DeprecationResult,
    Field,
    ImprovementResult,
    KeyMatch,
    OptionLabel,
    Preset,
    PresetDetails,
    PresetMatch,
    PresetTags,
    RelatedTag,
    SchemaMetadata,
    SchemaStats,
    Suggestion,
    TagDetail,
    TagInfo,
    TagSearchResult,
    TagValues,
    TaxonomyStore,
    ValidationResult,
    ValueInfo,
    ValueMatch,
)

__all__ = [
    "Config",
    "SchemaConfig",
    "DEFAULT_SCHEMA_URI",
    "OsmTagsError",
    "SchemaError",
    "SchemaLoadError",
    "SchemaNotLoadedError",
    "SchemaStructureError",
    "NotFoundError",
    "PresetNotFoundError",
    "CategoryNotFoundError",
    "SourceError",
    "SourceFetchError",
    "TagInputError",
    "TagParseError",
    "MissingSeparatorError",
    "EmptyKeyError",
    "EmptyValueError",
    "GEOMETRY_KINDS",
    "WILDCARD",
    "Preset",
    "Field",
    "OptionLabel",
    "Category",
    "DeprecatedTagRule",
    "SchemaMetadata",
    "TaxonomyStore",
    "TagDetail",
    "ValueInfo",
    "PresetMatch",
    "PresetTags",
    "PresetDetails",
    "TagValues",
    "TagInfo",
    "KeyMatch",
    "ValueMatch",
    "TagSearchResult",
    "RelatedTag",
    "ValidationResult",
    "CollectionValidationResult",
    "DeprecationResult",
    "Suggestion",
    "ImprovementResult",
    "SchemaStats",
    "CategoryInfo",
    "CategoryDetails",
]
