"""Type definitions for osmtags.

Schema records (Preset, Field, Category, DeprecatedTagRule) are built once per
schema load and never mutated afterwards. Result types are plain dataclasses
returned by the query operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

WILDCARD = "*"
ALTERNATION = "|"

GEOMETRY_KINDS = ("point", "vertex", "line", "area", "relation")


def is_concrete_value(value: Any) -> bool:
    """Whether a tag value names one taggable value (not a wildcard or pattern)."""
    return isinstance(value, str) and value != "" and value != WILDCARD and ALTERNATION not in value


def _str_map(raw: Any) -> dict[str, str]:
    if not isinstance(raw, Mapping):
        return {}
    return {str(k): v for k, v in raw.items()}


def _str_tuple(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(item for item in raw if isinstance(item, str))


# =============================================================================
# Schema records
# =============================================================================


@dataclass(frozen=True)
class Preset:
    """A template describing a real-world feature type.

    Attributes:
        id: Path-like identifier (e.g. "amenity/restaurant").
        tags: Identifying tags. A value of "*" accepts any value for the key.
        geometry: Geometry kinds the preset applies to.
        add_tags: Tags applied on creation, not used for identification.
        remove_tags: Tags removed when the preset is un-applied.
        name: Display name.
        fields: Ordered field references; "{preset/id}" and "{@templates/x}"
            are indirect references.
        more_fields: Optional field references, same syntax as fields.
    """

    id: str
    tags: dict[str, str]
    geometry: tuple[str, ...]
    add_tags: dict[str, str] = field(default_factory=dict)
    remove_tags: dict[str, str] = field(default_factory=dict)
    name: str | None = None
    fields: tuple[str, ...] = ()
    more_fields: tuple[str, ...] = ()
    icon: str | None = None
    terms: tuple[str, ...] = ()
    searchable: bool = True

    @classmethod
    def from_dict(cls, preset_id: str, raw: Mapping[str, Any]) -> "Preset":
        """Build a Preset from its presets.json entry."""
        return cls(
            id=preset_id,
            tags=_str_map(raw.get("tags")),
            geometry=_str_tuple(raw.get("geometry")),
            add_tags=_str_map(raw.get("addTags")),
            remove_tags=_str_map(raw.get("removeTags")),
            name=raw.get("name"),
            fields=_str_tuple(raw.get("fields")),
            more_fields=_str_tuple(raw.get("moreFields")),
            icon=raw.get("icon"),
            terms=_str_tuple(raw.get("terms")),
            searchable=raw.get("searchable", True) is not False,
        )

    @property
    def all_tags(self) -> dict[str, str]:
        """Identifying tags overlaid with add_tags."""
        return {**self.tags, **self.add_tags}


@dataclass(frozen=True)
class OptionLabel:
    """Display strings for one field option."""

    title: str
    description: str | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> "OptionLabel | None":
        if isinstance(raw, str):
            return cls(title=raw)
        if isinstance(raw, Mapping) and isinstance(raw.get("title"), str):
            description = raw.get("description")
            return cls(
                title=raw["title"],
                description=description if isinstance(description, str) else None,
            )
        return None


@dataclass(frozen=True)
class Field:
    """Reusable input descriptor referenced by presets.

    The lookup path (``id``, "/"-separated, e.g. "parking/side/parking") and
    the real OSM key (``key``, ":"-separated, e.g. "parking:both") are
    distinct; neither is derived from the other.
    """

    id: str
    key: str
    type: str
    options: tuple[str, ...] | None = None
    label: str | None = None
    option_labels: dict[str, OptionLabel] = field(default_factory=dict)
    geometry: tuple[str, ...] = ()
    keys: tuple[str, ...] = ()
    universal: bool = False

    @classmethod
    def from_dict(cls, field_id: str, raw: Mapping[str, Any]) -> "Field":
        """Build a Field from its fields.json entry."""
        options = raw.get("options")
        strings = raw.get("strings") if isinstance(raw.get("strings"), Mapping) else {}
        option_labels: dict[str, OptionLabel] = {}
        for value, label in _str_map(strings.get("options")).items():
            parsed = OptionLabel.from_raw(label)
            if parsed is not None:
                option_labels[value] = parsed

        return cls(
            id=field_id,
            key=raw["key"],
            type=raw["type"],
            options=_str_tuple(options) if isinstance(options, (list, tuple)) else None,
            label=raw.get("label"),
            option_labels=option_labels,
            geometry=_str_tuple(raw.get("geometry")),
            keys=_str_tuple(raw.get("keys")),
            universal=bool(raw.get("universal", False)),
        )


@dataclass(frozen=True)
class Category:
    """A named grouping of presets."""

    id: str
    members: tuple[str, ...]
    geometry: tuple[str, ...] = ()
    name: str | None = None
    icon: str | None = None

    @classmethod
    def from_dict(cls, category_id: str, raw: Mapping[str, Any]) -> "Category":
        return cls(
            id=category_id,
            members=_str_tuple(raw.get("members")),
            geometry=_str_tuple(raw.get("geometry")),
            name=raw.get("name"),
            icon=raw.get("icon"),
        )


@dataclass(frozen=True)
class DeprecatedTagRule:
    """Mapping from an obsolete tag pattern to its modern replacement."""

    old: dict[str, str]
    replace: dict[str, str]

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "DeprecatedTagRule":
        return cls(old=_str_map(raw.get("old")), replace=_str_map(raw.get("replace")))

    @property
    def is_single_key(self) -> bool:
        return len(self.old) == 1

    def matches(self, tags: Mapping[str, str]) -> bool:
        """Whether every old pair is present in ``tags`` with an equal value."""
        if not self.old:
            return False
        return all(key in tags and tags[key] == value for key, value in self.old.items())


@dataclass(frozen=True)
class SchemaMetadata:
    """Version and load time of a schema snapshot."""

    version: str
    loaded_at: datetime


@dataclass(frozen=True)
class TaxonomyStore:
    """Immutable in-memory snapshot of the tagging schema."""

    presets: dict[str, Preset]
    fields: dict[str, Field]
    categories: dict[str, Category]
    deprecated: tuple[DeprecatedTagRule, ...]
    defaults: dict[str, tuple[str, ...]]
    metadata: SchemaMetadata


# =============================================================================
# Query results
# =============================================================================


@dataclass
class TagDetail:
    """A tag with its localized key and value names."""

    key: str
    key_name: str
    value: str
    value_name: str


@dataclass
class ValueInfo:
    """Display strings for one tag value."""

    title: str
    description: str | None = None


@dataclass
class PresetMatch:
    """Preset returned by a keyword search."""

    id: str
    name: str
    tags: dict[str, str]
    tags_detailed: list[TagDetail]
    geometry: list[str]


@dataclass
class PresetTags:
    """Identifying and supplementary tags of a preset."""

    tags: dict[str, str]
    add_tags: dict[str, str] | None = None


@dataclass
class PresetDetails:
    """Complete description of a preset with expanded field references."""

    id: str
    name: str
    tags: dict[str, str]
    tags_detailed: list[TagDetail]
    geometry: list[str]
    fields: list[str] = field(default_factory=list)
    more_fields: list[str] = field(default_factory=list)
    add_tags: dict[str, str] = field(default_factory=dict)
    icon: str | None = None


@dataclass
class TagValues:
    """Every known value for a tag key."""

    key: str
    key_name: str
    values: list[str]
    values_detailed: dict[str, ValueInfo]


@dataclass
class TagInfo:
    """Summary of a tag key and its field definition."""

    key: str
    key_name: str
    values: list[str]
    type: str | None
    has_field_definition: bool


@dataclass
class KeyMatch:
    """A tag key matched by keyword, bundled with all its values."""

    key: str
    key_name: str
    values: list[str]
    values_detailed: dict[str, ValueInfo]


@dataclass
class ValueMatch:
    """A single key/value pair whose value matched a keyword."""

    key: str
    key_name: str
    value: str
    value_name: str


@dataclass
class TagSearchResult:
    """Keyword search results, split by what the keyword matched."""

    key_matches: list[KeyMatch] = field(default_factory=list)
    value_matches: list[ValueMatch] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.key_matches) + len(self.value_matches)


@dataclass
class RelatedTag:
    """A tag co-occurring with a queried tag."""

    key: str
    value: str
    frequency: int
    preset_examples: list[str] = field(default_factory=list)


@dataclass
class ValidationResult:
    """Outcome of validating one tag. Never raised, always returned."""

    valid: bool
    deprecated: bool
    message: str
    key_name: str | None = None
    replacement: dict[str, str] | None = None
    replacement_detailed: list[TagDetail] | None = None


@dataclass
class CollectionValidationResult:
    """Aggregated validation of a tag collection."""

    valid: bool
    tag_results: dict[str, ValidationResult]
    valid_count: int
    deprecated_count: int
    error_count: int
    deprecations: list[DeprecatedTagRule] = field(default_factory=list)


@dataclass
class DeprecationResult:
    """Outcome of a deprecation lookup."""

    deprecated: bool
    message: str
    old_tags: dict[str, str] | None = None
    replacement: dict[str, str] | None = None


@dataclass
class Suggestion:
    """A field worth adding to a tag collection."""

    key: str
    key_name: str
    preset_id: str
    optional: bool
    message: str


@dataclass
class ImprovementResult:
    """Suggestions and warnings for a tag collection."""

    suggestions: list[Suggestion] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    matched_presets: list[str] = field(default_factory=list)


@dataclass
class SchemaStats:
    """Size and version of the loaded schema."""

    preset_count: int
    field_count: int
    category_count: int
    deprecated_count: int
    version: str
    loaded_at: str


@dataclass
class CategoryInfo:
    """A category with its member count."""

    name: str
    display_name: str
    count: int


@dataclass
class CategoryDetails:
    """A category with its members resolved to display names."""

    name: str
    display_name: str
    geometry: list[str]
    members: list[str]
    member_names: dict[str, str]
    icon: str | None = None
