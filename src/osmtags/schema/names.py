"""Localized display names for tag keys, tag values, presets and categories.

Resolution order for a value name (``NameOrder.PRESET_FIRST``):

1. The name of the most general named preset identified by ``key=value``:
   fewest identifying tags, ties broken by the lexicographically smallest
   preset id.
2. The field's label for that option.
3. The raw value, title-cased, with underscores turned into spaces.

Key names follow the same order, where step 1 considers presets identified
by ``key=*`` and step 2 uses the field label. ``NameOrder.FIELD_FIRST`` swaps
steps 1 and 2 for callers that present a field's options.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from osmtags.core.types import (
    WILDCARD,
    Field,
    OptionLabel,
    Preset,
    TagDetail,
    TaxonomyStore,
    ValueInfo,
)

from .index import TagIndex, tag_id


class NameOrder(Enum):
    """Precedence between preset names and field labels."""

    PRESET_FIRST = "preset"
    FIELD_FIRST = "field"


def humanize(text: str) -> str:
    """Title-case raw tag text: "fast_food" -> "Fast Food"."""
    words = text.replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def field_path(key: str) -> str:
    """Field lookup path conventionally used for an OSM key."""
    return key.replace(":", "/")


class NameResolver:
    """Resolve display names against one schema snapshot.

    Example:
        names = NameResolver(store, index)
        names.name_for_value("amenity", "restaurant")  # "Restaurant"
        names.name_for_key("wheelchair")  # "Wheelchair Access"
        names.name_for_value("cuisine", "chinese", NameOrder.FIELD_FIRST)
    """

    def __init__(self, store: TaxonomyStore, index: TagIndex):
        self._store = store
        self._index = index

    def preset_name(self, preset_id: str) -> str:
        """Display name of a preset, or its humanized last path segment."""
        preset = self._store.presets.get(preset_id)
        if preset is not None and preset.name:
            return preset.name
        return humanize(preset_id.rsplit("/", 1)[-1])

    def category_name(self, category_id: str) -> str:
        category = self._store.categories.get(category_id)
        if category is not None and category.name:
            return category.name
        return humanize(category_id.removeprefix("category-"))

    def field_for_key(self, key: str) -> Field | None:
        """Field editing an OSM key.

        Tries the conventional lookup path first, then the index of real
        keys, which covers fields whose path is not a plain substitution
        (e.g. "parking/side/parking" editing "parking:both").
        """
        field = self._store.fields.get(field_path(key))
        if field is not None:
            return field
        return self._index.by_field_key.get(key)

    def name_for_key(self, key: str, order: NameOrder = NameOrder.PRESET_FIRST) -> str:
        general = [
            preset_id
            for preset_id in self._index.by_key.get(key, ())
            if self._store.presets[preset_id].tags.get(key) == WILDCARD
        ]
        from_preset = self._general_preset_name(general)
        field = self.field_for_key(key)
        from_field = field.label if field is not None and field.label else None
        return self._first(order, from_preset, from_field) or humanize(key.replace(":", " "))

    def name_for_value(
        self,
        key: str,
        value: str,
        order: NameOrder = NameOrder.PRESET_FIRST,
    ) -> str:
        from_preset = self._general_preset_name(self._index.by_tag.get(tag_id(key, value), ()))
        label = self._option_label(key, value)
        from_field = label.title if label is not None else None
        return self._first(order, from_preset, from_field) or humanize(value)

    def option_info(self, key: str, value: str) -> ValueInfo:
        """Title and description of a value as a field option."""
        label = self._option_label(key, value)
        if label is not None:
            return ValueInfo(title=label.title, description=label.description)
        return ValueInfo(title=self.name_for_value(key, value, NameOrder.FIELD_FIRST))

    def tag_detail(self, key: str, value: str) -> TagDetail:
        value_name = WILDCARD if value == WILDCARD else self.name_for_value(key, value)
        return TagDetail(
            key=key,
            key_name=self.name_for_key(key),
            value=value,
            value_name=value_name,
        )

    def tags_detailed(self, tags: dict[str, str], skip_wildcards: bool = False) -> list[TagDetail]:
        return [
            self.tag_detail(key, value)
            for key, value in tags.items()
            if not (skip_wildcards and value == WILDCARD)
        ]

    def _option_label(self, key: str, value: str) -> OptionLabel | None:
        field = self.field_for_key(key)
        if field is None:
            return None
        return field.option_labels.get(value)

    def _general_preset_name(self, preset_ids: Iterable[str]) -> str | None:
        named: list[Preset] = [
            self._store.presets[preset_id]
            for preset_id in preset_ids
            if self._store.presets[preset_id].name
        ]
        if not named:
            return None
        best = min(named, key=lambda preset: (len(preset.tags), preset.id))
        return best.name

    @staticmethod
    def _first(order: NameOrder, from_preset: str | None, from_field: str | None) -> str | None:
        if order is NameOrder.FIELD_FIRST:
            return from_field or from_preset
        return from_preset or from_field
