"""Lookup structures derived from a schema snapshot."""

from __future__ import annotations

from dataclasses import dataclass

from osmtags.core.types import WILDCARD, Field, TaxonomyStore


@dataclass(frozen=True)
class TagIndex:
    """Four lookup maps built together from one TaxonomyStore.

    Preset-id buckets are duplicate-free tuples in taxonomy declaration order.

    Attributes:
        by_key: Tag key -> presets identified by that key (any value).
        by_tag: "key=value" -> presets identified by that pair. Wildcard
            values are not indexed.
        by_geometry: Geometry kind -> presets allowing it.
        by_field_key: Real OSM tag key -> field editing it. When several
            fields edit the same key, the first declared wins.
    """

    by_key: dict[str, tuple[str, ...]]
    by_tag: dict[str, tuple[str, ...]]
    by_geometry: dict[str, tuple[str, ...]]
    by_field_key: dict[str, Field]


def tag_id(key: str, value: str) -> str:
    """Index key of a key/value pair."""
    return f"{key}={value}"


def build_index(store: TaxonomyStore) -> TagIndex:
    """Build all lookup maps for a store in one synchronous pass.

    Args:
        store: Snapshot to index.

    Returns:
        TagIndex consistent with ``store``.
    """
    by_key: dict[str, list[str]] = {}
    by_tag: dict[str, list[str]] = {}
    by_geometry: dict[str, list[str]] = {}

    for preset_id, preset in store.presets.items():
        for key, value in preset.tags.items():
            by_key.setdefault(key, []).append(preset_id)
            if value != WILDCARD:
                by_tag.setdefault(tag_id(key, value), []).append(preset_id)

        for geometry in dict.fromkeys(preset.geometry):
            by_geometry.setdefault(geometry, []).append(preset_id)

    by_field_key: dict[str, Field] = {}
    for field in store.fields.values():
        by_field_key.setdefault(field.key, field)

    return TagIndex(
        by_key={k: tuple(v) for k, v in by_key.items()},
        by_tag={k: tuple(v) for k, v in by_tag.items()},
        by_geometry={k: tuple(v) for k, v in by_geometry.items()},
        by_field_key=by_field_key,
    )
