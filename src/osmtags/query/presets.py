"""Preset search, matching and detail queries."""

from __future__ import annotations

from typing import Mapping

from loguru import logger

from osmtags.core.exceptions import PresetNotFoundError
from osmtags.core.types import (
    GEOMETRY_KINDS,
    WILDCARD,
    Preset,
    PresetDetails,
    PresetMatch,
    PresetTags,
    TaxonomyStore,
)
from osmtags.schema.index import tag_id
from osmtags.schema.loader import SchemaLoader, SchemaSnapshot

TEMPLATE_PREFIX = "{@templates/"

# Field groups referenced as "{@templates/<name>}" in preset field lists
TEMPLATES: dict[str, list[str]] = {
    "contact": ["email", "phone", "website", "fax"],
    "internet_access": ["internet_access", "internet_access/fee", "internet_access/ssid"],
    "poi": ["name", "address"],
    "crossing/markings": ["crossing/markings"],
    "crossing/defaults": ["crossing", "crossing/markings"],
    "crossing/geometry_way_more": ["crossing/island"],
    "crossing/bicycle_more": [],
    "crossing/markings_yes": ["crossing/markings_yes"],
    "crossing/traffic_signal": ["crossing/light", "button_operated"],
    "crossing/traffic_signal_more": ["traffic_signals/sound", "traffic_signals/vibration"],
}


def preset_matches(preset: Preset, tags: Mapping[str, str]) -> bool:
    """Whether a tag collection satisfies every identifying tag of a preset.

    A wildcard identifying tag needs the key present with a non-empty value;
    a concrete one needs an equal value. Presets without identifying tags
    never match.
    """
    if not preset.tags:
        return False
    for key, value in preset.tags.items():
        if value == WILDCARD:
            if not tags.get(key):
                return False
        elif tags.get(key) != value:
            return False
    return True


def match_presets(store: TaxonomyStore, tags: Mapping[str, str]) -> list[str]:
    """Ids of all presets matched by ``tags``, in taxonomy order."""
    if not tags:
        return []
    return [preset_id for preset_id, preset in store.presets.items() if preset_matches(preset, tags)]


def expand_field_references(
    store: TaxonomyStore,
    references: tuple[str, ...] | list[str],
    attr: str = "fields",
    _visited: set[str] | None = None,
) -> list[str]:
    """Resolve indirect field references into plain field ids.

    "{@templates/name}" expands to a named field group and "{preset/id}"
    inherits the same list (``attr``) of another preset. Unknown references
    are kept as written. The result keeps first occurrences only.

    Args:
        store: Snapshot holding the referenced presets.
        references: A preset's ``fields`` or ``more_fields``.
        attr: Which list to inherit from referenced presets.

    Returns:
        Field ids in reference order.
    """
    visited = set() if _visited is None else _visited
    expanded: list[str] = []

    for reference in references:
        if reference.startswith(TEMPLATE_PREFIX) and reference.endswith("}"):
            name = reference[len(TEMPLATE_PREFIX) : -1]
            expanded.extend(TEMPLATES.get(name, [reference]))
        elif reference.startswith("{") and reference.endswith("}"):
            preset_id = reference[1:-1]
            if preset_id in visited:
                continue
            visited.add(preset_id)
            target = store.presets.get(preset_id)
            if target is None:
                expanded.append(reference)
            else:
                expanded.extend(
                    expand_field_references(store, getattr(target, attr), attr, visited)
                )
        else:
            expanded.append(reference)

    return list(dict.fromkeys(expanded))


def _check_geometry(geometry: str | None) -> None:
    if geometry is not None and geometry not in GEOMETRY_KINDS:
        raise ValueError(
            f"Unknown geometry {geometry!r}. Expected one of: {', '.join(GEOMETRY_KINDS)}"
        )


def _keyword_test(keyword: str):
    text = keyword.strip().lower()
    if "=" in text:
        search_key, search_value = (part.strip() for part in text.split("=", 1))

        def by_tag(preset: Preset) -> bool:
            return any(
                key.lower() == search_key
                and isinstance(value, str)
                and value.lower() == search_value
                for key, value in preset.tags.items()
            )

        return by_tag

    def by_substring(preset: Preset) -> bool:
        if text in preset.id.lower():
            return True
        for key, value in preset.tags.items():
            if text in key.lower():
                return True
            if isinstance(value, str) and text in value.lower():
                return True
        return False

    return by_substring


def _to_match(snapshot: SchemaSnapshot, preset: Preset) -> PresetMatch:
    return PresetMatch(
        id=preset.id,
        name=snapshot.names.preset_name(preset.id),
        tags=dict(preset.tags),
        tags_detailed=snapshot.names.tags_detailed(preset.tags),
        geometry=list(preset.geometry),
    )


async def search_presets(
    loader: SchemaLoader,
    keyword: str,
    *,
    geometry: str | None = None,
    limit: int | None = None,
) -> list[PresetMatch]:
    """Search presets by keyword, in taxonomy order.

    A keyword containing "=" selects tag mode: ``key=value`` must equal one
    of the preset's identifying tags (case-insensitive, no substring).
    Otherwise the keyword is matched as a case-insensitive substring of the
    preset id, its tag keys and its tag values.

    Args:
        loader: Schema loader.
        keyword: Search text or ``key=value``.
        geometry: Only return presets allowing this geometry kind.
        limit: Stop after this many results.

    Returns:
        Matching presets.

    Raises:
        ValueError: If ``geometry`` is not a known geometry kind.
    """
    _check_geometry(geometry)
    snapshot = await loader.snapshot()
    matches_keyword = _keyword_test(keyword)

    results: list[PresetMatch] = []
    for preset in snapshot.store.presets.values():
        if limit is not None and len(results) >= limit:
            break
        if not matches_keyword(preset):
            continue
        if geometry is not None and geometry not in preset.geometry:
            continue
        results.append(_to_match(snapshot, preset))

    logger.debug(f"search_presets({keyword!r}): {len(results)} results")
    return results


async def find_matching_presets(loader: SchemaLoader, tags: Mapping[str, str]) -> list[str]:
    """Ids of presets whose identifying tags are all satisfied by ``tags``."""
    store = await loader.load_schema()
    return match_presets(store, tags)


async def get_preset_tags(loader: SchemaLoader, preset_id: str) -> PresetTags:
    """Identifying tags and add_tags of a preset.

    Raises:
        PresetNotFoundError: If no preset has this id.
    """
    store = await loader.load_schema()
    preset = store.presets.get(preset_id.strip())
    if preset is None:
        raise PresetNotFoundError(preset_id)
    return PresetTags(
        tags=dict(preset.tags),
        add_tags=dict(preset.add_tags) if preset.add_tags else None,
    )


def _most_specific(snapshot: SchemaSnapshot, tags: Mapping[str, str]) -> Preset | None:
    """Best preset for a tag collection.

    Candidates are identified by the first tag and must agree with every
    other input tag (equal or wildcard). Presets with exactly as many
    identifying tags as the input win, then those with more tags; ties go
    to the smallest preset id.
    """
    if not tags:
        return None
    items = list(tags.items())
    first_key, first_value = items[0]
    bucket = snapshot.index.by_tag.get(tag_id(first_key, first_value), ())
    candidates = [
        preset
        for preset in (snapshot.store.presets[preset_id] for preset_id in bucket)
        if all(preset.tags.get(key) in (value, WILDCARD) for key, value in items[1:])
    ]
    if not candidates:
        return None
    candidates.sort(
        key=lambda preset: (len(preset.tags) != len(items), -len(preset.tags), preset.id)
    )
    return candidates[0]


def _resolve_preset(snapshot: SchemaSnapshot, preset: str | Mapping[str, str]) -> Preset:
    store = snapshot.store
    if isinstance(preset, Mapping):
        found = _most_specific(snapshot, preset)
        if found is None:
            raise PresetNotFoundError(", ".join(f"{k}={v}" for k, v in preset.items()))
        return found

    text = preset.strip()
    if text in store.presets:
        return store.presets[text]

    if "=" in text:
        key, value = (part.strip() for part in text.split("=", 1))
        if key and value:
            found = _most_specific(snapshot, {key: value})
            if found is not None:
                return found

    raise PresetNotFoundError(text)


async def get_preset_details(
    loader: SchemaLoader, preset: str | Mapping[str, str]
) -> PresetDetails:
    """Full description of a preset with field references expanded.

    Args:
        loader: Schema loader.
        preset: Preset id, ``key=value`` notation, or a tag mapping.

    Raises:
        PresetNotFoundError: If nothing matches.
    """
    snapshot = await loader.snapshot()
    found = _resolve_preset(snapshot, preset)
    store = snapshot.store

    return PresetDetails(
        id=found.id,
        name=snapshot.names.preset_name(found.id),
        tags=dict(found.tags),
        tags_detailed=snapshot.names.tags_detailed(found.tags),
        geometry=list(found.geometry),
        fields=expand_field_references(store, found.fields, "fields"),
        more_fields=expand_field_references(store, found.more_fields, "more_fields"),
        add_tags=dict(found.add_tags),
        icon=found.icon,
    )
