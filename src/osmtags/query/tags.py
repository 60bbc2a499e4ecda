"""Tag keyword search, value enumeration and co-occurrence discovery."""

from __future__ import annotations

from loguru import logger

from osmtags.core.types import (
    WILDCARD,
    KeyMatch,
    RelatedTag,
    TagInfo,
    TagSearchResult,
    TagValues,
    ValueInfo,
    ValueMatch,
    is_concrete_value,
)
from osmtags.schema.loader import SchemaLoader, SchemaSnapshot

DEFAULT_SEARCH_LIMIT = 100
MAX_PRESET_EXAMPLES = 3


def collect_values(snapshot: SchemaSnapshot, key: str) -> list[str]:
    """Every concrete value known for a key, sorted.

    Unions the options of the field editing ``key`` with the literal values
    presets use for the field's real key in their tags and add_tags.
    """
    field = snapshot.names.field_for_key(key)
    osm_key = field.key if field is not None else key

    values: set[str] = set()
    if field is not None and field.options:
        values.update(option for option in field.options if is_concrete_value(option))

    for preset in snapshot.store.presets.values():
        for tags in (preset.tags, preset.add_tags):
            value = tags.get(osm_key)
            if is_concrete_value(value):
                values.add(value)

    return sorted(values)


def _values_detailed(snapshot: SchemaSnapshot, key: str, values: list[str]) -> dict[str, ValueInfo]:
    return {value: snapshot.names.option_info(key, value) for value in values}


def _key_match(snapshot: SchemaSnapshot, key: str) -> KeyMatch:
    values = collect_values(snapshot, key)
    return KeyMatch(
        key=key,
        key_name=snapshot.names.name_for_key(key),
        values=values,
        values_detailed=_values_detailed(snapshot, key, values),
    )


def _value_match(snapshot: SchemaSnapshot, key: str, value: str) -> ValueMatch:
    return ValueMatch(
        key=key,
        key_name=snapshot.names.name_for_key(key),
        value=value,
        value_name=snapshot.names.name_for_value(key, value),
    )


async def search_tags(
    loader: SchemaLoader, keyword: str, limit: int = DEFAULT_SEARCH_LIMIT
) -> TagSearchResult:
    """Search tag keys and tag values by keyword.

    Keys and values are matched independently: a key containing the keyword
    yields one KeyMatch bundling all of its values, and a value containing
    the keyword yields one ValueMatch for that key/value pair. Fields are
    scanned before presets. Wildcard and alternation values are ignored.

    Args:
        loader: Schema loader.
        keyword: Case-insensitive substring to look for.
        limit: Stop once key and value matches together reach this count.

    Returns:
        TagSearchResult with both channels.
    """
    snapshot = await loader.snapshot()
    text = keyword.strip().lower()
    result = TagSearchResult()
    seen_keys: set[str] = set()
    seen_pairs: set[tuple[str, str]] = set()

    def full() -> bool:
        return len(result) >= limit

    def consider(key: str, value: str | None) -> None:
        if key not in seen_keys and text in key.lower():
            seen_keys.add(key)
            result.key_matches.append(_key_match(snapshot, key))
        if full() or not is_concrete_value(value):
            return
        pair = (key, value)
        if pair not in seen_pairs and text in value.lower():
            seen_pairs.add(pair)
            result.value_matches.append(_value_match(snapshot, key, value))

    if full():
        return result

    for field in snapshot.store.fields.values():
        consider(field.key, None)
        for option in field.options or ():
            if full():
                break
            consider(field.key, option)
        if full():
            break
    else:
        for preset in snapshot.store.presets.values():
            for tags in (preset.tags, preset.add_tags):
                for key, value in tags.items():
                    if full():
                        break
                    consider(key, value)
            if full():
                break

    logger.debug(
        f"search_tags({keyword!r}): {len(result.key_matches)} keys, "
        f"{len(result.value_matches)} values"
    )
    return result


async def get_tag_values(loader: SchemaLoader, key: str) -> TagValues:
    """All known values for a tag key with their display strings."""
    snapshot = await loader.snapshot()
    key = key.strip()
    values = collect_values(snapshot, key)
    return TagValues(
        key=key,
        key_name=snapshot.names.name_for_key(key),
        values=values,
        values_detailed=_values_detailed(snapshot, key, values),
    )


async def get_tag_info(loader: SchemaLoader, key: str) -> TagInfo:
    snapshot = await loader.snapshot()
    key = key.strip()
    field = snapshot.names.field_for_key(key)
    return TagInfo(
        key=key,
        key_name=snapshot.names.name_for_key(key),
        values=collect_values(snapshot, key),
        type=field.type if field is not None else None,
        has_field_definition=field is not None,
    )


def parse_tag_query(tag: str) -> tuple[str, str | None]:
    """Split "key" or "key=value" into its parts.

    A missing, empty or wildcard value means "any value".

    Raises:
        ValueError: If the key is empty.
    """
    text = tag.strip()
    key, _, value = text.partition("=")
    key, value = key.strip(), value.strip()
    if not key:
        raise ValueError("Tag must have a key (expected 'key' or 'key=value')")
    if not value or value == WILDCARD:
        return key, None
    return key, value


async def get_related_tags(
    loader: SchemaLoader, tag: str, limit: int | None = None
) -> list[RelatedTag]:
    """Tags that co-occur with ``tag`` in presets, most frequent first.

    A preset contributes when the input tag appears in its tags or add_tags
    (any value for key-only input). Each other concrete pair of that preset
    counts once. Ties are ordered by key, then value.

    Args:
        loader: Schema loader.
        tag: "key" or "key=value".
        limit: Truncate the sorted list to this many entries.

    Returns:
        Related tags with frequency and up to three example presets.

    Raises:
        ValueError: If ``tag`` has no key.
    """
    key, value = parse_tag_query(tag)
    store = await loader.load_schema()

    frequency: dict[tuple[str, str], int] = {}
    examples: dict[tuple[str, str], list[str]] = {}

    for preset in store.presets.values():
        tags = preset.all_tags
        if key not in tags or (value is not None and tags[key] != value):
            continue
        for other_key, other_value in tags.items():
            if other_key == key or not is_concrete_value(other_value):
                continue
            pair = (other_key, other_value)
            frequency[pair] = frequency.get(pair, 0) + 1
            sample = examples.setdefault(pair, [])
            if len(sample) < MAX_PRESET_EXAMPLES:
                sample.append(preset.id)

    ranked = sorted(frequency.items(), key=lambda item: (-item[1], item[0][0], item[0][1]))
    if limit is not None:
        ranked = ranked[: max(limit, 0)]

    logger.debug(f"get_related_tags({tag!r}): {len(frequency)} candidates")
    return [
        RelatedTag(key=k, value=v, frequency=count, preset_examples=examples[(k, v)])
        for (k, v), count in ranked
    ]
