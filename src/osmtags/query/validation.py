"""Tag validation, deprecation checks and improvement suggestions.

Validation never raises for questionable tags: OpenStreetMap tagging is
open-vocabulary, so unknown keys and custom values come back as valid with a
warning message, and only empty keys or values are invalid.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from loguru import logger

from osmtags.core.types import (
    CollectionValidationResult,
    DeprecatedTagRule,
    DeprecationResult,
    ImprovementResult,
    Suggestion,
    TaxonomyStore,
    ValidationResult,
)
from osmtags.schema.loader import SchemaLoader, SchemaSnapshot

from .presets import expand_field_references, match_presets

MAX_MATCHED_PRESETS = 5
MAX_OPTIONAL_FIELDS = 3


def format_tags(tags: Mapping[str, str]) -> str:
    return ", ".join(f"{key}={value}" for key, value in tags.items())


def deprecation_message(rule: DeprecatedTagRule) -> str:
    message = f"Tag {format_tags(rule.old)} is deprecated"
    if rule.replace:
        message += f". Consider using: {format_tags(rule.replace)}"
    return message


def find_tag_deprecation(store: TaxonomyStore, key: str, value: str) -> DeprecatedTagRule | None:
    """First single-key rule whose old tag is exactly ``key=value``."""
    for rule in store.deprecated:
        if rule.is_single_key and rule.matches({key: value}):
            return rule
    return None


def find_deprecations(store: TaxonomyStore, tags: Mapping[str, str]) -> list[DeprecatedTagRule]:
    """Multi-key rules whose old tags all appear in ``tags`` at once."""
    return [rule for rule in store.deprecated if not rule.is_single_key and rule.matches(tags)]


def _validate(snapshot: SchemaSnapshot, key: str, value: str) -> ValidationResult:
    key = key.strip()
    value = value.strip()
    if not key:
        return ValidationResult(valid=False, deprecated=False, message="Tag key cannot be empty")

    names = snapshot.names
    key_name = names.name_for_key(key)
    if not value:
        return ValidationResult(
            valid=False, deprecated=False, message="Tag value cannot be empty", key_name=key_name
        )

    messages: list[str] = []
    result = ValidationResult(valid=True, deprecated=False, message="", key_name=key_name)

    rule = find_tag_deprecation(snapshot.store, key, value)
    if rule is not None:
        result.deprecated = True
        result.replacement = dict(rule.replace)
        result.replacement_detailed = names.tags_detailed(rule.replace)
        messages.append(deprecation_message(rule))

    field = names.field_for_key(key)
    if field is None:
        messages.append(
            f"Tag key '{key}' not found in schema (custom tags are allowed in OpenStreetMap)"
        )
    elif field.options and value not in field.options:
        if field.type == "combo":
            messages.append(
                f"Value '{value}' is not in the standard options for '{key}', "
                "but custom values are allowed"
            )
        else:
            messages.append(
                f"Value '{value}' is not in the standard options for '{key}'. "
                f"Expected one of: {', '.join(field.options)}"
            )

    result.message = ". ".join(messages) if messages else f"Tag {key}={value} is valid"
    return result


async def validate_tag(loader: SchemaLoader, key: str, value: str) -> ValidationResult:
    """Validate a single tag.

    Checks, in order: empty key or value (invalid), single-key deprecation
    (flagged, still valid), field lookup (unknown keys are valid with a
    warning) and the field's options (non-standard values are valid with a
    warning; combo fields say custom values are allowed).

    Args:
        loader: Schema loader.
        key: OSM tag key.
        value: OSM tag value.

    Returns:
        ValidationResult describing the outcome.
    """
    snapshot = await loader.snapshot()
    return _validate(snapshot, key, value)


async def validate_tag_collection(
    loader: SchemaLoader, tags: Mapping[str, str]
) -> CollectionValidationResult:
    """Validate every tag of a collection and check multi-key deprecations."""
    snapshot = await loader.snapshot()
    results = {key: _validate(snapshot, key, value) for key, value in tags.items()}

    valid_count = sum(1 for result in results.values() if result.valid)
    deprecated_count = sum(1 for result in results.values() if result.deprecated)
    error_count = len(results) - valid_count

    logger.debug(
        f"validate_tag_collection: {valid_count} valid, {deprecated_count} deprecated, "
        f"{error_count} errors"
    )
    return CollectionValidationResult(
        valid=error_count == 0,
        tag_results=results,
        valid_count=valid_count,
        deprecated_count=deprecated_count,
        error_count=error_count,
        deprecations=find_deprecations(snapshot.store, tags),
    )


async def check_deprecated(
    loader: SchemaLoader, key: str, value: str | None = None
) -> DeprecationResult:
    """Look up a deprecation rule for a tag or a bare key.

    With a value, only a single-key rule for exactly ``key=value`` matches.
    Without one, the first rule whose old tags mention the key matches.
    """
    store = await loader.load_schema()
    key = key.strip()
    value = value.strip() if value else None
    if not key:
        return DeprecationResult(deprecated=False, message="Tag key cannot be empty")

    if value:
        rule = find_tag_deprecation(store, key, value)
    else:
        rule = next((r for r in store.deprecated if key in r.old), None)

    if rule is None:
        subject = f"Tag {key}={value}" if value else f"Tag key '{key}'"
        return DeprecationResult(deprecated=False, message=f"{subject} is not deprecated")

    return DeprecationResult(
        deprecated=True,
        message=deprecation_message(rule),
        old_tags=dict(rule.old),
        replacement=dict(rule.replace),
    )


def _suggestions_for(
    snapshot: SchemaSnapshot,
    preset_id: str,
    field_ids: Iterable[str],
    optional: bool,
    taken: set[str],
) -> list[Suggestion]:
    suggestions = []
    for field_id in field_ids:
        field = snapshot.store.fields.get(field_id)
        if field is None or field.key in taken:
            continue
        taken.add(field.key)
        if optional:
            message = f"Optional: Consider adding '{field.key}' tag"
        else:
            message = f"Consider adding '{field.key}' tag (common for {preset_id})"
        suggestions.append(
            Suggestion(
                key=field.key,
                key_name=snapshot.names.name_for_key(field.key),
                preset_id=preset_id,
                optional=optional,
                message=message,
            )
        )
    return suggestions


async def suggest_improvements(loader: SchemaLoader, tags: Mapping[str, str]) -> ImprovementResult:
    """Suggest fields to add and flag deprecated tags.

    Uses the first five presets matched by ``tags``. Each contributes its
    expanded fields (common) and then its first three expanded more_fields
    (optional). Keys already present or already suggested are skipped.
    """
    snapshot = await loader.snapshot()
    result = ImprovementResult()
    if not tags:
        return result

    store = snapshot.store
    for key, value in tags.items():
        rule = find_tag_deprecation(store, key, value)
        if rule is not None:
            result.warnings.append(deprecation_message(rule))
    for rule in find_deprecations(store, tags):
        result.warnings.append(deprecation_message(rule))

    result.matched_presets = match_presets(store, tags)

    taken = set(tags)
    for preset_id in result.matched_presets[:MAX_MATCHED_PRESETS]:
        preset = store.presets[preset_id]
        common = expand_field_references(store, preset.fields, "fields")
        optional = expand_field_references(store, preset.more_fields, "more_fields")
        result.suggestions.extend(_suggestions_for(snapshot, preset_id, common, False, taken))
        result.suggestions.extend(
            _suggestions_for(snapshot, preset_id, optional[:MAX_OPTIONAL_FIELDS], True, taken)
        )

    logger.debug(
        f"suggest_improvements: {len(result.matched_presets)} presets, "
        f"{len(result.suggestions)} suggestions"
    )
    return result
