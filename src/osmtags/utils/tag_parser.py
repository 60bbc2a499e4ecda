"""Conversion between flat ``key=value`` text and tag mappings.

Flat text holds one tag per line. Blank lines and lines starting with "#"
are skipped, the first "=" separates key from value, and both sides are
trimmed. Later duplicates of a key replace earlier ones.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from osmtags.core.exceptions import (
    EmptyKeyError,
    EmptyValueError,
    MissingSeparatorError,
    TagInputError,
)


def _lines(text: str) -> list[str]:
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def parse_flat_tags(text: str, allow_empty_values: bool = False) -> dict[str, str]:
    """Parse flat tag text.

    Args:
        text: One ``key=value`` per line.
        allow_empty_values: Keep ``key=`` lines with an empty value instead
            of rejecting them.

    Returns:
        Tags in line order.

    Raises:
        MissingSeparatorError: A line has no "=".
        EmptyKeyError: A line has nothing before "=".
        EmptyValueError: A line has nothing after "=" (unless allowed).
    """
    tags: dict[str, str] = {}
    for number, raw in enumerate(_lines(text), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        key, separator, value = line.partition("=")
        if not separator:
            raise MissingSeparatorError(number)
        key, value = key.strip(), value.strip()
        if not key:
            raise EmptyKeyError(number)
        if not value and not allow_empty_values:
            raise EmptyValueError(number, key)

        tags.pop(key, None)
        tags[key] = value
    return tags


def _load_json_object(text: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise TagInputError(f"Invalid JSON format: {e}") from e
    if not isinstance(parsed, dict):
        raise TagInputError("JSON input must be an object, not an array or primitive")
    return parsed


def _check_flat_text(key: str, value: str) -> None:
    """Reject tags that would not read back unchanged from a flat text line."""
    if "=" in key:
        raise TagInputError(f"Tag key {key!r} cannot contain '=' in flat text")
    if key.startswith("#"):
        raise TagInputError(f"Tag key {key!r} cannot start with '#' in flat text")
    for part in (key, value):
        if "\n" in part or "\r" in part:
            raise TagInputError(f"Tag {key!r} cannot contain a line break in flat text")


def _string_tags(
    raw: Mapping[str, Any], allow_empty_values: bool, flat_text: bool = False
) -> dict[str, str]:
    tags: dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(value, str):
            raise TagInputError(
                f"All values must be strings. Found {type(value).__name__} for key {key!r}"
            )
        key, value = str(key).strip(), value.strip()
        if not key:
            raise TagInputError("Tag key cannot be empty")
        if not value and not allow_empty_values:
            raise TagInputError(f"Tag value cannot be empty for key {key!r}")
        if flat_text:
            _check_flat_text(key, value)
        tags[key] = value
    return tags


def parse_tag_input(tags: str | Mapping[str, Any]) -> dict[str, str]:
    """Accept tags as a mapping, a JSON object string or flat text.

    Empty values are kept so that validation can report them.

    Raises:
        TagInputError: Malformed JSON, non-string values, or a flat text
            parse error.
    """
    if isinstance(tags, Mapping):
        return _string_tags(tags, allow_empty_values=True)
    if not isinstance(tags, str):
        raise TagInputError("Input must be a string or object")

    text = tags.strip()
    if text.startswith("{") or text.startswith("["):
        return _string_tags(_load_json_object(text), allow_empty_values=True)
    return parse_flat_tags(tags, allow_empty_values=True)


def flat_to_json(text: str) -> dict[str, str]:
    """Convert flat tag text into a tag mapping.

    Raises:
        TagParseError: On the first malformed line.
    """
    return parse_flat_tags(text)


def json_to_flat(tags: str | Mapping[str, Any]) -> str:
    """Convert a tag mapping (or JSON object string) into flat text.

    Raises:
        TagInputError: Malformed JSON, non-string or empty values, or
            tags that flat text cannot represent.
    """
    if isinstance(tags, str):
        raw = _load_json_object(tags)
    elif isinstance(tags, Mapping):
        raw = tags
    else:
        raise TagInputError("Input must be a string or object")
    tags = _string_tags(raw, allow_empty_values=False, flat_text=True)
    return "\n".join(f"{key}={value}" for key, value in tags.items())
