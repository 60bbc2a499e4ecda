"""MCP tool server for osmtags.

Each tool is an async method returning plain dicts. ``call_tool`` dispatches
by tool name and reports domain errors as ``{"error": message}``, which is
what a transport hands back to the client.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Mapping

from loguru import logger

from ..core.config import Config
from ..core.exceptions import OsmTagsError
from ..query import (
    check_deprecated,
    find_matching_presets,
    get_categories,
    get_category,
    get_category_tags,
    get_preset_details,
    get_preset_tags,
    get_related_tags,
    get_schema_stats,
    get_tag_info,
    get_tag_values,
    search_presets,
    search_tags,
    suggest_improvements,
    validate_tag,
    validate_tag_collection,
)
from ..query.tags import DEFAULT_SEARCH_LIMIT
from ..schema.loader import SchemaLoader
from ..sources.base import SchemaSource
from ..utils.tag_parser import flat_to_json, json_to_flat, parse_tag_input

# name -> (description, parameter names)
TOOLS: dict[str, tuple[str, tuple[str, ...]]] = {
    "search_presets": (
        "Search presets by keyword or key=value, optionally filtered by geometry",
        ("keyword", "geometry", "limit"),
    ),
    "search_tags": (
        "Search tag keys and values by keyword; returns key and value matches separately",
        ("keyword", "limit"),
    ),
    "get_tag_values": ("List every known value for a tag key", ("tagKey",)),
    "get_tag_info": ("Describe a tag key, its values and its field type", ("tagKey",)),
    "get_related_tags": (
        "Find tags that commonly appear together with a tag, most frequent first",
        ("tag", "limit"),
    ),
    "find_matching_presets": ("List presets matched by a tag collection", ("tags",)),
    "validate_tag": ("Validate a single tag against the schema", ("key", "value")),
    "validate_tag_collection": ("Validate a collection of tags", ("tags",)),
    "suggest_improvements": (
        "Suggest missing fields and flag deprecated tags in a tag collection",
        ("tags",),
    ),
    "check_deprecated": ("Check whether a tag or key is deprecated", ("key", "value")),
    "get_preset_details": (
        "Describe a preset by id, key=value or tag object, with expanded fields",
        ("presetId",),
    ),
    "get_preset_tags": ("Get the identifying and added tags of a preset", ("presetId",)),
    "get_categories": ("List preset categories with member counts", ()),
    "get_category_tags": ("List the member presets of a category", ("category",)),
    "get_category": ("Describe a category and name its members", ("category",)),
    "get_schema_stats": ("Report schema version and entity counts", ()),
    "flat_to_json": ("Convert key=value text into a tag object", ("tags",)),
    "json_to_flat": ("Convert a tag object into key=value text", ("tags",)),
}


class OsmTagsMCPServer:
    """MCP server exposing tagging schema queries."""

    def __init__(self, config: Config, source: SchemaSource | None = None):
        """Initialize MCP server.

        Args:
            config: Application configuration.
            source: Schema source to use instead of the configured URI.
        """
        self.config = config
        self.loader = SchemaLoader.from_config(config.schema, source=source)

    async def initialize(self) -> None:
        """Initialize the server (load the schema)."""
        await self.loader.warmup()

    async def shutdown(self) -> None:
        """Shutdown the server (close the schema source)."""
        await self.loader.close()

    def list_tools(self) -> list[dict]:
        return [
            {"name": name, "description": description, "parameters": list(parameters)}
            for name, (description, parameters) in TOOLS.items()
        ]

    async def call_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> dict:
        """Dispatch a tool call by name.

        Args:
            name: Tool name from ``list_tools``.
            arguments: Keyword arguments for the tool.

        Returns:
            Tool result, or ``{"error": message}`` for unknown tools, bad
            arguments and domain errors.
        """
        if name not in TOOLS:
            return {"error": f"Unknown tool: {name}"}

        arguments = dict(arguments or {})
        unexpected = sorted(set(arguments) - set(TOOLS[name][1]))
        if unexpected:
            return {"error": f"Unexpected arguments for {name}: {', '.join(unexpected)}"}

        try:
            return await getattr(self, name)(**arguments)
        except (OsmTagsError, ValueError, TypeError) as e:
            logger.debug(f"Tool {name} failed: {e}")
            return {"error": str(e)}

    # -------------------------------------------------------------------------
    # Presets
    # -------------------------------------------------------------------------

    async def search_presets(
        self,
        keyword: str,
        geometry: str | None = None,
        limit: int | None = None,
    ) -> dict:
        """Search presets.

        Args:
            keyword: Search text or key=value.
            geometry: Optional geometry kind filter.
            limit: Maximum results to return.

        Returns:
            Matching presets as dictionary.
        """
        keyword = keyword.strip()
        if not keyword:
            return {"error": "Keyword cannot be empty"}
        results = await search_presets(self.loader, keyword, geometry=geometry, limit=limit)
        return {
            "keyword": keyword,
            "results_count": len(results),
            "results": [asdict(r) for r in results],
        }

    async def find_matching_presets(self, tags: str | Mapping[str, Any]) -> dict:
        parsed = parse_tag_input(tags)
        matches = await find_matching_presets(self.loader, parsed)
        return {"tags": parsed, "presets": matches}

    async def get_preset_details(self, presetId: str | Mapping[str, Any]) -> dict:
        if isinstance(presetId, Mapping):
            preset: str | dict[str, str] = parse_tag_input(presetId)
        else:
            preset = presetId.strip()
        return asdict(await get_preset_details(self.loader, preset))

    async def get_preset_tags(self, presetId: str) -> dict:
        result = await get_preset_tags(self.loader, presetId.strip())
        return asdict(result)

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    async def search_tags(self, keyword: str, limit: int | None = None) -> dict:
        keyword = keyword.strip()
        if not keyword:
            return {"error": "Keyword cannot be empty"}
        if limit is None:
            limit = DEFAULT_SEARCH_LIMIT
        return asdict(await search_tags(self.loader, keyword, limit=limit))

    async def get_tag_values(self, tagKey: str) -> dict:
        return asdict(await get_tag_values(self.loader, tagKey.strip()))

    async def get_tag_info(self, tagKey: str) -> dict:
        return asdict(await get_tag_info(self.loader, tagKey.strip()))

    async def get_related_tags(self, tag: str, limit: int | None = None) -> dict:
        """Find tags co-occurring with a tag.

        Args:
            tag: "key" or "key=value".
            limit: Maximum results to return.

        Returns:
            Related tags as dictionary, most frequent first.
        """
        results = await get_related_tags(self.loader, tag.strip(), limit=limit)
        return {
            "tag": tag.strip(),
            "results_count": len(results),
            "results": [asdict(r) for r in results],
        }

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    async def validate_tag(self, key: str, value: str) -> dict:
        return asdict(await validate_tag(self.loader, key, value))

    async def validate_tag_collection(self, tags: str | Mapping[str, Any]) -> dict:
        result = await validate_tag_collection(self.loader, parse_tag_input(tags))
        return asdict(result)

    async def suggest_improvements(self, tags: str | Mapping[str, Any]) -> dict:
        result = await suggest_improvements(self.loader, parse_tag_input(tags))
        return asdict(result)

    async def check_deprecated(self, key: str, value: str | None = None) -> dict:
        return asdict(await check_deprecated(self.loader, key, value))

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    async def get_categories(self) -> dict:
        categories = await get_categories(self.loader)
        return {
            "categories_count": len(categories),
            "categories": [asdict(c) for c in categories],
        }

    async def get_category_tags(self, category: str) -> dict:
        members = await get_category_tags(self.loader, category.strip())
        return {"category": category.strip(), "presets": members}

    async def get_category(self, category: str) -> dict:
        return asdict(await get_category(self.loader, category.strip()))

    async def get_schema_stats(self) -> dict:
        return asdict(await get_schema_stats(self.loader))

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    async def flat_to_json(self, tags: str) -> dict:
        return {"tags": flat_to_json(tags)}

    async def json_to_flat(self, tags: str | Mapping[str, Any]) -> dict:
        return {"text": json_to_flat(tags)}
