"""Search commands for osmtags CLI.

Provides three search commands:
- `osmtags search-presets`: presets by keyword or key=value
- `osmtags search-tags`: tag keys and values by keyword
- `osmtags related`: tags co-occurring with a tag
"""

import asyncio

from ...core.config import Config
from ...query import get_related_tags, search_presets, search_tags
from ...schema.loader import SchemaLoader
from .output import print_json


def add_search_presets_arguments(parser) -> None:
    """Add arguments for the search-presets command.

    Args:
        parser: Argument parser for the command.
    """
    parser.add_argument("keyword", help="Search text, or key=value for an exact tag")
    parser.add_argument(
        "-g",
        "--geometry",
        help="Only presets allowing this geometry (point, vertex, line, area, relation)",
    )
    parser.add_argument("-l", "--limit", type=int, help="Maximum results to return")


def add_search_tags_arguments(parser) -> None:
    parser.add_argument("keyword", help="Search text")
    parser.add_argument(
        "-l",
        "--limit",
        type=int,
        default=100,
        help="Maximum key and value matches together (default: 100)",
    )


def add_related_arguments(parser) -> None:
    parser.add_argument("tag", help="Tag as key or key=value")
    parser.add_argument("-l", "--limit", type=int, help="Maximum results to return")


def handle_search_presets(args, config: Config) -> None:
    """Handle search-presets command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    print_json(asyncio.run(_search_presets_async(args, config)))


async def _search_presets_async(args, config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await search_presets(
            loader, args.keyword, geometry=args.geometry, limit=args.limit
        )


def handle_search_tags(args, config: Config) -> None:
    print_json(asyncio.run(_search_tags_async(args, config)))


async def _search_tags_async(args, config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await search_tags(loader, args.keyword, limit=args.limit)


def handle_related(args, config: Config) -> None:
    print_json(asyncio.run(_related_async(args, config)))


async def _related_async(args, config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await get_related_tags(loader, args.tag, limit=args.limit)
