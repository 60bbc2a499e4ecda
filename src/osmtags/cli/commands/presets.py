"""Preset commands for osmtags CLI."""

import asyncio

from ...core.config import Config
from ...query import find_matching_presets, get_preset_details
from ...schema.loader import SchemaLoader
from ...utils.tag_parser import parse_tag_input
from .output import print_json, read_input


def add_preset_arguments(parser) -> None:
    parser.add_argument("preset", help="Preset id (amenity/cafe) or key=value")


def add_match_arguments(parser) -> None:
    parser.add_argument("tags", help='Tags as key=value lines, a JSON object, or "-" for stdin')


def handle_preset(args, config: Config) -> None:
    """Handle preset command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    print_json(asyncio.run(_preset_async(args, config)))


async def _preset_async(args, config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await get_preset_details(loader, args.preset)


def handle_match(args, config: Config) -> None:
    tags = parse_tag_input(read_input(args.tags))
    print_json(asyncio.run(_match_async(tags, config)))


async def _match_async(tags: dict[str, str], config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await find_matching_presets(loader, tags)
