"""Tag key commands for osmtags CLI."""

import asyncio

from ...core.config import Config
from ...query import get_tag_info, get_tag_values
from ...schema.loader import SchemaLoader
from .output import print_json


def add_key_arguments(parser) -> None:
    parser.add_argument("key", help="OSM tag key (e.g. wheelchair, parking:both)")


def handle_values(args, config: Config) -> None:
    """Handle values command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    print_json(asyncio.run(_values_async(args, config)))


async def _values_async(args, config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await get_tag_values(loader, args.key)


def handle_info(args, config: Config) -> None:
    print_json(asyncio.run(_info_async(args, config)))


async def _info_async(args, config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await get_tag_info(loader, args.key)
