"""Schema status and category commands for osmtags CLI."""

import asyncio

from ...core.config import Config
from ...query import get_categories, get_category, get_schema_stats
from ...schema.loader import SchemaLoader
from .output import print_json


def add_category_arguments(parser) -> None:
    parser.add_argument("name", help="Category id (e.g. category-food)")


def handle_stats(args, config: Config) -> None:
    """Handle stats command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    print_json(asyncio.run(_stats_async(config)))


async def _stats_async(config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await get_schema_stats(loader)


def handle_categories(args, config: Config) -> None:
    print_json(asyncio.run(_categories_async(config)))


async def _categories_async(config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await get_categories(loader)


def handle_category(args, config: Config) -> None:
    print_json(asyncio.run(_category_async(args, config)))


async def _category_async(args, config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await get_category(loader, args.name)
