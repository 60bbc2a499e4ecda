"""Validation commands for osmtags CLI.

Tag collections are given as flat key=value text, a JSON object, or "-" to
read either from stdin.
"""

import asyncio

from ...core.config import Config
from ...query import (
    check_deprecated,
    suggest_improvements,
    validate_tag,
    validate_tag_collection,
)
from ...schema.loader import SchemaLoader
from ...utils.tag_parser import parse_tag_input
from .output import print_json, read_input


def add_tag_arguments(parser) -> None:
    parser.add_argument("key", help="OSM tag key")
    parser.add_argument("value", help="OSM tag value")


def add_deprecated_arguments(parser) -> None:
    parser.add_argument("key", help="OSM tag key")
    parser.add_argument("value", nargs="?", help="OSM tag value (optional)")


def add_collection_arguments(parser) -> None:
    parser.add_argument("tags", help='Tags as key=value lines, a JSON object, or "-" for stdin')


def handle_validate(args, config: Config) -> None:
    """Handle validate command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    print_json(asyncio.run(_validate_async(args, config)))


async def _validate_async(args, config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await validate_tag(loader, args.key, args.value)


def handle_validate_collection(args, config: Config) -> None:
    tags = parse_tag_input(read_input(args.tags))
    print_json(asyncio.run(_validate_collection_async(tags, config)))


async def _validate_collection_async(tags: dict[str, str], config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await validate_tag_collection(loader, tags)


def handle_suggest(args, config: Config) -> None:
    tags = parse_tag_input(read_input(args.tags))
    print_json(asyncio.run(_suggest_async(tags, config)))


async def _suggest_async(tags: dict[str, str], config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await suggest_improvements(loader, tags)


def handle_deprecated(args, config: Config) -> None:
    print_json(asyncio.run(_deprecated_async(args, config)))


async def _deprecated_async(args, config: Config):
    async with SchemaLoader.from_config(config.schema) as loader:
        return await check_deprecated(loader, args.key, args.value)
