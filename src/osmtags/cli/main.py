"""CLI entry point for osmtags."""

import argparse
import sys
from typing import NoReturn

from loguru import logger

from .. import __version__
from ..core.config import Config
from . import commands

# command -> (help, add_arguments, handler)
COMMANDS = {
    "search-presets": (
        "Search presets by keyword or key=value",
        commands.add_search_presets_arguments,
        commands.handle_search_presets,
    ),
    "search-tags": (
        "Search tag keys and values by keyword",
        commands.add_search_tags_arguments,
        commands.handle_search_tags,
    ),
    "related": (
        "Tags that co-occur with a tag",
        commands.add_related_arguments,
        commands.handle_related,
    ),
    "values": ("Known values of a tag key", commands.add_key_arguments, commands.handle_values),
    "info": ("Describe a tag key", commands.add_key_arguments, commands.handle_info),
    "match": (
        "Presets matched by a tag collection",
        commands.add_match_arguments,
        commands.handle_match,
    ),
    "validate": ("Validate one tag", commands.add_tag_arguments, commands.handle_validate),
    "validate-collection": (
        "Validate a tag collection",
        commands.add_collection_arguments,
        commands.handle_validate_collection,
    ),
    "suggest": (
        "Suggest improvements for a tag collection",
        commands.add_collection_arguments,
        commands.handle_suggest,
    ),
    "deprecated": (
        "Check whether a tag or key is deprecated",
        commands.add_deprecated_arguments,
        commands.handle_deprecated,
    ),
    "preset": (
        "Describe a preset with expanded fields",
        commands.add_preset_arguments,
        commands.handle_preset,
    ),
    "categories": ("List preset categories", None, commands.handle_categories),
    "category": (
        "Describe a preset category",
        commands.add_category_arguments,
        commands.handle_category,
    ),
    "stats": ("Show schema version and counts", None, commands.handle_stats),
    "flat-to-json": (
        "Convert key=value text into a JSON object",
        commands.add_convert_arguments,
        commands.handle_flat_to_json,
    ),
    "json-to-flat": (
        "Convert a JSON object into key=value text",
        commands.add_convert_arguments,
        commands.handle_json_to_flat,
    ),
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="osmtags",
        description="Query the OpenStreetMap iD tagging schema",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-s",
        "--schema",
        help="Schema location: directory, fsspec URL or http(s) URL (default: $OSMTAGS_SCHEMA_URI or CDN)",
    )
    parser.add_argument(
        "--locale",
        help="Translations locale; empty string disables translations (default: en)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=False)
    for name, (help_text, add_arguments, _) in COMMANDS.items():
        subparser = subparsers.add_parser(name, help=help_text)
        if add_arguments is not None:
            add_arguments(subparser)

    return parser


def configure_logging(level: str) -> None:
    """Send log records at ``level`` and above to stderr."""
    logger.remove()
    logger.add(sys.stderr, level=level)


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    config = Config.from_env()

    if args.schema:
        config.schema.uri = args.schema
    if args.locale is not None:
        config.schema.locale = args.locale or None
    configure_logging("DEBUG" if args.verbose else config.log_level)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        _, _, handler = COMMANDS[args.command]
        handler(args, config)
        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
