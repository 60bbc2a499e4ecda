"""Tag format conversion commands for osmtags CLI.

These work offline; no schema is loaded.
"""

from ...core.config import Config
from ...utils.tag_parser import flat_to_json, json_to_flat
from .output import print_json, read_input


def add_convert_arguments(parser) -> None:
    parser.add_argument("tags", help='Tags to convert, or "-" for stdin')


def handle_flat_to_json(args, config: Config) -> None:
    print_json(flat_to_json(read_input(args.tags)))


def handle_json_to_flat(args, config: Config) -> None:
    print(json_to_flat(read_input(args.tags)))
