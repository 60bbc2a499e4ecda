"""Utility functions for osmtags."""

from .tag_parser import flat_to_json, json_to_flat, parse_flat_tags, parse_tag_input

__all__ = ["flat_to_json", "json_to_flat", "parse_flat_tags", "parse_tag_input"]
