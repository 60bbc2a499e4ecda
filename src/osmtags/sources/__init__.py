"""Tagging schema sources."""

from .base import BaseSchemaSource, SchemaSource, SourceError, SourceFetchError
from .filesystem import FileSystemSchemaSource
from .http import HTTPSchemaSource
from .registry import SourceRegistry, create_default_registry, create_source

__all__ = [
    "SchemaSource",
    "BaseSchemaSource",
    "SourceError",
    "SourceFetchError",
    "FileSystemSchemaSource",
    "HTTPSchemaSource",
    "SourceRegistry",
    "create_default_registry",
    "create_source",
]
