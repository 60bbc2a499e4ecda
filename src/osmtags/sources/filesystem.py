"""Filesystem schema source.

Reads the schema distribution through fsspec, so any fsspec URL works as a
location: plain paths, ``file://``, ``memory://``, or remote filesystems whose
fsspec implementation is installed.
"""

from __future__ import annotations

import asyncio
import json
import posixpath
from typing import Any

import fsspec
from loguru import logger

from .base import BaseSchemaSource, SourceFetchError


class FileSystemSchemaSource(BaseSchemaSource):
    """Schema source for a directory readable through fsspec.

    Example:
        source = FileSystemSchemaSource("node_modules/@openstreetmap/id-tagging-schema/dist")
        presets = await source.read_json("presets.json")
        package = await source.read_json("../package.json")
    """

    def __init__(self, uri: str, encoding: str = "utf-8") -> None:
        """Initialize filesystem source.

        Args:
            uri: Path or fsspec URL of the distribution directory.
            encoding: Text encoding of the JSON files.
        """
        super().__init__(uri)
        self._fs, root = fsspec.core.url_to_fs(uri)
        self._root = root.rstrip("/") or "/"
        self._encoding = encoding

    def describe(self, name: str) -> str:
        return posixpath.normpath(posixpath.join(self._root, name))

    async def read_json(self, name: str, *, optional: bool = False) -> Any:
        path = self.describe(name)
        try:
            return await asyncio.to_thread(self._read_json, path)
        except FileNotFoundError:
            if optional:
                logger.debug(f"Optional schema file not found: {path}")
                return None
            raise SourceFetchError(path, "file not found")
        except json.JSONDecodeError as e:
            raise SourceFetchError(path, f"invalid JSON: {e}")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceFetchError(path, str(e))

    def _read_json(self, path: str) -> Any:
        with self._fs.open(path, "r", encoding=self._encoding) as f:
            return json.load(f)
