"""Base protocol for tagging schema sources.

A schema source knows how to read the JSON files of one schema distribution
(a directory of ``presets.json``, ``fields.json`` and friends). Uses Protocol
(structural subtyping) so sources don't need to inherit from a base class.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from osmtags.core.exceptions import SourceError, SourceFetchError

__all__ = ["SchemaSource", "BaseSchemaSource", "SourceError", "SourceFetchError"]


@runtime_checkable
class SchemaSource(Protocol):
    """Protocol defining the interface for schema sources.

    Example implementation:

        class InMemorySource:
            def __init__(self, files: dict[str, Any]):
                self._files = files

            @property
            def location(self) -> str:
                return "memory"

            def describe(self, name: str) -> str:
                return f"memory/{name}"

            async def read_json(self, name: str, *, optional: bool = False) -> Any:
                if name not in self._files:
                    if optional:
                        return None
                    raise SourceFetchError(self.describe(name), "not found")
                return self._files[name]

            async def close(self) -> None:
                pass
    """

    @property
    def location(self) -> str:
        """Base location of the schema distribution (path or URL)."""
        ...

    def describe(self, name: str) -> str:
        """Full location of a file within the distribution."""
        ...

    async def read_json(self, name: str, *, optional: bool = False) -> Any:
        """Read and decode one JSON file.

        Args:
            name: File name relative to the distribution root; may climb
                out of it (e.g. "../package.json").
            optional: Return None instead of raising when the file is absent.

        Returns:
            Decoded JSON document, or None for an absent optional file.

        Raises:
            SourceFetchError: If the file cannot be read or decoded.
        """
        ...

    async def close(self) -> None:
        """Release any held resources."""
        ...


class BaseSchemaSource:
    """Optional base class providing default implementations."""

    def __init__(self, location: str) -> None:
        self._location = location

    @property
    def location(self) -> str:
        return self._location

    async def close(self) -> None:
        """Default: nothing to release."""
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
