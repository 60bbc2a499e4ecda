"""Source registry for creating SchemaSource instances from URIs.

Maps URI schemes to factory functions, so the loader can be configured with a
plain string and stay ignorant of concrete source implementations.
"""

from __future__ import annotations

from typing import Any, Callable
from urllib.parse import urlparse

from loguru import logger

from .base import SchemaSource

# Factory signature: takes a URI plus options, returns a SchemaSource
SourceFactory = Callable[..., SchemaSource]

# Scheme used for bare paths and any scheme without a dedicated factory
FALLBACK_SCHEME = "file"


class SourceRegistry:
    """Registry mapping URI schemes to SchemaSource factories.

    Example:
        registry = create_default_registry()
        source = registry.create_source("https://cdn.example.com/dist")
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._factories: dict[str, SourceFactory] = {}

    def register(self, scheme: str, factory: SourceFactory) -> None:
        """Register a factory for a URI scheme.

        Args:
            scheme: URI scheme (e.g., "http", "file").
            factory: Callable taking the URI and keyword options.
        """
        if scheme in self._factories:
            logger.warning(f"Overwriting source factory for {scheme!r}")
        self._factories[scheme] = factory
        logger.debug(f"Registered source factory: {scheme!r}")

    def is_registered(self, scheme: str) -> bool:
        return scheme in self._factories

    def create_source(self, uri: str, **options: Any) -> SchemaSource:
        """Create a SchemaSource for the given URI.

        Bare paths and schemes without a dedicated factory are handed to the
        "file" factory, which reads through fsspec.

        Args:
            uri: Location of the schema distribution.
            **options: Factory-specific options (e.g. timeout_seconds).

        Returns:
            Configured SchemaSource instance.

        Raises:
            ValueError: If neither the scheme nor the fallback is registered.
        """
        scheme = urlparse(uri).scheme.lower()
        factory = self._factories.get(scheme) or self._factories.get(FALLBACK_SCHEME)
        if factory is None:
            available = ", ".join(self.registered_schemes) or "(none)"
            raise ValueError(f"No schema source for {uri!r}. Available: {available}")
        return factory(uri, **options)

    @property
    def registered_schemes(self) -> list[str]:
        return sorted(self._factories.keys())


def create_default_registry() -> SourceRegistry:
    """Create a registry with the built-in sources registered."""
    from .filesystem import FileSystemSchemaSource
    from .http import HTTPSchemaSource

    def filesystem_factory(uri: str, **options: Any) -> SchemaSource:
        return FileSystemSchemaSource(uri, encoding=options.get("encoding", "utf-8"))

    def http_factory(uri: str, **options: Any) -> SchemaSource:
        return HTTPSchemaSource(uri, timeout_seconds=options.get("timeout_seconds", 30.0))

    registry = SourceRegistry()
    registry.register("file", filesystem_factory)
    registry.register("http", http_factory)
    registry.register("https", http_factory)
    return registry


def create_source(uri: str, **options: Any) -> SchemaSource:
    """Create a SchemaSource using the built-in sources."""
    return create_default_registry().create_source(uri, **options)
