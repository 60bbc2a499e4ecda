"""Configuration management for osmtags."""

import os
from dataclasses import dataclass, field

DEFAULT_SCHEMA_URI = "https://cdn.jsdelivr.net/npm/@openstreetmap/id-tagging-schema@6/dist"


@dataclass
class SchemaConfig:
    """Tagging schema source and cache configuration."""

    # Directory (local path, fsspec URL or http(s) URL) holding the dist JSON files
    uri: str = DEFAULT_SCHEMA_URI
    # Package manifest declaring the schema version, relative to uri
    version_file: str = "../package.json"
    # Locale of the optional translations file; None disables translations
    locale: str | None = "en"
    # Seconds before a loaded schema expires; None means never
    cache_ttl: float | None = None
    # Keep serving the previous snapshot when a reload fails
    serve_stale_on_error: bool = True
    timeout_seconds: float = 30.0


@dataclass
class Config:
    """Main application configuration."""

    schema: SchemaConfig = field(default_factory=SchemaConfig)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        config = cls()

        if uri := os.environ.get("OSMTAGS_SCHEMA_URI"):
            config.schema.uri = uri

        if ttl := os.environ.get("OSMTAGS_CACHE_TTL"):
            config.schema.cache_ttl = float(ttl)

        if "OSMTAGS_LOCALE" in os.environ:
            config.schema.locale = os.environ["OSMTAGS_LOCALE"] or None

        if timeout := os.environ.get("OSMTAGS_TIMEOUT"):
            config.schema.timeout_seconds = float(timeout)

        if level := os.environ.get("OSMTAGS_LOG_LEVEL"):
            config.log_level = level.upper()

        return config
