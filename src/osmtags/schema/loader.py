"""Schema loader with TTL caching.

The loader owns the only mutable state in the package: one cache entry
holding a store, its index, its name resolver and the monotonic time it was
loaded. A successful load replaces the entry with a single assignment, so
readers see either the old snapshot or the new one, never a mix.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from loguru import logger

from osmtags.core.config import SchemaConfig
from osmtags.core.exceptions import (
    SchemaLoadError,
    SchemaNotLoadedError,
    SchemaStructureError,
    SourceFetchError,
)
from osmtags.core.types import (
    GEOMETRY_KINDS,
    Category,
    DeprecatedTagRule,
    Field,
    Preset,
    SchemaMetadata,
    TaxonomyStore,
)
from osmtags.sources.base import SchemaSource

from .index import TagIndex, build_index, tag_id
from .names import NameResolver

PRESETS_FILE = "presets.json"
FIELDS_FILE = "fields.json"
CATEGORIES_FILE = "preset_categories.json"
DEPRECATED_FILE = "deprecated.json"
DEFAULTS_FILE = "preset_defaults.json"


@dataclass(frozen=True)
class SchemaSnapshot:
    """Everything derived from one successful load."""

    store: TaxonomyStore
    index: TagIndex
    names: NameResolver
    stamp: float


# =============================================================================
# Structural validation
# =============================================================================


def _require_mapping(file: str, raw: Any, *, non_empty: bool = True) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise SchemaStructureError(file, f"expected an object, got {type(raw).__name__}")
    if non_empty and not raw:
        raise SchemaStructureError(file, "must not be empty")
    return raw


def validate_presets(raw: Any) -> Mapping[str, Any]:
    presets = _require_mapping(PRESETS_FILE, raw)
    for preset_id, preset in presets.items():
        if not isinstance(preset, Mapping):
            raise SchemaStructureError(PRESETS_FILE, f"preset {preset_id!r} is not an object")
        geometry = preset.get("geometry")
        if not isinstance(geometry, list) or not geometry:
            raise SchemaStructureError(
                PRESETS_FILE, f"preset {preset_id!r} has no geometry list"
            )
        unknown = [kind for kind in geometry if kind not in GEOMETRY_KINDS]
        if unknown:
            raise SchemaStructureError(
                PRESETS_FILE, f"preset {preset_id!r} has unknown geometry {unknown[0]!r}"
            )
        if not isinstance(preset.get("tags"), Mapping):
            raise SchemaStructureError(PRESETS_FILE, f"preset {preset_id!r} has no tags object")
    return presets


def validate_fields(raw: Any) -> Mapping[str, Any]:
    fields = _require_mapping(FIELDS_FILE, raw)
    for field_id, field in fields.items():
        if not isinstance(field, Mapping):
            raise SchemaStructureError(FIELDS_FILE, f"field {field_id!r} is not an object")
        for attr in ("key", "type"):
            value = field.get(attr)
            if not isinstance(value, str) or not value:
                raise SchemaStructureError(
                    FIELDS_FILE, f"field {field_id!r} has no {attr!r} string"
                )
    return fields


def validate_categories(raw: Any) -> Mapping[str, Any]:
    categories = _require_mapping(CATEGORIES_FILE, raw)
    for category_id, category in categories.items():
        if not isinstance(category, Mapping) or not isinstance(category.get("members"), list):
            raise SchemaStructureError(
                CATEGORIES_FILE, f"category {category_id!r} has no members list"
            )
    return categories


def validate_deprecated(raw: Any) -> list[Mapping[str, Any]]:
    if not isinstance(raw, list):
        raise SchemaStructureError(DEPRECATED_FILE, f"expected a list, got {type(raw).__name__}")
    for position, rule in enumerate(raw):
        if (
            not isinstance(rule, Mapping)
            or not isinstance(rule.get("old"), Mapping)
            or not rule["old"]
            or not isinstance(rule.get("replace"), Mapping)
        ):
            raise SchemaStructureError(
                DEPRECATED_FILE, f"entry {position} needs 'old' and 'replace' objects"
            )
    return raw


def validate_defaults(raw: Any) -> Mapping[str, Any]:
    defaults = _require_mapping(DEFAULTS_FILE, raw, non_empty=False)
    for geometry, members in defaults.items():
        if not isinstance(members, list):
            raise SchemaStructureError(DEFAULTS_FILE, f"defaults for {geometry!r} are not a list")
    return defaults


def read_version(file: str, raw: Any) -> str:
    manifest = _require_mapping(file, raw, non_empty=False)
    version = manifest.get("version")
    if not isinstance(version, str) or not version:
        raise SchemaStructureError(file, "no 'version' string")
    return version


# =============================================================================
# Translations
# =============================================================================


def apply_translations(
    presets: Mapping[str, Any],
    fields: Mapping[str, Any],
    categories: Mapping[str, Any],
    strings: Mapping[str, Any],
) -> tuple[dict[str, Any], dict[str, Any], dict[str, Any]]:
    """Fill names and labels missing from the main files.

    Args:
        presets: Raw presets.json content.
        fields: Raw fields.json content.
        categories: Raw preset_categories.json content.
        strings: The ``presets`` section of a translations file, holding
            ``presets``, ``fields`` and ``categories`` objects.

    Returns:
        New raw preset, field and category maps. Values from the main
        files always win.
    """

    def section(name: str) -> Mapping[str, Any]:
        value = strings.get(name)
        return value if isinstance(value, Mapping) else {}

    preset_strings = section("presets")
    field_strings = section("fields")
    category_strings = section("categories")

    merged_presets = {}
    for preset_id, raw in presets.items():
        translated = preset_strings.get(preset_id)
        if isinstance(translated, Mapping) and not raw.get("name") and translated.get("name"):
            raw = {**raw, "name": translated["name"]}
        merged_presets[preset_id] = raw

    merged_fields = {}
    for field_id, raw in fields.items():
        translated = field_strings.get(field_id)
        if isinstance(translated, Mapping):
            raw = dict(raw)
            if not raw.get("label") and translated.get("label"):
                raw["label"] = translated["label"]
            options = translated.get("options")
            if isinstance(options, Mapping):
                own = raw.get("strings") if isinstance(raw.get("strings"), Mapping) else {}
                own_options = own.get("options") if isinstance(own.get("options"), Mapping) else {}
                raw["strings"] = {**own, "options": {**options, **own_options}}
        merged_fields[field_id] = raw

    merged_categories = {}
    for category_id, raw in categories.items():
        translated = category_strings.get(category_id)
        if isinstance(translated, Mapping) and not raw.get("name") and translated.get("name"):
            raw = {**raw, "name": translated["name"]}
        merged_categories[category_id] = raw

    return merged_presets, merged_fields, merged_categories


def _translation_strings(file: str, raw: Any, locale: str) -> Mapping[str, Any]:
    document = _require_mapping(file, raw, non_empty=False)
    localized = document.get(locale)
    if not isinstance(localized, Mapping):
        return {}
    strings = localized.get("presets")
    return strings if isinstance(strings, Mapping) else {}


# =============================================================================
# Loader
# =============================================================================


class SchemaLoader:
    """Load the tagging schema from a source and cache it.

    Example:
        loader = SchemaLoader(FileSystemSchemaSource("./dist"), cache_ttl=3600)
        store = await loader.load_schema()
        loader.find_presets_by_tag("amenity", "cafe")
    """

    def __init__(
        self,
        source: SchemaSource,
        *,
        cache_ttl: float | None = None,
        locale: str | None = "en",
        version_file: str = "../package.json",
        serve_stale_on_error: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the loader.

        Args:
            source: Where the schema files are read from.
            cache_ttl: Seconds a load stays valid; None never expires.
            locale: Locale of the optional translations file; None skips it.
            version_file: Manifest declaring the schema version.
            serve_stale_on_error: Keep serving the previous snapshot when a
                reload fails.
            clock: Monotonic time source used for expiry.
        """
        self._source = source
        self._cache_ttl = cache_ttl
        self._locale = locale
        self._version_file = version_file
        self._serve_stale_on_error = serve_stale_on_error
        self._clock = clock
        self._entry: SchemaSnapshot | None = None
        self._generation = 0
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: SchemaConfig, source: SchemaSource | None = None) -> "SchemaLoader":
        """Create a loader (and, unless given, its source) from configuration."""
        if source is None:
            from osmtags.sources.registry import create_source

            source = create_source(config.uri, timeout_seconds=config.timeout_seconds)
        return cls(
            source,
            cache_ttl=config.cache_ttl,
            locale=config.locale,
            version_file=config.version_file,
            serve_stale_on_error=config.serve_stale_on_error,
        )

    @property
    def source(self) -> SchemaSource:
        return self._source

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def load_schema(self) -> TaxonomyStore:
        """Return the cached store, loading it first when absent or expired.

        Raises:
            SchemaLoadError: If the load fails and no previous snapshot may
                be served instead.
        """
        return (await self.snapshot()).store

    async def snapshot(self) -> SchemaSnapshot:
        """Return the current snapshot, loading it first when needed."""
        entry = self._entry
        if entry is not None and self._is_fresh(entry):
            logger.debug("Schema cache hit")
            return entry

        async with self._lock:
            # Another task may have finished loading while we waited
            entry = self._entry
            if entry is not None and self._is_fresh(entry):
                return entry

            generation = self._generation
            try:
                fresh = await self._load()
            except SchemaLoadError as e:
                logger.error(str(e))
                if entry is not None and self._serve_stale_on_error:
                    logger.warning(
                        f"Serving stale schema v{entry.store.metadata.version} "
                        "after failed reload"
                    )
                    return entry
                raise

            if generation == self._generation:
                self._entry = fresh
            return fresh

    async def warmup(self) -> None:
        """Load the schema ahead of the first query."""
        await self.load_schema()

    def invalidate(self) -> None:
        """Drop the cached snapshot; the next load re-reads the source."""
        self._entry = None
        self._generation += 1
        logger.debug("Schema cache invalidated")

    async def close(self) -> None:
        await self._source.close()

    async def __aenter__(self) -> "SchemaLoader":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _is_fresh(self, entry: SchemaSnapshot) -> bool:
        if self._cache_ttl is None:
            return True
        return self._clock() - entry.stamp < self._cache_ttl

    async def _load(self) -> SchemaSnapshot:
        location = self._source.location
        translations_file = (
            f"translations/{self._locale}.json" if self._locale else None
        )

        async def read_translations() -> Any:
            if translations_file is None:
                return None
            return await self._source.read_json(translations_file, optional=True)

        try:
            (
                manifest,
                raw_presets,
                raw_fields,
                raw_categories,
                raw_deprecated,
                raw_defaults,
                raw_translations,
            ) = await asyncio.gather(
                self._source.read_json(self._version_file),
                self._source.read_json(PRESETS_FILE),
                self._source.read_json(FIELDS_FILE),
                self._source.read_json(CATEGORIES_FILE),
                self._source.read_json(DEPRECATED_FILE),
                self._source.read_json(DEFAULTS_FILE),
                read_translations(),
            )
        except SourceFetchError as e:
            raise SchemaLoadError(location, str(e)) from e

        try:
            version = read_version(self._version_file, manifest)
            logger.info(f"Loading OSM tagging schema v{version} from {location}")

            presets = validate_presets(raw_presets)
            fields = validate_fields(raw_fields)
            categories = validate_categories(raw_categories)
            deprecated = validate_deprecated(raw_deprecated)
            defaults = validate_defaults(raw_defaults)
            if raw_translations is not None and translations_file is not None:
                strings = _translation_strings(translations_file, raw_translations, self._locale)
                presets, fields, categories = apply_translations(
                    presets, fields, categories, strings
                )
        except SchemaStructureError as e:
            raise SchemaLoadError(location, str(e)) from e

        logger.debug("Schema structure validation passed")

        store = TaxonomyStore(
            presets={pid: Preset.from_dict(pid, raw) for pid, raw in presets.items()},
            fields={fid: Field.from_dict(fid, raw) for fid, raw in fields.items()},
            categories={cid: Category.from_dict(cid, raw) for cid, raw in categories.items()},
            deprecated=tuple(DeprecatedTagRule.from_dict(rule) for rule in deprecated),
            defaults={
                geometry: tuple(m for m in members if isinstance(m, str))
                for geometry, members in defaults.items()
            },
            metadata=SchemaMetadata(version=version, loaded_at=datetime.now(timezone.utc)),
        )
        index = build_index(store)

        logger.info(
            f"Schema v{version} loaded: {len(store.presets)} presets, "
            f"{len(store.fields)} fields, {len(store.categories)} categories, "
            f"{len(store.deprecated)} deprecation rules"
        )
        return SchemaSnapshot(
            store=store,
            index=index,
            names=NameResolver(store, index),
            stamp=self._clock(),
        )

    # -------------------------------------------------------------------------
    # Accessors over the current snapshot
    # -------------------------------------------------------------------------

    def _current(self) -> SchemaSnapshot:
        if self._entry is None:
            raise SchemaNotLoadedError()
        return self._entry

    @property
    def is_loaded(self) -> bool:
        return self._entry is not None

    @property
    def store(self) -> TaxonomyStore:
        return self._current().store

    @property
    def index(self) -> TagIndex:
        return self._current().index

    @property
    def names(self) -> NameResolver:
        return self._current().names

    @property
    def schema_version(self) -> str:
        return self._current().store.metadata.version

    def get_field(self, field_id: str) -> Field | None:
        """Field by lookup path (e.g. "parking/side/parking")."""
        return self._current().store.fields.get(field_id)

    def find_field_by_key(self, key: str) -> Field | None:
        """Field editing a real OSM key (e.g. "parking:both")."""
        return self._current().names.field_for_key(key)

    def find_presets_by_key(self, key: str) -> list[Preset]:
        entry = self._current()
        return [entry.store.presets[pid] for pid in entry.index.by_key.get(key, ())]

    def find_presets_by_tag(self, key: str, value: str) -> list[Preset]:
        entry = self._current()
        return [entry.store.presets[pid] for pid in entry.index.by_tag.get(tag_id(key, value), ())]

    def find_presets_by_geometry(self, geometry: str) -> list[Preset]:
        entry = self._current()
        return [entry.store.presets[pid] for pid in entry.index.by_geometry.get(geometry, ())]

    def get_deprecated(self) -> tuple[DeprecatedTagRule, ...]:
        return self._current().store.deprecated
