"""Pytest configuration and fixtures."""

import copy
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from osmtags.core.types import (
    Category,
    DeprecatedTagRule,
    Field,
    Preset,
    SchemaMetadata,
    TaxonomyStore,
)
from osmtags.schema.index import build_index
from osmtags.schema.loader import SchemaLoader, apply_translations
from osmtags.schema.names import NameResolver
from osmtags.sources import FileSystemSchemaSource

PRESETS = {
    "amenity": {
        "tags": {"amenity": "*"},
        "geometry": ["point", "vertex", "area"],
        "name": "Amenity",
        "fields": ["name", "amenity"],
    },
    "amenity/restaurant": {
        "tags": {"amenity": "restaurant"},
        "geometry": ["point", "area"],
        "name": "Restaurant",
        "icon": "maki-restaurant",
        "terms": ["dining", "food"],
        "fields": ["name", "cuisine", "{@templates/poi}", "opening_hours"],
        "moreFields": [
            "{@templates/contact}",
            "outdoor_seating",
            "takeaway",
            "wheelchair",
            "capacity",
        ],
    },
    "amenity/cafe": {
        "tags": {"amenity": "cafe"},
        "geometry": ["point", "area"],
        "name": "Cafe",
        "fields": ["name", "cuisine", "internet_access", "opening_hours"],
        "moreFields": ["{@templates/internet_access}", "outdoor_seating", "wheelchair"],
    },
    "amenity/fast_food": {
        "tags": {"amenity": "fast_food"},
        "geometry": ["point", "area"],
        "name": "Fast Food",
        "fields": ["{amenity/restaurant}", "drive_through"],
        "moreFields": ["{amenity/restaurant}"],
    },
    "amenity/restaurant/pizza": {
        "tags": {"amenity": "restaurant", "cuisine": "pizza"},
        "geometry": ["point", "area"],
        "name": "Pizza Restaurant",
        "fields": ["{amenity/restaurant}"],
    },
    "amenity/restaurant/sushi": {
        "tags": {"amenity": "restaurant", "cuisine": "sushi"},
        "addTags": {"amenity": "restaurant", "cuisine": "sushi", "takeaway": "yes"},
        "geometry": ["point", "area"],
        "name": "Sushi Restaurant",
    },
    "amenity/toilets": {
        "tags": {"amenity": "toilets"},
        "geometry": ["point", "vertex", "area"],
        "name": "Toilets",
        "fields": ["toilets/wheelchair", "fee"],
        "moreFields": ["opening_hours"],
    },
    "amenity/parking": {
        "tags": {"amenity": "parking"},
        "geometry": ["point", "vertex", "area"],
        "name": "Parking Lot",
        "fields": ["parking", "fee", "capacity"],
    },
    "amenity/bench": {
        "tags": {"amenity": "bench"},
        "geometry": ["point", "vertex", "line"],
    },
    "building": {
        "tags": {"building": "*"},
        "geometry": ["area"],
        "name": "Building",
        "fields": ["building"],
    },
    "building/house": {
        "tags": {"building": "house"},
        "geometry": ["point", "area"],
        "name": "House",
    },
    "highway/residential": {
        "tags": {"highway": "residential"},
        "geometry": ["line"],
        "name": "Residential Road",
        "fields": ["oneway", "surface"],
    },
    "highway/crossing/zebra": {
        "tags": {"highway": "crossing", "crossing": "zebra|marked"},
        "geometry": ["vertex"],
        "name": "Zebra Crossing",
        "fields": ["{@templates/crossing/defaults}"],
    },
    "leisure/park": {
        "tags": {"leisure": "park"},
        "geometry": ["point", "area"],
    },
    "shop/supermarket": {
        "tags": {"shop": "supermarket"},
        "geometry": ["point", "area"],
        "name": "Supermarket",
        "fields": ["name", "opening_hours", "wheelchair"],
    },
    "type/route": {
        "tags": {"type": "route"},
        "geometry": ["relation"],
        "name": "Route",
    },
    "point": {
        "tags": {},
        "geometry": ["point"],
        "name": "Point",
        "searchable": False,
    },
}

FIELDS = {
    "name": {"key": "name", "type": "localized", "label": "Name"},
    "amenity": {"key": "amenity", "type": "typeCombo", "label": "Type"},
    "cuisine": {
        "key": "cuisine",
        "type": "combo",
        "label": "Cuisine",
        "options": ["pizza", "sushi", "chinese", "italian"],
        "strings": {
            "options": {
                "chinese": "Chinese",
                "italian": {"title": "Italian", "description": "Pasta and pizza"},
            }
        },
    },
    "opening_hours": {"key": "opening_hours", "type": "text", "label": "Hours"},
    "wheelchair": {
        "key": "wheelchair",
        "type": "radio",
        "label": "Wheelchair Access",
        "options": ["yes", "limited", "no"],
        "strings": {
            "options": {
                "yes": {"title": "Yes", "description": "Fully accessible"},
                "limited": {"title": "Limited", "description": "Partly accessible"},
                "no": {"title": "No", "description": "Not accessible"},
            }
        },
    },
    "toilets/wheelchair": {
        "key": "toilets:wheelchair",
        "type": "check",
        "label": "Wheelchair Toilets",
    },
    "parking/side/parking": {
        "key": "parking:both",
        "type": "combo",
        "label": "Parking Both Sides",
        "options": ["lane", "street_side", "no"],
    },
    "parking": {
        "key": "parking",
        "type": "combo",
        "label": "Parking Type",
        "options": ["surface", "multi-storey", "underground"],
    },
    "fee": {"key": "fee", "type": "check", "label": "Fee"},
    "outdoor_seating": {"key": "outdoor_seating", "type": "check", "label": "Outdoor Seating"},
    "takeaway": {
        "key": "takeaway",
        "type": "check",
        "label": "Takeaway",
        "options": ["yes", "no", "only"],
    },
    "internet_access": {
        "key": "internet_access",
        "type": "combo",
        "label": "Internet Access",
        "options": ["yes", "no", "wlan", "wired"],
    },
    "internet_access/fee": {
        "key": "internet_access:fee",
        "type": "check",
        "label": "Internet Access Fee",
    },
    "oneway": {
        "key": "oneway",
        "type": "check",
        "label": "One Way",
        "options": ["yes", "no", "-1"],
    },
    "surface": {
        "key": "surface",
        "type": "combo",
        "options": ["asphalt", "paved", "gravel"],
    },
    "building": {
        "key": "building",
        "type": "combo",
        "label": "Building",
        "options": ["house", "yes|no"],
    },
    "building_area": {"key": "building", "type": "defaultCheck", "label": "Building Area"},
    "email": {"key": "email", "type": "email", "label": "Email"},
    "phone": {"key": "phone", "type": "tel", "label": "Phone"},
    "website": {"key": "website", "type": "url", "label": "Website"},
    "address": {"key": "addr", "type": "address", "label": "Address"},
    "capacity": {"key": "capacity", "type": "number", "label": "Capacity"},
    "drive_through": {"key": "drive_through", "type": "check", "label": "Drive-Through"},
}

CATEGORIES = {
    "category-food": {
        "name": "Food & Drink",
        "icon": "maki-restaurant",
        "geometry": ["point", "area"],
        "members": ["amenity/restaurant", "amenity/cafe", "amenity/fast_food"],
    },
    "category-road_minor": {
        "geometry": ["line"],
        "members": ["highway/residential"],
    },
}

DEPRECATED = [
    {"old": {"shop": "organic"}, "replace": {"shop": "supermarket", "organic": "only"}},
    {"old": {"amenity": "public_building"}, "replace": {"building": "public"}},
    {"old": {"highway": "ford"}, "replace": {"ford": "yes"}},
    {
        "old": {"building": "yes", "building:use": "residential"},
        "replace": {"building": "residential"},
    },
]

DEFAULTS = {
    "point": ["amenity/restaurant", "amenity/cafe"],
    "vertex": [],
    "line": ["highway/residential"],
    "area": ["building"],
    "relation": ["type/route"],
}

PACKAGE = {"name": "@openstreetmap/id-tagging-schema", "version": "6.7.3"}

TRANSLATIONS = {
    "en": {
        "presets": {
            "presets": {
                "leisure/park": {"name": "Park"},
                "amenity/restaurant": {"name": "Eatery"},
            },
            "fields": {
                "surface": {
                    "label": "Surface",
                    "options": {
                        "asphalt": "Asphalt",
                        "gravel": {"title": "Gravel", "description": "Loose stones"},
                    },
                },
                "cuisine": {"options": {"chinese": "Chinois", "pizza": "Pizza"}},
            },
            "categories": {"category-food": {"name": "Eat"}},
        }
    }
}


def schema_files() -> dict[str, object]:
    """Fresh copy of every fixture file, keyed by path relative to dist/."""
    return copy.deepcopy(
        {
            "presets.json": PRESETS,
            "fields.json": FIELDS,
            "preset_categories.json": CATEGORIES,
            "deprecated.json": DEPRECATED,
            "preset_defaults.json": DEFAULTS,
            "../package.json": PACKAGE,
            "translations/en.json": TRANSLATIONS,
        }
    )


def write_schema(dist: Path, files: dict[str, object]) -> Path:
    """Write schema files below ``dist`` and return it."""
    for name, content in files.items():
        path = (dist / name).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(content), encoding="utf-8")
    return dist


def build_store() -> TaxonomyStore:
    """Build the fixture store in memory, translations applied."""
    presets, fields, categories = apply_translations(
        PRESETS, FIELDS, CATEGORIES, TRANSLATIONS["en"]["presets"]
    )
    return TaxonomyStore(
        presets={pid: Preset.from_dict(pid, raw) for pid, raw in presets.items()},
        fields={fid: Field.from_dict(fid, raw) for fid, raw in fields.items()},
        categories={cid: Category.from_dict(cid, raw) for cid, raw in categories.items()},
        deprecated=tuple(DeprecatedTagRule.from_dict(rule) for rule in DEPRECATED),
        defaults={geometry: tuple(ids) for geometry, ids in DEFAULTS.items()},
        metadata=SchemaMetadata(
            version=PACKAGE["version"],
            loaded_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ),
    )


@pytest.fixture
def schema_dir(tmp_path: Path) -> Path:
    """Provide a schema distribution directory with all fixture files."""
    return write_schema(tmp_path / "dist", schema_files())


@pytest.fixture
def make_schema(tmp_path: Path):
    """Provide a factory for distributions with files replaced or removed.

    ``overrides`` maps file names to new content; a str is written verbatim
    so tests can produce invalid JSON.
    """

    def _make(
        overrides: dict[str, object] | None = None,
        remove: tuple[str, ...] = (),
        name: str = "custom",
    ) -> Path:
        dist = tmp_path / name / "dist"
        files = schema_files()
        for file in remove:
            files.pop(file)
        raw = {}
        for file, content in (overrides or {}).items():
            if isinstance(content, str):
                raw[file] = content
            else:
                files[file] = content
        write_schema(dist, files)
        for file, text in raw.items():
            path = (dist / file).resolve()
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return dist

    return _make


@pytest.fixture
def source(schema_dir: Path) -> FileSystemSchemaSource:
    """Provide a filesystem source over the fixture distribution."""
    return FileSystemSchemaSource(str(schema_dir))


@pytest.fixture
def loader(source: FileSystemSchemaSource) -> SchemaLoader:
    """Provide an unloaded SchemaLoader; queries load it on first use."""
    return SchemaLoader(source)


@pytest.fixture
def store() -> TaxonomyStore:
    """Provide the fixture store without going through the loader."""
    return build_store()


@pytest.fixture
def names(store: TaxonomyStore) -> NameResolver:
    """Provide a NameResolver over the fixture store."""
    return NameResolver(store, build_index(store))
