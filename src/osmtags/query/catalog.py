"""Schema statistics and category listings."""

from __future__ import annotations

from osmtags.core.exceptions import CategoryNotFoundError
from osmtags.core.types import CategoryDetails, CategoryInfo, SchemaStats
from osmtags.schema.loader import SchemaLoader


async def get_schema_stats(loader: SchemaLoader) -> SchemaStats:
    store = await loader.load_schema()
    return SchemaStats(
        preset_count=len(store.presets),
        field_count=len(store.fields),
        category_count=len(store.categories),
        deprecated_count=len(store.deprecated),
        version=store.metadata.version,
        loaded_at=store.metadata.loaded_at.isoformat(),
    )


async def get_categories(loader: SchemaLoader) -> list[CategoryInfo]:
    """All categories with member counts, sorted by id."""
    snapshot = await loader.snapshot()
    return [
        CategoryInfo(
            name=category_id,
            display_name=snapshot.names.category_name(category_id),
            count=len(category.members),
        )
        for category_id, category in sorted(snapshot.store.categories.items())
    ]


async def get_category_tags(loader: SchemaLoader, name: str) -> list[str]:
    """Member preset ids of a category; empty for an unknown category."""
    store = await loader.load_schema()
    category = store.categories.get(name.strip())
    return list(category.members) if category is not None else []


async def get_category(loader: SchemaLoader, name: str) -> CategoryDetails:
    """Category with members resolved to display names.

    Raises:
        CategoryNotFoundError: If no category has this id.
    """
    snapshot = await loader.snapshot()
    category = snapshot.store.categories.get(name.strip())
    if category is None:
        raise CategoryNotFoundError(name)
    return CategoryDetails(
        name=category.id,
        display_name=snapshot.names.category_name(category.id),
        geometry=list(category.geometry),
        members=list(category.members),
        member_names={member: snapshot.names.preset_name(member) for member in category.members},
        icon=category.icon,
    )
