"""Tests for schema statistics and categories."""

from datetime import datetime

import pytest

from osmtags.core.exceptions import CategoryNotFoundError
from osmtags.query.catalog import (
    get_categories,
    get_category,
    get_category_tags,
    get_schema_stats,
)


class TestSchemaStats:
    """Tests for get_schema_stats."""

    @pytest.mark.asyncio
    async def test_counts_and_version(self, loader):
        stats = await get_schema_stats(loader)

        assert stats.preset_count == 17
        assert stats.field_count == 23
        assert stats.category_count == 2
        assert stats.deprecated_count == 4
        assert stats.version == "6.7.3"
        assert datetime.fromisoformat(stats.loaded_at).tzinfo is not None


class TestCategories:
    """Tests for category listings."""

    @pytest.mark.asyncio
    async def test_get_categories_sorted(self, loader):
        categories = await get_categories(loader)

        assert [(c.name, c.display_name, c.count) for c in categories] == [
            ("category-food", "Food & Drink", 3),
            ("category-road_minor", "Road Minor", 1),
        ]

    @pytest.mark.asyncio
    async def test_get_category_tags(self, loader):
        members = await get_category_tags(loader, "category-food")

        assert members == ["amenity/restaurant", "amenity/cafe", "amenity/fast_food"]

    @pytest.mark.asyncio
    async def test_get_category_tags_unknown_is_empty(self, loader):
        """Unknown categories give an empty list, not an error."""
        assert await get_category_tags(loader, "nonexistent-category") == []

    @pytest.mark.asyncio
    async def test_get_category(self, loader):
        details = await get_category(loader, "category-food")

        assert details.display_name == "Food & Drink"
        assert details.icon == "maki-restaurant"
        assert details.geometry == ["point", "area"]
        assert details.member_names == {
            "amenity/restaurant": "Restaurant",
            "amenity/cafe": "Cafe",
            "amenity/fast_food": "Fast Food",
        }

    @pytest.mark.asyncio
    async def test_get_category_unknown_raises(self, loader):
        with pytest.raises(CategoryNotFoundError, match="Category not found: nope"):
            await get_category(loader, "nope")
