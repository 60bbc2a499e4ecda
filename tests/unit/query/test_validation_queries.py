"""Tests for tag validation, deprecation and suggestions."""

import pytest

from osmtags.core.types import DeprecatedTagRule
from osmtags.query.validation import (
    check_deprecated,
    suggest_improvements,
    validate_tag,
    validate_tag_collection,
)
from osmtags.schema.loader import SchemaLoader
from osmtags.sources import FileSystemSchemaSource


class TestValidateTag:
    """Tests for validate_tag."""

    @pytest.mark.asyncio
    async def test_empty_key_invalid(self, loader):
        result = await validate_tag(loader, "", "x")

        assert result.valid is False
        assert result.message == "Tag key cannot be empty"

    @pytest.mark.asyncio
    async def test_empty_value_invalid(self, loader):
        """Key name is still resolved for an empty value."""
        result = await validate_tag(loader, "amenity", "")

        assert result.valid is False
        assert result.message == "Tag value cannot be empty"
        assert result.key_name == "Amenity"

    @pytest.mark.asyncio
    async def test_known_tag_valid(self, loader):
        result = await validate_tag(loader, "amenity", "restaurant")

        assert result.valid is True
        assert result.deprecated is False
        assert result.message == "Tag amenity=restaurant is valid"

    @pytest.mark.asyncio
    async def test_deprecated_tag(self, loader):
        """Deprecated tags are flagged with their replacement but stay valid."""
        result = await validate_tag(loader, "shop", "organic")

        assert result.valid is True
        assert result.deprecated is True
        assert result.replacement == {"shop": "supermarket", "organic": "only"}
        assert result.replacement_detailed[0].value_name == "Supermarket"
        assert result.message.startswith(
            "Tag shop=organic is deprecated. Consider using: shop=supermarket, organic=only"
        )

    @pytest.mark.asyncio
    async def test_deprecated_single_key_replacement(self, loader):
        result = await validate_tag(loader, "highway", "ford")

        assert result.deprecated is True
        assert result.replacement == {"ford": "yes"}

    @pytest.mark.asyncio
    async def test_multi_key_rule_not_matched_by_single_tag(self, loader):
        """Multi-key deprecations need every old tag at once."""
        result = await validate_tag(loader, "building", "yes")

        assert result.deprecated is False

    @pytest.mark.asyncio
    async def test_unknown_key_valid_with_warning(self, loader):
        result = await validate_tag(loader, "my_custom", "x")

        assert result.valid is True
        assert result.message == (
            "Tag key 'my_custom' not found in schema (custom tags are allowed in OpenStreetMap)"
        )

    @pytest.mark.asyncio
    async def test_combo_accepts_custom_values(self, loader):
        result = await validate_tag(loader, "cuisine", "thai")

        assert result.valid is True
        assert result.message == (
            "Value 'thai' is not in the standard options for 'cuisine', "
            "but custom values are allowed"
        )

    @pytest.mark.asyncio
    async def test_other_types_list_expected_options(self, loader):
        result = await validate_tag(loader, "wheelchair", "maybe")

        assert result.valid is True
        assert result.message == (
            "Value 'maybe' is not in the standard options for 'wheelchair'. "
            "Expected one of: yes, limited, no"
        )

    @pytest.mark.asyncio
    async def test_listed_option_valid(self, loader):
        result = await validate_tag(loader, "wheelchair", "yes")

        assert result.message == "Tag wheelchair=yes is valid"

    @pytest.mark.asyncio
    async def test_field_found_by_real_key(self, loader):
        """parking:both is checked against parking/side/parking."""
        result = await validate_tag(loader, "parking:both", "lane")

        assert result.valid is True
        assert result.message == "Tag parking:both=lane is valid"

    @pytest.mark.asyncio
    async def test_input_trimmed(self, loader):
        result = await validate_tag(loader, "  amenity ", " cafe ")

        assert result.message == "Tag amenity=cafe is valid"


class TestValidateTagCollection:
    """Tests for validate_tag_collection."""

    @pytest.mark.asyncio
    async def test_counts(self, loader):
        result = await validate_tag_collection(
            loader,
            {"amenity": "restaurant", "cuisine": "pizza", "shop": "organic", "name": ""},
        )

        assert result.valid is False
        assert result.valid_count == 3
        assert result.deprecated_count == 1
        assert result.error_count == 1
        assert result.tag_results["name"].valid is False
        assert result.tag_results["shop"].deprecated is True

    @pytest.mark.asyncio
    async def test_multi_key_deprecation_matched_simultaneously(self, loader):
        """A two-tag rule matches only when both tags are present."""
        both = await validate_tag_collection(
            loader, {"building": "yes", "building:use": "residential"}
        )
        one = await validate_tag_collection(loader, {"building": "yes"})

        assert both.deprecations == [
            DeprecatedTagRule(
                old={"building": "yes", "building:use": "residential"},
                replace={"building": "residential"},
            )
        ]
        assert both.deprecated_count == 0
        assert one.deprecations == []

    @pytest.mark.asyncio
    async def test_empty_collection(self, loader):
        result = await validate_tag_collection(loader, {})

        assert result.valid is True
        assert result.valid_count == result.error_count == 0


class TestCheckDeprecated:
    """Tests for check_deprecated."""

    @pytest.mark.asyncio
    async def test_deprecated_tag(self, loader):
        result = await check_deprecated(loader, "highway", "ford")

        assert result.deprecated is True
        assert result.old_tags == {"highway": "ford"}
        assert result.replacement == {"ford": "yes"}
        assert result.message == "Tag highway=ford is deprecated. Consider using: ford=yes"

    @pytest.mark.asyncio
    async def test_not_deprecated(self, loader):
        result = await check_deprecated(loader, "highway", "residential")

        assert result.deprecated is False
        assert result.message == "Tag highway=residential is not deprecated"

    @pytest.mark.asyncio
    async def test_key_only_matches_any_rule_with_key(self, loader):
        result = await check_deprecated(loader, "building:use")

        assert result.deprecated is True
        assert result.old_tags == {"building": "yes", "building:use": "residential"}

    @pytest.mark.asyncio
    async def test_key_only_not_deprecated(self, loader):
        result = await check_deprecated(loader, "cuisine")

        assert result.message == "Tag key 'cuisine' is not deprecated"

    @pytest.mark.asyncio
    async def test_value_only_checks_single_key_rules(self, loader):
        result = await check_deprecated(loader, "building", "yes")

        assert result.deprecated is False

    @pytest.mark.asyncio
    async def test_empty_key(self, loader):
        result = await check_deprecated(loader, " ")

        assert result.deprecated is False
        assert result.message == "Tag key cannot be empty"


class TestSuggestImprovements:
    """Tests for suggest_improvements."""

    @pytest.mark.asyncio
    async def test_common_then_optional_fields(self, loader):
        """Common fields come first; only three optional fields per preset."""
        result = await suggest_improvements(loader, {"amenity": "restaurant"})

        assert result.matched_presets == ["amenity", "amenity/restaurant"]
        assert [(s.key, s.optional) for s in result.suggestions] == [
            ("name", False),
            ("cuisine", False),
            ("addr", False),
            ("opening_hours", False),
            ("email", True),
            ("phone", True),
            ("website", True),
        ]
        assert result.suggestions[1].message == (
            "Consider adding 'cuisine' tag (common for amenity/restaurant)"
        )
        assert result.suggestions[4].message == "Optional: Consider adding 'email' tag"
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_present_keys_skipped(self, loader):
        result = await suggest_improvements(
            loader, {"amenity": "restaurant", "name": "Luigi's", "cuisine": "pizza"}
        )

        keys = [s.key for s in result.suggestions]
        assert "name" not in keys
        assert "cuisine" not in keys
        assert len(keys) == len(set(keys))

    @pytest.mark.asyncio
    async def test_deprecation_warnings(self, loader):
        result = await suggest_improvements(
            loader, {"shop": "organic", "building": "yes", "building:use": "residential"}
        )

        assert result.warnings == [
            "Tag shop=organic is deprecated. Consider using: shop=supermarket, organic=only",
            "Tag building=yes, building:use=residential is deprecated. "
            "Consider using: building=residential",
        ]

    @pytest.mark.asyncio
    async def test_empty_input(self, loader):
        result = await suggest_improvements(loader, {})

        assert result.suggestions == []
        assert result.matched_presets == []

    @pytest.mark.asyncio
    async def test_first_five_presets_only(self, make_schema):
        """Suggestions come from at most five matched presets."""
        presets = {
            f"k/{i}": {"tags": {"k": "*"}, "geometry": ["point"], "fields": [f"f{i}"]}
            for i in range(7)
        }
        fields = {f"f{i}": {"key": f"f{i}", "type": "text"} for i in range(7)}
        dist = make_schema({"presets.json": presets, "fields.json": fields})
        loader = SchemaLoader(FileSystemSchemaSource(str(dist)), locale=None)

        result = await suggest_improvements(loader, {"k": "v"})

        assert len(result.matched_presets) == 7
        assert [s.key for s in result.suggestions] == ["f0", "f1", "f2", "f3", "f4"]
