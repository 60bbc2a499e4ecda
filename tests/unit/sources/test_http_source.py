"""Tests for HTTPSchemaSource."""

import httpx
import pytest
import respx

from osmtags.sources import HTTPSchemaSource, SchemaSource, SourceFetchError

BASE = "https://cdn.example.com/npm/schema@6/dist"


class TestHTTPSchemaSource:
    """Tests for HTTPSchemaSource."""

    def test_satisfies_protocol(self):
        assert isinstance(HTTPSchemaSource(BASE), SchemaSource)

    def test_base_url_gets_trailing_slash(self):
        source = HTTPSchemaSource(BASE)

        assert source.base_url == f"{BASE}/"
        assert source.location == BASE

    def test_describe(self):
        """Relative names resolve against the distribution directory."""
        source = HTTPSchemaSource(BASE + "/")

        assert source.describe("presets.json") == f"{BASE}/presets.json"
        assert source.describe("../package.json") == (
            "https://cdn.example.com/npm/schema@6/package.json"
        )

    @pytest.mark.asyncio
    @respx.mock
    async def test_read_json_success(self):
        route = respx.get(f"{BASE}/presets.json").respond(
            200, json={"amenity": {"tags": {"amenity": "*"}, "geometry": ["point"]}}
        )
        source = HTTPSchemaSource(BASE)

        try:
            presets = await source.read_json("presets.json")
        finally:
            await source.close()

        assert presets["amenity"]["tags"] == {"amenity": "*"}
        assert route.called
        assert route.calls.last.request.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_raises(self):
        respx.get(f"{BASE}/fields.json").respond(500)

        async with HTTPSchemaSource(BASE) as source:
            with pytest.raises(SourceFetchError, match="HTTP 500") as exc_info:
                await source.read_json("fields.json")

        assert exc_info.value.uri == f"{BASE}/fields.json"

    @pytest.mark.asyncio
    @respx.mock
    async def test_404_raises_when_required(self):
        respx.get(f"{BASE}/fields.json").respond(404)

        async with HTTPSchemaSource(BASE) as source:
            with pytest.raises(SourceFetchError, match="HTTP 404"):
                await source.read_json("fields.json")

    @pytest.mark.asyncio
    @respx.mock
    async def test_404_optional_returns_none(self):
        respx.get(f"{BASE}/translations/en.json").respond(404)

        async with HTTPSchemaSource(BASE) as source:
            assert await source.read_json("translations/en.json", optional=True) is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_json_raises(self):
        respx.get(f"{BASE}/deprecated.json").respond(200, text="<html>oops</html>")

        async with HTTPSchemaSource(BASE) as source:
            with pytest.raises(SourceFetchError, match="invalid JSON"):
                await source.read_json("deprecated.json")

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_raises(self):
        respx.get(f"{BASE}/presets.json").mock(side_effect=httpx.ReadTimeout("slow"))

        async with HTTPSchemaSource(BASE) as source:
            with pytest.raises(SourceFetchError, match="request timed out"):
                await source.read_json("presets.json")

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error_raises(self):
        respx.get(f"{BASE}/presets.json").mock(side_effect=httpx.ConnectError("refused"))

        async with HTTPSchemaSource(BASE) as source:
            with pytest.raises(SourceFetchError, match="refused"):
                await source.read_json("presets.json")

    @pytest.mark.asyncio
    async def test_close_without_requests(self):
        """Closing a source that never fetched is a no-op."""
        source = HTTPSchemaSource(BASE)

        await source.close()
        await source.close()
