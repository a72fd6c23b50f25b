"""
SiteList Backend: Asset Service Unit Tests
=============================================

What:  Tests for key derivation, content-type mapping and lookup outcomes.
"""

import pytest

from sitelist.exceptions import AssetNotFoundError, AssetServeError
from sitelist.services.asset_service import AssetService, content_type_for, key_for_path

from tests.conftest import FailingStore


class TestContentType:

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("index.html", "text/html"),
            ("style.css", "text/css"),
            ("app.js", "application/javascript"),
            ("logo.png", "image/png"),
            ("photo.jpg", "image/jpeg"),
            ("photo.jpeg", "image/jpeg"),
            ("icon.svg", "image/svg+xml"),
            ("data.json", "application/octet-stream"),
            ("README", "application/octet-stream"),
            ("UPPER.HTML", "application/octet-stream"),
        ],
    )
    def test_suffix_mapping(self, key, expected):
        assert content_type_for(key) == expected


class TestKeyForPath:

    def test_strips_one_leading_slash(self):
        assert key_for_path("/index.html") == "index.html"
        assert key_for_path("//double.css") == "/double.css"

    def test_nested_and_bare_paths(self):
        assert key_for_path("/css/app.css") == "css/app.css"
        assert key_for_path("plain.js") == "plain.js"


class TestGetAsset:

    @pytest.mark.asyncio
    async def test_found(self, memory_store, asset_service):
        await memory_store.write("icon.svg", b"<svg/>")
        asset = await asset_service.get_asset("/icon.svg")
        assert asset.key == "icon.svg"
        assert asset.content == b"<svg/>"
        assert asset.media_type == "image/svg+xml"

    @pytest.mark.asyncio
    async def test_missing(self, asset_service):
        with pytest.raises(AssetNotFoundError) as exc_info:
            await asset_service.get_asset("/nope.css")
        assert exc_info.value.message == "File not found"

    @pytest.mark.asyncio
    async def test_empty_value_is_missing(self, memory_store, asset_service):
        await memory_store.write("empty.js", b"")
        with pytest.raises(AssetNotFoundError):
            await asset_service.get_asset("/empty.js")

    @pytest.mark.asyncio
    async def test_lookup_failure(self):
        service = AssetService(FailingStore(fail_reads=True))
        with pytest.raises(AssetServeError) as exc_info:
            await service.get_asset("/index.html")
        assert exc_info.value.message == "Error serving file"
