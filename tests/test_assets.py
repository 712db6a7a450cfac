"""Tests for httpet.pets.assets — reading images and cache validators."""

import os
from email.utils import formatdate
from pathlib import Path

import pytest

from conftest import write_image
from httpet.errors import AssetUnavailable
from httpet.pets.assets import ImageCacheHeaders, is_not_modified, read_asset
from httpet.pets.registry import AnimalAsset

MTIME = 1_700_000_000


@pytest.fixture
def image(tmp_path: Path) -> Path:
    path = write_image(tmp_path / "dog" / "404.jpg", b"woof")
    os.utime(path, (MTIME, MTIME))
    return path


class TestImageCacheHeaders:
    def test_from_stat(self, image: Path) -> None:
        cache = ImageCacheHeaders.from_stat(image.stat())
        assert cache.etag == f'W/"4-{MTIME}"'
        assert cache.last_modified == formatdate(MTIME, usegmt=True)
        assert cache.last_modified.endswith("GMT")
        assert cache.as_headers() == {"ETag": cache.etag, "Last-Modified": cache.last_modified}


class TestIsNotModified:
    @pytest.fixture
    def cache(self, image: Path) -> ImageCacheHeaders:
        return ImageCacheHeaders.from_stat(image.stat())

    def test_no_conditional_headers(self, cache: ImageCacheHeaders) -> None:
        assert is_not_modified({}, cache) is False

    def test_matching_etag(self, cache: ImageCacheHeaders) -> None:
        assert is_not_modified({"if-none-match": cache.etag}, cache) is True

    def test_strong_form_matches_weakly(self, cache: ImageCacheHeaders) -> None:
        assert is_not_modified({"if-none-match": cache.etag.removeprefix("W/")}, cache) is True

    def test_etag_in_list(self, cache: ImageCacheHeaders) -> None:
        header = f'"other", {cache.etag}'
        assert is_not_modified({"if-none-match": header}, cache) is True

    def test_star(self, cache: ImageCacheHeaders) -> None:
        assert is_not_modified({"if-none-match": "*"}, cache) is True

    def test_stale_etag(self, cache: ImageCacheHeaders) -> None:
        assert is_not_modified({"if-none-match": 'W/"nope"'}, cache) is False

    def test_if_none_match_takes_precedence(self, cache: ImageCacheHeaders) -> None:
        headers = {"if-none-match": '"stale"', "if-modified-since": cache.last_modified}
        assert is_not_modified(headers, cache) is False

    def test_if_modified_since_equal(self, cache: ImageCacheHeaders) -> None:
        assert is_not_modified({"if-modified-since": cache.last_modified}, cache) is True

    def test_if_modified_since_later(self, cache: ImageCacheHeaders) -> None:
        later = formatdate(MTIME + 60, usegmt=True)
        assert is_not_modified({"if-modified-since": later}, cache) is True

    def test_if_modified_since_earlier(self, cache: ImageCacheHeaders) -> None:
        earlier = formatdate(MTIME - 60, usegmt=True)
        assert is_not_modified({"if-modified-since": earlier}, cache) is False

    def test_garbage_date(self, cache: ImageCacheHeaders) -> None:
        assert is_not_modified({"if-modified-since": "yesterday"}, cache) is False


class TestReadAsset:
    async def test_reads_body_and_validators(self, image: Path) -> None:
        asset = AnimalAsset(image, "image/jpeg", animal="dog", code=404)
        loaded = await read_asset(asset)
        assert loaded.body == b"woof"
        assert loaded.asset is asset
        assert loaded.cache.mtime == MTIME

    async def test_missing_file(self, tmp_path: Path) -> None:
        asset = AnimalAsset(tmp_path / "gone.jpg", "image/jpeg")
        with pytest.raises(AssetUnavailable) as exc_info:
            await read_asset(asset)
        assert exc_info.value.path == tmp_path / "gone.jpg"
        assert "gone.jpg" in str(exc_info.value)
