"""Image reads and HTTP cache validators.

Images are read off the event loop with ``anyio.to_thread`` so a slow
disk never stalls other requests. Each read also yields the validators
(``ETag``, ``Last-Modified``) used to answer conditional requests.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import formatdate, parsedate_to_datetime
from pathlib import Path

import anyio.to_thread

from httpet.errors import AssetUnavailable
from httpet.pets.registry import AnimalAsset


@dataclass(frozen=True, slots=True)
class ImageCacheHeaders:
    """Validators derived from file metadata."""

    etag: str
    last_modified: str
    mtime: int

    @classmethod
    def from_stat(cls, stat: os.stat_result) -> ImageCacheHeaders:
        mtime = int(stat.st_mtime)
        return cls(
            etag=f'W/"{stat.st_size}-{mtime}"',
            last_modified=formatdate(mtime, usegmt=True),
            mtime=mtime,
        )

    def as_headers(self) -> dict[str, str]:
        return {"ETag": self.etag, "Last-Modified": self.last_modified}


@dataclass(frozen=True, slots=True)
class LoadedAsset:
    """An asset's bytes plus its cache validators."""

    asset: AnimalAsset
    body: bytes
    cache: ImageCacheHeaders


def _opaque(tag: str) -> str:
    tag = tag.strip()
    return tag[2:] if tag.startswith("W/") else tag


def _etag_matches(header: str, etag: str) -> bool:
    # Weak comparison (RFC 9110 §13.1.2): W/ prefixes are ignored.
    if header.strip() == "*":
        return True
    wanted = _opaque(etag)
    return any(_opaque(candidate) == wanted for candidate in header.split(","))


def _not_modified_since(header: str, mtime: int) -> bool:
    try:
        since = parsedate_to_datetime(header)
    except (TypeError, ValueError):
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=UTC)
    return datetime.fromtimestamp(mtime, UTC) <= since


def is_not_modified(headers: Mapping[str, str], cache: ImageCacheHeaders) -> bool:
    """True if a conditional GET can be answered with 304.

    ``If-None-Match`` takes precedence; ``If-Modified-Since`` is only
    consulted when it is absent. Unparseable dates never match.
    """
    if_none_match = headers.get("if-none-match")
    if if_none_match is not None:
        return _etag_matches(if_none_match, cache.etag)
    if_modified_since = headers.get("if-modified-since")
    if if_modified_since is not None:
        return _not_modified_since(if_modified_since, cache.mtime)
    return False


def _read(path: Path) -> tuple[bytes, os.stat_result]:
    with path.open("rb") as fh:
        stat = os.fstat(fh.fileno())
        return fh.read(), stat


async def read_asset(asset: AnimalAsset) -> LoadedAsset:
    """Read *asset* in a worker thread.

    Raises ``AssetUnavailable`` if the file vanished or cannot be read
    since the registry was built.
    """
    try:
        body, stat = await anyio.to_thread.run_sync(_read, asset.path)
    except OSError as exc:
        raise AssetUnavailable(asset.path, exc.strerror or str(exc)) from exc
    return LoadedAsset(asset=asset, body=body, cache=ImageCacheHeaders.from_stat(stat))
