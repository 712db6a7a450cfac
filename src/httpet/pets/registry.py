"""Animal registry — the fixed set of animals and their images.

Built once at startup by scanning the image directory::

    images/
        default.jpg          site-wide default (required)
        dog/
            404.jpg          one file per status code
            default.jpg      the dog's own fallback (optional)

The registry is immutable after ``scan()`` returns and is shared by
reference between all in-flight requests.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from httpet.errors import ConfigurationError
from httpet.pets.status_codes import StatusCode, parse_status_code

logger = logging.getLogger("httpet.pets")

DEFAULT_STEM = "default"

# Preference order when two files share a stem (404.jpg and 404.png).
ASSET_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}
_PREFERENCE = {suffix: rank for rank, suffix in enumerate(ASSET_TYPES)}

_IDENTIFIER_RE = re.compile(r"[a-z0-9-]+")


def normalize_animal_name(raw: str) -> str | None:
    """Normalize a subdomain label or directory name to an identifier.

    Returns ``None`` for empty labels and labels with characters outside
    letters, digits, and hyphen. Never coerces a bad label into a good one.
    """
    name = raw.strip().lower()
    if not name or _IDENTIFIER_RE.fullmatch(name) is None:
        return None
    return name


def singular(name: str) -> str:
    """Drop a simple plural ``s`` (``dogs`` -> ``dog``, ``bass`` stays)."""
    if len(name) > 1 and name.endswith("s") and not name.endswith("ss"):
        return name[:-1]
    return name


@dataclass(frozen=True, slots=True)
class AnimalAsset:
    """A single image on disk.

    ``animal`` is ``None`` for the site default; ``code`` is ``None`` for
    any default (site-wide or per-animal).
    """

    path: Path
    content_type: str
    animal: str | None = None
    code: int | None = None

    @property
    def key(self) -> str:
        """Logical name such as ``dog/404``, ``dog/default``, ``site/default``."""
        owner = self.animal or "site"
        return f"{owner}/{self.code if self.code is not None else DEFAULT_STEM}"


@dataclass(frozen=True, slots=True)
class AnimalEntry:
    """An animal and the status codes it has a bespoke image for."""

    name: str
    assets: Mapping[int, AnimalAsset]
    fallback: AnimalAsset

    @property
    def codes(self) -> tuple[int, ...]:
        """Status codes with a bespoke image, ascending."""
        return tuple(sorted(self.assets))

    def asset_for(self, code: StatusCode) -> AnimalAsset | None:
        return self.assets.get(code.value)


class AnimalRegistry:
    """Read-only lookup of animals by identifier.

    Construct with ``AnimalRegistry.scan(image_dir)`` in production, or
    directly from entries in tests.
    """

    __slots__ = ("_entries", "_site_default")

    def __init__(self, entries: Iterable[AnimalEntry], site_default: AnimalAsset) -> None:
        self._entries: Mapping[str, AnimalEntry] = MappingProxyType(
            {entry.name: entry for entry in entries}
        )
        self._site_default = site_default

    @property
    def site_default(self) -> AnimalAsset:
        return self._site_default

    def lookup(self, identifier: str) -> AnimalEntry | None:
        """Find an animal by exact name, then by its singular form."""
        entry = self._entries.get(identifier)
        if entry is None:
            entry = self._entries.get(singular(identifier))
        return entry

    def names(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.lookup(identifier) is not None

    def __iter__(self) -> Iterator[AnimalEntry]:
        return (self._entries[name] for name in self.names())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AnimalRegistry(animals={self.names()!r})"

    # -- Construction --

    @classmethod
    def scan(cls, image_dir: str | Path) -> AnimalRegistry:
        """Build a registry from an image directory.

        Raises ``ConfigurationError`` if the directory is missing or
        unreadable, has no site default image, or holds no animals.
        """
        root = Path(image_dir)
        if not root.is_dir():
            msg = f"image directory {root} does not exist or is not a directory"
            raise ConfigurationError(msg)

        children = _list_dir(root)
        defaults = [p for p in children if p.is_file() and _stem(p) == DEFAULT_STEM]
        site_path = _pick(defaults, f"{root}/{DEFAULT_STEM}")
        if site_path is None:
            exts = ", ".join(ASSET_TYPES)
            msg = f"image directory {root} has no site default image (default with one of: {exts})"
            raise ConfigurationError(msg)
        site_default = _asset(site_path)

        entries: dict[str, AnimalEntry] = {}
        for child in children:
            if not child.is_dir():
                continue
            name = normalize_animal_name(child.name)
            if name is None:
                logger.warning("Skipping image folder %r: not a valid animal name", child.name)
                continue
            if name in entries:
                logger.warning("Skipping image folder %r: duplicates animal %r", child.name, name)
                continue
            entry = _scan_animal(child, name, site_default)
            if entry is not None:
                entries[name] = entry

        if not entries:
            msg = f"image directory {root} has no animal folders with images"
            raise ConfigurationError(msg)

        registry = cls(entries.values(), site_default)
        logger.info(
            "Loaded %d animals from %s: %s",
            len(registry),
            root,
            ", ".join(registry.names()),
        )
        return registry


def _scan_animal(directory: Path, name: str, site_default: AnimalAsset) -> AnimalEntry | None:
    by_code: dict[int, list[Path]] = {}
    defaults: list[Path] = []
    for path in _list_dir(directory):
        if not path.is_file() or path.suffix.lower() not in ASSET_TYPES:
            continue
        stem = _stem(path)
        if stem == DEFAULT_STEM:
            defaults.append(path)
            continue
        match parse_status_code(stem):
            case StatusCode(value=value):
                by_code.setdefault(value, []).append(path)
            case invalid:
                logger.debug("Ignoring %s: %s status code", path, invalid.reason)

    assets: dict[int, AnimalAsset] = {}
    for code, paths in by_code.items():
        chosen = _pick(paths, f"{name}/{code}")
        if chosen is not None:
            assets[code] = _asset(chosen, animal=name, code=code)

    default_path = _pick(defaults, f"{name}/{DEFAULT_STEM}")
    if not assets and default_path is None:
        logger.warning("Skipping animal %r: no usable images in %s", name, directory)
        return None

    if default_path is not None:
        fallback = _asset(default_path, animal=name)
    else:
        fallback = site_default
    return AnimalEntry(name=name, assets=MappingProxyType(assets), fallback=fallback)


def _list_dir(directory: Path) -> list[Path]:
    try:
        return sorted(directory.iterdir())
    except OSError as exc:
        msg = f"image directory {directory} is not readable: {exc}"
        raise ConfigurationError(msg) from exc


def _stem(path: Path) -> str:
    return path.stem.lower()


def _pick(paths: list[Path], label: str) -> Path | None:
    candidates = [p for p in paths if p.suffix.lower() in ASSET_TYPES]
    if not candidates:
        return None
    candidates.sort(key=lambda p: (_PREFERENCE[p.suffix.lower()], p.name))
    if len(candidates) > 1:
        logger.warning(
            "Multiple images for %s, using %s (ignoring %s)",
            label,
            candidates[0].name,
            ", ".join(p.name for p in candidates[1:]),
        )
    return candidates[0]


def _asset(path: Path, *, animal: str | None = None, code: int | None = None) -> AnimalAsset:
    return AnimalAsset(
        path=path,
        content_type=ASSET_TYPES[path.suffix.lower()],
        animal=animal,
        code=code,
    )
