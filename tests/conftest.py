"""Shared fixtures: a temporary image tree and an app built over it.

Layout::

    images/
        default.jpg
        dog/404.jpg  dog/500.png  dog/default.jpg
        cat/418.jpg                  (no default: uses the site default)
"""

from pathlib import Path

import pytest

from httpet.app import App, create_app
from httpet.config import HttpetConfig
from httpet.pets.registry import AnimalRegistry


def write_image(path: Path, data: bytes | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data if data is not None else f"{path.parent.name}/{path.name}".encode())
    return path


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    root = tmp_path / "images"
    write_image(root / "default.jpg")
    write_image(root / "dog" / "404.jpg")
    write_image(root / "dog" / "500.png")
    write_image(root / "dog" / "default.jpg")
    write_image(root / "cat" / "418.jpg")
    return root


@pytest.fixture
def registry(image_dir: Path) -> AnimalRegistry:
    return AnimalRegistry.scan(image_dir)


@pytest.fixture
def config(image_dir: Path) -> HttpetConfig:
    return HttpetConfig(base_domain="example.org", image_dir=image_dir).validate()


@pytest.fixture
def app(config: HttpetConfig, registry: AnimalRegistry) -> App:
    return create_app(config, registry)
