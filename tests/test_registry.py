"""Tests for httpet.pets.registry — scanning the image tree and lookups."""

import logging
from pathlib import Path

import pytest

from conftest import write_image
from httpet.errors import ConfigurationError
from httpet.pets.registry import AnimalRegistry, normalize_animal_name, singular
from httpet.pets.status_codes import StatusCode


class TestNormalizeAnimalName:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("dog", "dog"), ("  Dog ", "dog"), ("red-panda", "red-panda"), ("k9", "k9")],
    )
    def test_accepts(self, raw: str, expected: str) -> None:
        assert normalize_animal_name(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "d_og", "dog.cat", "dög", "dog!", "a b"])
    def test_rejects(self, raw: str) -> None:
        assert normalize_animal_name(raw) is None


class TestSingular:
    def test_drops_plural_s(self) -> None:
        assert singular("dogs") == "dog"

    def test_keeps_double_s(self) -> None:
        assert singular("bass") == "bass"

    def test_single_letter(self) -> None:
        assert singular("s") == "s"


class TestScan:
    def test_loads_animals(self, registry: AnimalRegistry) -> None:
        assert registry.names() == ["cat", "dog"]
        assert len(registry) == 2
        assert "dog" in registry
        assert "elephant" not in registry

    def test_dog_assets(self, registry: AnimalRegistry, image_dir: Path) -> None:
        dog = registry.lookup("dog")
        assert dog is not None
        assert dog.codes == (404, 500)
        asset = dog.asset_for(StatusCode(404))
        assert asset is not None
        assert asset.path == image_dir / "dog" / "404.jpg"
        assert asset.content_type == "image/jpeg"
        assert asset.key == "dog/404"
        assert dog.asset_for(StatusCode(500)).content_type == "image/png"
        assert dog.fallback.key == "dog/default"

    def test_animal_without_default_uses_site_default(self, registry: AnimalRegistry) -> None:
        cat = registry.lookup("cat")
        assert cat is not None
        assert cat.fallback is registry.site_default
        assert registry.site_default.key == "site/default"

    def test_iteration_is_sorted(self, registry: AnimalRegistry) -> None:
        assert [entry.name for entry in registry] == ["cat", "dog"]

    def test_plural_lookup(self, registry: AnimalRegistry) -> None:
        entry = registry.lookup("dogs")
        assert entry is not None
        assert entry.name == "dog"

    def test_exact_name_beats_singular(self, image_dir: Path) -> None:
        write_image(image_dir / "dogs" / "200.jpg")
        registry = AnimalRegistry.scan(image_dir)
        assert registry.lookup("dogs").name == "dogs"

    def test_ignores_non_status_files(self, image_dir: Path) -> None:
        write_image(image_dir / "dog" / "notes.jpg")
        write_image(image_dir / "dog" / "999.jpg")
        write_image(image_dir / "dog" / "README.txt")
        registry = AnimalRegistry.scan(image_dir)
        assert registry.lookup("dog").codes == (404, 500)

    def test_extension_preference(self, image_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
        write_image(image_dir / "dog" / "404.png")
        with caplog.at_level(logging.WARNING, logger="httpet.pets"):
            registry = AnimalRegistry.scan(image_dir)
        assert registry.lookup("dog").asset_for(StatusCode(404)).path.suffix == ".jpg"
        assert "Multiple images for dog/404" in caplog.text

    def test_uppercase_extension(self, image_dir: Path) -> None:
        write_image(image_dir / "owl" / "200.PNG")
        registry = AnimalRegistry.scan(image_dir)
        assert registry.lookup("owl").asset_for(StatusCode(200)).content_type == "image/png"

    def test_skips_invalid_folder_names(
        self, image_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        write_image(image_dir / "bad_name" / "200.jpg")
        with caplog.at_level(logging.WARNING, logger="httpet.pets"):
            registry = AnimalRegistry.scan(image_dir)
        assert "bad_name" not in registry.names()
        assert "not a valid animal name" in caplog.text

    def test_skips_empty_animal(self, image_dir: Path) -> None:
        (image_dir / "ghost").mkdir()
        registry = AnimalRegistry.scan(image_dir)
        assert "ghost" not in registry

    def test_default_only_animal(self, image_dir: Path) -> None:
        write_image(image_dir / "fox" / "default.webp")
        registry = AnimalRegistry.scan(image_dir)
        fox = registry.lookup("fox")
        assert fox.codes == ()
        assert fox.fallback.content_type == "image/webp"


class TestScanFailures:
    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="does not exist"):
            AnimalRegistry.scan(tmp_path / "nope")

    def test_missing_site_default(self, tmp_path: Path) -> None:
        write_image(tmp_path / "dog" / "404.jpg")
        with pytest.raises(ConfigurationError, match="no site default"):
            AnimalRegistry.scan(tmp_path)

    def test_no_animals(self, tmp_path: Path) -> None:
        write_image(tmp_path / "default.jpg")
        with pytest.raises(ConfigurationError, match="no animal folders"):
            AnimalRegistry.scan(tmp_path)

    def test_file_instead_of_directory(self, tmp_path: Path) -> None:
        target = write_image(tmp_path / "images")
        with pytest.raises(ConfigurationError):
            AnimalRegistry.scan(target)
