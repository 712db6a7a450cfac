"""Tests for httpet.cli — argument parsing, env defaults, and --check."""

from pathlib import Path

import pytest

from httpet.app import App
from httpet.cli import build_parser, config_from_args, env_flag, env_int, main
from httpet.errors import ConfigurationError


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep main() from reconfiguring the root logger under pytest."""
    monkeypatch.setattr("httpet.cli.setup_logging", lambda debug=False: None)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"], env={})
        assert exc_info.value.code == 0

    def test_unknown_flag_exits_two(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--no-such-flag"], env={})
        assert exc_info.value.code == 2


class TestEnvHelpers:
    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_flag_true(self, value: str) -> None:
        assert env_flag({"X": value}, "X") is True

    @pytest.mark.parametrize("value", ["", "0", "false", "nope"])
    def test_flag_false(self, value: str) -> None:
        assert env_flag({"X": value}, "X") is False

    def test_flag_missing(self) -> None:
        assert env_flag({}, "X") is False

    def test_int(self) -> None:
        assert env_int({"X": "8080"}, "X", 1) == 8080
        assert env_int({"X": " "}, "X", 1) == 1
        assert env_int({}, "X", 1) == 1

    def test_int_invalid(self) -> None:
        with pytest.raises(ConfigurationError, match="X must be an integer"):
            env_int({"X": "eighty"}, "X", 1)


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser({}).parse_args([])
        config = config_from_args(args)
        assert config.base_domain == "localhost"
        assert config.port == 9000
        assert config.debug is False
        assert config.frontend_url is None

    def test_env_defaults(self) -> None:
        env = {
            "HTTPET_BASE_DOMAIN": "httpet.org",
            "HTTPET_IMAGE_DIR": "/srv/images",
            "HTTPET_LISTEN_ADDRESS": "0.0.0.0",
            "HTTPET_PORT": "8080",
            "HTTPET_FRONTEND_URL": "https://httpet.org",
            "HTTPET_DEBUG": "1",
        }
        config = config_from_args(build_parser(env).parse_args([]))
        assert config.base_domain == "httpet.org"
        assert str(config.image_dir) == "/srv/images"
        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.frontend_url == "https://httpet.org"
        assert config.debug is True

    def test_flags_override_env(self) -> None:
        env = {"HTTPET_BASE_DOMAIN": "httpet.org", "HTTPET_PORT": "8080"}
        args = build_parser(env).parse_args(["--base-domain", "pets.test", "--port", "81"])
        config = config_from_args(args)
        assert config.base_domain == "pets.test"
        assert config.port == 81


class TestCheck:
    def test_prints_summary(self, image_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--check", "--base-domain", "example.org", "--image-dir", str(image_dir)], env={})
        out = capsys.readouterr().out
        assert "base domain: example.org" in out
        assert "site url:    http://example.org:9000" in out
        assert "animals:     2" in out
        assert "cat: 418" in out
        assert "dog: 404, 500" in out

    def test_default_only_animal(self, image_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (image_dir / "horse").mkdir()
        (image_dir / "horse" / "default.jpg").write_bytes(b"neigh")
        main(["--check", "--base-domain", "example.org", "--image-dir", str(image_dir)], env={})
        assert "horse: (default only)" in capsys.readouterr().out

    def test_missing_image_dir_exits_one(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--check", "--image-dir", str(tmp_path / "missing")], env={})
        assert exc_info.value.code == 1

    def test_bad_base_domain_exits_one(self, image_dir: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            args = ["--check", "--base-domain", "https://x.org", "--image-dir", str(image_dir)]
            main(args, env={})
        assert exc_info.value.code == 1

    def test_bad_port_env_exits_one(self, image_dir: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--check"], env={"HTTPET_PORT": "eighty", "HTTPET_IMAGE_DIR": str(image_dir)})
        assert exc_info.value.code == 1


class TestRun:
    def test_runs_app_with_config(self, image_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        started: list[App] = []
        monkeypatch.setattr(App, "run", lambda self: started.append(self))
        main(
            ["--base-domain", "example.org", "--image-dir", str(image_dir), "--port", "8080"],
            env={},
        )
        (app,) = started
        assert app.config.port == 8080
        assert app.registry.names() == ["cat", "dog"]
