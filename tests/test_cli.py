"""Tests for settings and the command line entry point."""

from __future__ import annotations

import json

import pytest

from app_bundler.core.info import get_bundler_info
from app_bundler.core.settings import SettingsManager
from app_bundler.generators.icons import IconCreateOptions, create_icon, validate_icon
from app_bundler.main import main


class TestSettings:
    """JSON-backed settings."""

    def test_defaults_written(self, tmp_path) -> None:
        settings = SettingsManager(config_dir=tmp_path)
        assert settings.get("icon-size") == 1024
        assert (tmp_path / "settings.json").exists()

    def test_set_persists(self, tmp_path) -> None:
        SettingsManager(config_dir=tmp_path).set("max-workers", 2)
        assert SettingsManager(config_dir=tmp_path).get("max-workers") == 2

    def test_corrupt_file_falls_back(self, tmp_path) -> None:
        (tmp_path / "settings.json").write_text("{not json", encoding="utf-8")
        assert SettingsManager(config_dir=tmp_path).get("icon-color") == "#3C5AB8"

    def test_env_override(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_BUNDLER_CONFIG_DIR", str(tmp_path / "env"))
        settings = SettingsManager()
        assert settings.settings_path == tmp_path / "env" / "settings.json"

    def test_numeric_strings_are_coerced(self, tmp_path) -> None:
        """Integer settings written as strings are read as ints."""
        (tmp_path / "settings.json").write_text(json.dumps({"max-icon-bytes": " 10 "}), encoding="utf-8")
        assert SettingsManager(config_dir=tmp_path).get("max-icon-bytes") == 10

    @pytest.mark.parametrize(
        "key,value",
        [("max-workers", 0), ("max-workers", -2), ("icon-size", "big"), ("icon-size", True),
         ("max-icon-bytes", 1.5), ("icon-color", 42)],
    )
    def test_unusable_values_fall_back(self, tmp_path, key: str, value) -> None:
        """Values of the wrong type or range are replaced by the default."""
        (tmp_path / "settings.json").write_text(json.dumps({key: value}), encoding="utf-8")
        settings = SettingsManager(config_dir=tmp_path)
        assert settings.get(key) == settings._get_defaults()[key]


class TestInfo:
    def test_capabilities(self) -> None:
        info = get_bundler_info()
        assert info["name"] == "app_bundler"
        assert "icon_validate" in info["capabilities"]


class TestMain:
    """The app-bundler command."""

    @pytest.fixture
    def run(self, tmp_path, capsys):
        def _run(*argv: str):
            code = main(["--config-dir", str(tmp_path / "config"), *argv])
            out, err = capsys.readouterr()
            return code, out, err

        return _run

    def test_requirements(self, run) -> None:
        code, out, _ = run("requirements", "macos")
        assert code == 0
        assert json.loads(out)[-1] == {"width": 1024, "height": 1024}

    def test_sanitize(self, run) -> None:
        code, out, _ = run("sanitize", "My Cool App!")
        assert code == 0
        assert out.strip() == "my-cool-app"

    def test_manifest(self, run, tmp_path) -> None:
        app_dir = tmp_path / "app"
        app_dir.mkdir()
        (app_dir / "manifest.app.toml").write_text('name = "Foo"\nversion = "1.0"\n', encoding="utf-8")
        code, out, _ = run("manifest", str(app_dir))
        assert code == 0
        assert json.loads(out) == {"name": "Foo", "identifier": "foo", "version": "1.0"}

    def test_manifest_error(self, run, tmp_path) -> None:
        app_dir = tmp_path / "app"
        app_dir.mkdir()
        (app_dir / "manifest.app.toml").write_text('version = "1.0"\n', encoding="utf-8")
        code, _, err = run("manifest", str(app_dir))
        assert code == 1
        assert "name" in err

    def test_icon_create_and_validate(self, run, tmp_path) -> None:
        icon = tmp_path / "icon.png"
        assert run("icon-create", str(icon), "--size", "768")[0] == 0
        code, out, _ = run("icon-validate", str(icon))
        result = json.loads(out)
        assert code == 0
        assert result["meetsMinimum"] and not result["meetsRecommended"]

    def test_icon_validate_failure_exit_code(self, run, tmp_path) -> None:
        icon = tmp_path / "small.png"
        icon.write_bytes(create_icon(IconCreateOptions(size=64)))
        code, out, _ = run("icon-validate", str(icon))
        assert code == 1
        assert json.loads(out)["errors"]

    def test_icon_resize(self, run, tmp_path) -> None:
        src = tmp_path / "src.png"
        src.write_bytes(create_icon(IconCreateOptions(size=256)))
        out_path = tmp_path / "out.png"
        assert run("icon-resize", str(src), str(out_path), "--width", "48", "--height", "48")[0] == 0
        assert validate_icon(out_path.read_bytes()).width == 48

    def test_icon_set(self, run, tmp_path) -> None:
        src = tmp_path / "src.png"
        src.write_bytes(create_icon())
        out_dir = tmp_path / "icons"
        assert run("icon-set", str(src), str(out_dir), "--platform", "linux")[0] == 0
        assert (out_dir / "icon_512x512.png").exists()
        assert len(list(out_dir.iterdir())) == 7

    def test_bad_icon(self, run, tmp_path) -> None:
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"nope")
        code, _, err = run("icon-validate", str(bad))
        assert code == 1
        assert "Error" in err

    def test_bad_settings_do_not_crash(self, run, tmp_path) -> None:
        """A hand-edited settings file with wrong types still runs."""
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "settings.json").write_text(
            json.dumps({"icon-size": "64", "max-icon-bytes": "10", "max-workers": 0}), encoding="utf-8")
        icon = tmp_path / "icon.png"
        assert run("icon-create", str(icon))[0] == 0
        code, _, err = run("icon-set", str(icon), str(tmp_path / "icons"), "--platform", "linux")
        assert code == 1
        assert "too large" in err
        assert validate_icon(icon.read_bytes()).width == 64
