"""Unit tests for the layered TOML loader."""

import tomllib
from pathlib import Path

import pytest

from threadview.config.loader import (
    active_environment,
    find_config_dir,
    layer_paths,
    load_config,
    merge_layers,
    read_layer,
)


class TestMergeLayers:
    def test_nested_tables_merge(self) -> None:
        base = {"backend": {"base_url": "http://a", "timeout": 10.0}, "debug": False}
        overlay = {"backend": {"timeout": 5.0, "chat_path": "/chat"}}

        assert merge_layers(base, overlay) == {
            "backend": {"base_url": "http://a", "timeout": 5.0, "chat_path": "/chat"},
            "debug": False,
        }

    def test_scalar_replaces_table(self) -> None:
        assert merge_layers({"engine": {"x": 1}}, {"engine": "off"}) == {"engine": "off"}

    def test_inputs_unmodified(self) -> None:
        base = {"backend": {"timeout": 10.0}}
        merge_layers(base, {"backend": {"timeout": 1.0}})
        assert base == {"backend": {"timeout": 10.0}}

    def test_no_layers(self) -> None:
        assert merge_layers() == {}


class TestReadLayer:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_layer(tmp_path / "missing.toml")

    def test_invalid_syntax(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("this is = = not toml")
        with pytest.raises(tomllib.TOMLDecodeError):
            read_layer(path)


class TestFindConfigDir:
    def test_explicit_directory_must_exist(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("THREADVIEW_CONFIG_DIR", str(tmp_path / "nowhere"))
        with pytest.raises(FileNotFoundError):
            find_config_dir()

    def test_searches_upwards(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("THREADVIEW_CONFIG_DIR")
        (tmp_path / "config").mkdir()
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_dir(nested) == tmp_path / "config"

    def test_none_found(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("THREADVIEW_CONFIG_DIR")
        start = tmp_path / "empty"
        start.mkdir()
        if any((p / "config").is_dir() for p in start.parents):
            pytest.skip("a config directory exists above the temp dir")

        assert find_config_dir(start) is None


class TestLayers:
    def test_default_environment(self) -> None:
        assert active_environment() == "development"

    def test_only_existing_layers(self, tmp_path: Path) -> None:
        (tmp_path / "default.toml").write_text("")

        assert list(layer_paths(tmp_path, "staging")) == [tmp_path / "default.toml"]

    def test_base_layer_read_once(self, tmp_path: Path) -> None:
        (tmp_path / "default.toml").write_text("")

        assert list(layer_paths(tmp_path, "default")) == [tmp_path / "default.toml"]


class TestLoadConfig:
    def test_empty_directory(self, tmp_path: Path) -> None:
        assert load_config(tmp_path) == {}

    def test_overlay_only(self, tmp_path: Path) -> None:
        (tmp_path / "staging.toml").write_text("debug = true\n")
        assert load_config(tmp_path, "staging") == {"debug": True}

    def test_environment_merged_over_default(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "default.toml").write_text("[backend]\ntimeout = 10.0\nbase_url = 'http://a'\n")
        (tmp_path / "staging.toml").write_text("[backend]\ntimeout = 5.0\n")
        monkeypatch.setenv("THREADVIEW_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("THREADVIEW_ENV", "staging")

        assert load_config() == {"backend": {"timeout": 5.0, "base_url": "http://a"}}
