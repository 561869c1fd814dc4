"""
Tests for the configuration loader.

Covers config-root resolution (including the MDOT_APPNAME override),
entry-file discovery, and YAML evaluation into a Config Value Tree.
"""

import sys
from pathlib import Path

import pytest

from mdot import loader
from mdot.loader import (
    ConfigError,
    app_name,
    config_root,
    find_config_file,
    load_config,
    parse_config,
)
from mdot.normalizer import normalize_manifest
from mdot.values import Integer, String, Table

EXAMPLE = Path(__file__).resolve().parent.parent / "examples" / "main.yaml"


@pytest.fixture
def config_home(monkeypatch, tmp_path):
    monkeypatch.setattr(loader, "user_config_dir", lambda: tmp_path)
    monkeypatch.delenv("MDOT_APPNAME", raising=False)
    return tmp_path


class TestConfigRoot:
    """Test per-platform root resolution."""

    def test_default_app_name(self, config_home):
        assert app_name() == "mdot"
        assert config_root() == config_home / "mdot"

    def test_app_name_override(self, config_home, monkeypatch):
        monkeypatch.setenv("MDOT_APPNAME", "mdot-work")
        assert config_root() == config_home / "mdot-work"

    def test_delegates_to_platformdirs(self, monkeypatch, tmp_path):
        calls = []

        def fake_user_config_dir(**kwargs):
            calls.append(kwargs)
            return str(tmp_path)

        monkeypatch.setattr(loader.platformdirs, "user_config_dir", fake_user_config_dir)
        assert loader.user_config_dir() == tmp_path
        assert calls == [{"roaming": True}]

    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="XDG layout")
    def test_xdg_config_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.delenv("MDOT_APPNAME", raising=False)
        assert config_root() == tmp_path / "mdot"


class TestFindConfigFile:
    """Test entry-file discovery."""

    def test_none_when_missing(self, config_home):
        assert find_config_file() is None

    def test_prefers_main_yaml(self, config_home):
        root = config_home / "mdot"
        root.mkdir()
        (root / "main.yml").write_text("[]")
        assert find_config_file() == root / "main.yml"
        (root / "main.yaml").write_text("[]")
        assert find_config_file() == root / "main.yaml"


class TestParseConfig:
    """Test YAML evaluation."""

    def test_list_root(self):
        tree = parse_config("- ly\n- fish\n")
        assert isinstance(tree, Table)
        assert tree.get(2) == String("fish")

    def test_mixed_root(self):
        tree = parse_config("1: ly\ngit:\n  excludes: '*'\n")
        keys = [k for k, _ in tree.pairs()]
        assert keys == [Integer(1), String("git")]

    def test_empty_document(self):
        tree = parse_config("")
        assert isinstance(tree, Table)
        assert len(tree) == 0

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError):
            parse_config("a: [unclosed")

    def test_unsupported_value(self):
        with pytest.raises(ConfigError):
            parse_config("- ly\n- ~\n")

    def test_self_referencing_anchor(self):
        with pytest.raises(ConfigError):
            parse_config("a: &x\n  b: *x\n")


class TestLoadConfig:
    """Test loading from disk."""

    def test_missing_discovered_file(self, config_home):
        with pytest.raises(ConfigError) as exc:
            load_config()
        assert "--config" in str(exc.value)

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "main.yaml"
        path.write_bytes(b"- fi\xffsh\n")
        with pytest.raises(ConfigError) as exc:
            load_config(path)
        assert "invalid UTF-8" in str(exc.value)

    def test_recursive_alias(self, tmp_path):
        path = tmp_path / "main.yaml"
        path.write_text("- &a [*a]\n")
        with pytest.raises(ConfigError) as exc:
            load_config(path)
        assert "recursive" in str(exc.value)

    def test_discovered_file(self, config_home):
        root = config_home / "mdot"
        root.mkdir()
        (root / "main.yaml").write_text("- fish\n")
        tree = load_config()
        assert tree.get(1) == String("fish")

    def test_example_manifest(self):
        """The shipped example normalizes cleanly."""
        packages = normalize_manifest(load_config(EXAMPLE))
        names = [p.name for p in packages]
        assert names == ["ly", "fish", "alacritty", "tmux", "hypr", "git", "bash"]
        alacritty = packages[2]
        assert [link.source for link in alacritty.links] == ["src", "key-src"]
        assert packages[4].package_name == {"arch": "hyprland"}
        assert packages[6].links[0].targets == ["~/.bashrc"]
