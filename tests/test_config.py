"""
Tests for configuration loading, overrides and persistence.
"""

import json

import pytest

from cmdx.config import Config
from cmdx.errors import InvalidOs
from cmdx.platforms import Os, PackageManager, current_os


def test_defaults(tmp_path):
    """Test the built-in defaults when no file exists."""
    config = Config(config_dir=str(tmp_path))
    assert config.get("highlight") is True
    assert config.get("json_output") is False
    assert config.target_os() is Os.LINUX
    assert config.source_os() is current_os()
    assert config.package_manager() is None
    assert not config.config_file.exists()

    print("[OK] Config defaults test passed")


def test_set_persists(tmp_path):
    """Test that set() writes the file and a new Config reads it back."""
    config = Config(config_dir=str(tmp_path / "nested"))
    config.set("default_to", "windows")
    config.set("default_package_manager", "pacman")

    saved = json.loads(config.config_file.read_text())
    assert saved["default_to"] == "windows"

    reloaded = Config(config_dir=str(tmp_path / "nested"))
    assert reloaded.target_os() is Os.WINDOWS
    assert reloaded.package_manager() is PackageManager.PACMAN


def test_corrupt_file_falls_back(tmp_path):
    """Test that an unreadable config file is ignored."""
    (tmp_path / "config.json").write_text("{not json")
    config = Config(config_dir=str(tmp_path))
    assert config.settings == Config.DEFAULT_CONFIG


def test_undecodable_file_falls_back(tmp_path):
    """Test that a config file that is not UTF-8 text is ignored."""
    (tmp_path / "config.json").write_bytes(b"\xff\xfe{")
    config = Config(config_dir=str(tmp_path))
    assert config.settings == Config.DEFAULT_CONFIG


def test_env_overrides(tmp_path, monkeypatch):
    """Test CMDX_* environment variables and NO_COLOR."""
    monkeypatch.setenv("CMDX_FROM", "macos")
    monkeypatch.setenv("CMDX_TO", "freebsd")
    monkeypatch.setenv("CMDX_JSON", "yes")
    monkeypatch.setenv("NO_COLOR", "1")

    config = Config(config_dir=str(tmp_path))
    assert config.source_os() is Os.MACOS
    assert config.target_os() is Os.FREEBSD
    assert config.get("json_output") is True
    assert config.get("highlight") is False


def test_invalid_os_setting(tmp_path, monkeypatch):
    """Test that a bad OS name surfaces as InvalidOs."""
    monkeypatch.setenv("CMDX_TO", "plan9")
    config = Config(config_dir=str(tmp_path))
    with pytest.raises(InvalidOs):
        config.target_os()
