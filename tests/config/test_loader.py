"""Tests for the configuration loader.

The autouse ``isolated_config`` fixture points HOME and the working directory
to an empty temporary tree, so each test controls exactly which files exist.
"""

# pylint: disable=protected-access

from __future__ import annotations

from pathlib import Path

import pytest
from box import Box, BoxError

from mailkit.config import (
    CONFIG_FILENAME,
    ConfigFileNotFoundError,
    ConfigFormatError,
    clear_config,
    get_config,
    load_config,
)
from mailkit.config import loader as cfg_loader


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    """Packaged defaults."""

    def test_packaged_defaults(self) -> None:
        """Defaults are loaded without any user file."""
        config = load_config()
        assert isinstance(config, Box)
        assert config.meta.name == "mailkit"
        assert config.mail.charset == "utf-8"
        assert config.mail.smtp.port == 25
        assert config.mail.smtp.ssl_port == 465
        assert config.mail.smtp.connection_timeout == 60000
        assert config.logger.console.level == "INFO"

    def test_config_is_frozen(self) -> None:
        """The loaded configuration cannot be modified."""
        config = load_config()
        with pytest.raises(BoxError):
            config.mail.charset = "latin-1"


class TestCascade:
    """User files merged over the defaults."""

    def test_cwd_overrides_home(self, tmp_path: Path) -> None:
        """The working directory wins over the home directory."""
        home = Path.home()
        _write(home / ".config" / CONFIG_FILENAME, "mail:\n  charset: ascii\n  smtp:\n    port: 2500\n")
        _write(home / CONFIG_FILENAME, "mail:\n  smtp:\n    port: 2525\n")
        _write(tmp_path / CONFIG_FILENAME, "mail:\n  smtp:\n    debug: true\n")

        config = load_config()
        assert config.mail.charset == "ascii"
        assert config.mail.smtp.port == 2525
        assert config.mail.smtp.debug is True
        assert config.mail.smtp.ssl_port == 465

    def test_cascade_order(self) -> None:
        """Locations are listed lowest priority first."""
        home = Path.home()
        assert cfg_loader._cascade_paths() == [
            home / ".config" / CONFIG_FILENAME,
            home / CONFIG_FILENAME,
            Path.cwd() / CONFIG_FILENAME,
        ]

    def test_empty_file_is_ignored(self, tmp_path: Path) -> None:
        """An empty YAML file changes nothing."""
        _write(tmp_path / CONFIG_FILENAME, "")
        assert load_config().mail.smtp.port == 25


class TestExplicitFile:
    """Loading a named file."""

    def test_explicit_file_skips_cascade(self, tmp_path: Path) -> None:
        """Only the defaults and the named file are used."""
        _write(tmp_path / CONFIG_FILENAME, "mail:\n  smtp:\n    port: 2525\n")
        custom = _write(tmp_path / "custom" / "mail.yml", "mail:\n  smtp:\n    ssl_on_connect: true\n")

        config = load_config(custom)
        assert config.mail.smtp.ssl_on_connect is True
        assert config.mail.smtp.port == 25

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing explicit file raises."""
        with pytest.raises(ConfigFileNotFoundError, match="not found"):
            load_config(tmp_path / "missing.yml")

    def test_missing_file_is_file_not_found(self, tmp_path: Path) -> None:
        """The error is also a FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Malformed YAML raises ConfigFormatError."""
        bad = _write(tmp_path / "bad.yml", "mail: [unclosed\n")
        with pytest.raises(ConfigFormatError, match="Invalid YAML"):
            load_config(bad)

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        """The root of a file must be a mapping."""
        bad = _write(tmp_path / "list.yml", "- a\n- b\n")
        with pytest.raises(ConfigFormatError, match="must be a mapping"):
            load_config(bad)


class TestCache:
    """Caching through get_config and clear_config."""

    def test_get_config_caches(self) -> None:
        """Repeated calls return the same object."""
        assert get_config() is get_config()

    def test_clear_config_reloads(self, tmp_path: Path) -> None:
        """Clearing the cache picks up new files."""
        assert get_config().mail.smtp.port == 25
        _write(tmp_path / CONFIG_FILENAME, "mail:\n  smtp:\n    port: 2525\n")
        assert get_config().mail.smtp.port == 25
        clear_config()
        assert get_config().mail.smtp.port == 2525


def test_deep_merge_keeps_siblings() -> None:
    """Nested keys are merged instead of replaced."""
    base = {"a": {"b": 1, "c": 2}, "d": 1}
    merged = cfg_loader._deep_merge(base, {"a": {"c": 3}, "e": 4})
    assert merged == {"a": {"b": 1, "c": 3}, "d": 1, "e": 4}
    assert base == {"a": {"b": 1, "c": 2}, "d": 1}
