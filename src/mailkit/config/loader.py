"""Configuration loading for mailkit.

Configuration lives in ``mailkit.conf.yml`` files. The packaged defaults are
always loaded first, then user files are merged on top of them:

1. Packaged defaults (``mailkit/config/mailkit.conf.yml``)
2. ``~/.config/mailkit.conf.yml``
3. ``~/mailkit.conf.yml``
4. ``./mailkit.conf.yml``

When an explicit filename is passed to :func:`load_config`, only the packaged
defaults and that file are used.

Examples:
    >>> config = load_config()  # doctest: +SKIP
    >>> config.mail.smtp.port  # doctest: +SKIP
    25
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from box import Box

from mailkit.config.exceptions import ConfigFileNotFoundError, ConfigFormatError

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)

#: Name of the configuration file searched in the cascade.
CONFIG_FILENAME = "mailkit.conf.yml"

_config: Box | None = None


def _load_yaml_file(path: Path, encoding: str = "utf-8") -> dict[str, Any]:
    """Parse a YAML file into a dictionary.

    Raises:
        ConfigFileNotFoundError: If the file does not exist.
        ConfigFormatError: If the content is not valid YAML or not a mapping.
    """
    if not path.is_file():
        raise ConfigFileNotFoundError(f"Configuration file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding=encoding))
    except yaml.YAMLError as e:
        raise ConfigFormatError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFormatError(f"Configuration root must be a mapping in {path}, got {type(data).__name__}")
    return data


def _load_default_config(encoding: str = "utf-8") -> dict[str, Any]:
    """Load the defaults shipped inside the package."""
    text = resources.files("mailkit.config").joinpath(CONFIG_FILENAME).read_text(encoding=encoding)
    return yaml.safe_load(text) or {}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    Examples:
        >>> _deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}})
        {'a': {'b': 1, 'c': 3}}
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _cascade_paths() -> list[Path]:
    """Return the user configuration locations, lowest priority first."""
    home = Path.home()
    return [
        home / ".config" / CONFIG_FILENAME,
        home / CONFIG_FILENAME,
        Path.cwd() / CONFIG_FILENAME,
    ]


def load_config(filename: str | Path | None = None, *, encoding: str = "utf-8") -> Box:
    """Load the configuration and cache it for :func:`get_config`.

    Args:
        filename: Explicit configuration file. When given, the user cascade
            is skipped and the file must exist.
        encoding: Encoding used to read configuration files.

    Returns:
        A frozen :class:`box.Box` with the merged configuration.

    Raises:
        ConfigFileNotFoundError: If ``filename`` does not exist.
        ConfigFormatError: If any loaded file is not a valid YAML mapping.
    """
    global _config  # pylint: disable=global-statement

    data = _load_default_config(encoding)
    if filename is not None:
        data = _deep_merge(data, _load_yaml_file(Path(filename), encoding))
        log.debug("Loaded configuration from %s", filename)
    else:
        for path in _cascade_paths():
            if path.is_file():
                data = _deep_merge(data, _load_yaml_file(path, encoding))
                log.debug("Merged configuration from %s", path)

    _config = Box(data, frozen_box=True)
    return _config


def get_config() -> Box:
    """Return the cached configuration, loading it on first access."""
    if _config is None:
        return load_config()
    return _config


def clear_config() -> None:
    """Forget the cached configuration so the next access reloads it."""
    global _config  # pylint: disable=global-statement
    _config = None


__all__ = ["CONFIG_FILENAME", "clear_config", "get_config", "load_config"]
