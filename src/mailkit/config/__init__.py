"""Configuration loading for mailkit (YAML files exposed as ``Box`` objects)."""

from mailkit.config.exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigFormatError,
    MailkitError,
)
from mailkit.config.loader import CONFIG_FILENAME, clear_config, get_config, load_config

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "MailkitError",
    "clear_config",
    "get_config",
    "load_config",
]
