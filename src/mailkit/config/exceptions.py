"""Root exception and configuration errors for mailkit.

Exception hierarchy::

    MailkitError (base for every mailkit error)
        ConfigError (base for configuration loading errors)
            ConfigFileNotFoundError (explicit file missing, also FileNotFoundError)
            ConfigFormatError (unparseable or non-mapping YAML, also ValueError)
"""

from __future__ import annotations


class MailkitError(Exception):
    """Base exception for all mailkit errors."""


class ConfigError(MailkitError):
    """Base exception for configuration loading errors."""


class ConfigFileNotFoundError(ConfigError, FileNotFoundError):
    """A configuration file that was explicitly requested does not exist."""


class ConfigFormatError(ConfigError, ValueError):
    """A configuration file could not be parsed into a mapping."""


__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "MailkitError",
]
