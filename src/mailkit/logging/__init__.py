"""Logging helpers for mailkit.

Library modules log through standard ``logging.getLogger(__name__)`` loggers.
Applications call :func:`init_logging` once to attach rich handlers to the
``mailkit`` logger hierarchy.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mailkit.logging.manager import SUCCESS_LEVEL, TRACE_LEVEL, LogManager

if TYPE_CHECKING:
    from collections.abc import Mapping

_root_logger: LogManager | None = None


def init_logging(*, preset: str | None = None, config: Mapping[str, Any] | None = None) -> LogManager:
    """Configure the ``mailkit`` logger and return the backing :class:`LogManager`.

    Without ``preset`` or ``config``, the ``logger`` section of the loaded
    mailkit configuration is used.
    """
    global _root_logger  # pylint: disable=global-statement

    if preset is None and config is None:
        from mailkit.config import get_config

        config = get_config().get("logger", {})

    manager = LogManager(name="mailkit", config=config, preset=preset)

    std_logger = logging.getLogger("mailkit")
    std_logger.setLevel(TRACE_LEVEL)
    for handler in std_logger.handlers[:]:
        std_logger.removeHandler(handler)
    for handler in manager.handlers:
        std_logger.addHandler(handler)

    _root_logger = manager
    return manager


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger inside the ``mailkit`` hierarchy."""
    if not name:
        return logging.getLogger("mailkit")
    if name == "mailkit" or name.startswith("mailkit."):
        return logging.getLogger(name)
    return logging.getLogger(f"mailkit.{name}")


__all__ = ["SUCCESS_LEVEL", "TRACE_LEVEL", "LogManager", "get_logger", "init_logging"]
