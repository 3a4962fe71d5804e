"""Rich-backed logger with TRACE and SUCCESS levels.

:class:`LogManager` is a :class:`logging.Logger` subclass. The logger itself
always accepts every level down to ``TRACE``; the attached handlers decide
what is actually emitted.

Configuration keys (all optional)::

    output: console | file | both
    console:
        level: INFO
        show_path: false
    file:
        path: /var/log/mailkit.log
        level: DEBUG
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from collections.abc import Mapping

TRACE_LEVEL = 5
SUCCESS_LEVEL = 25

logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")

LOGGING_LEVEL = SimpleNamespace(
    TRACE=TRACE_LEVEL,
    DEBUG=logging.DEBUG,
    INFO=logging.INFO,
    SUCCESS=SUCCESS_LEVEL,
    WARNING=logging.WARNING,
    ERROR=logging.ERROR,
    CRITICAL=logging.CRITICAL,
)

FALLBACK_DEFAULTS: dict[str, Any] = {
    "output": "console",
    "console": {"level": "INFO", "show_path": False},
    "file": {"path": None, "level": "DEBUG"},
}

FALLBACK_PRESETS: dict[str, dict[str, Any]] = {
    "dev": {"output": "console", "console": {"level": "DEBUG"}},
    "prod": {"output": "file", "file": {"path": "mailkit.log", "level": "INFO"}},
    "debug": {"output": "both", "console": {"level": "TRACE"}, "file": {"path": "mailkit-debug.log", "level": "TRACE"}},
}

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_ALLOWED_LOG_SUFFIXES = frozenset({"", ".log", ".txt", ".json"})
_MAX_FILENAME_LENGTH = 255
_MAX_PATH_LENGTH = 4096


def _validate_log_file_path(path: str | Path) -> Path:
    """Return the resolved log file path after basic sanity checks.

    Raises:
        ValueError: If the path contains ``..`` or ``~``, has a forbidden
            extension, or exceeds file system length limits.
    """
    candidate = Path(path)
    if any(part in ("..", "~") for part in candidate.parts):
        raise ValueError(f"Log file path contains a forbidden component: {path}")
    if len(candidate.name) > _MAX_FILENAME_LENGTH:
        raise ValueError(f"Log file name exceeds maximum length ({_MAX_FILENAME_LENGTH})")
    if len(str(candidate)) > _MAX_PATH_LENGTH:
        raise ValueError(f"Log file path exceeds maximum length ({_MAX_PATH_LENGTH})")
    if candidate.suffix.lower() not in _ALLOWED_LOG_SUFFIXES:
        raise ValueError(f"Log file extension {candidate.suffix!r} is not allowed")
    return candidate.resolve()


def _level(value: str | int) -> int:
    if isinstance(value, int):
        return value
    resolved = getattr(LOGGING_LEVEL, str(value).upper(), None)
    if resolved is None:
        raise ValueError(f"Unknown log level: {value!r}")
    return int(resolved)


def _merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: dict(value) if isinstance(value, dict) else value for key, value in base.items()}
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


class LogManager(logging.Logger):
    """Logger preconfigured with rich console and/or file handlers.

    Args:
        name: Logger name.
        config: Mapping overriding :data:`FALLBACK_DEFAULTS`.
        preset: One of :data:`FALLBACK_PRESETS` applied before ``config``.

    Examples:
        >>> logger = LogManager(name="demo", preset="dev")  # doctest: +SKIP
        >>> logger.trace("Connecting", host="smtp.example.com")  # doctest: +SKIP
    """

    def __init__(
        self,
        name: str = "mailkit",
        *,
        config: Mapping[str, Any] | None = None,
        preset: str | None = None,
    ) -> None:
        super().__init__(name, level=TRACE_LEVEL)
        settings = dict(FALLBACK_DEFAULTS)
        if preset is not None:
            if preset not in FALLBACK_PRESETS:
                raise ValueError(f"Unknown logging preset: {preset!r}")
            settings = _merge(settings, FALLBACK_PRESETS[preset])
        if config:
            settings = _merge(settings, _to_dict(config))
        self.settings = settings
        self._configure_handlers()

    def _configure_handlers(self) -> None:
        output = self.settings.get("output", "console")
        if output in ("console", "both"):
            console_cfg = self.settings.get("console", {})
            handler = RichHandler(
                console=Console(stderr=True),
                show_path=bool(console_cfg.get("show_path", False)),
                rich_tracebacks=True,
            )
            handler.setLevel(_level(console_cfg.get("level", "INFO")))
            self.addHandler(handler)
        if output in ("file", "both"):
            file_cfg = self.settings.get("file", {})
            if not file_cfg.get("path"):
                raise ValueError("File logging requires 'file.path'")
            path = _validate_log_file_path(file_cfg["path"])
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(path, encoding="utf-8")
            file_handler.setLevel(_level(file_cfg.get("level", "DEBUG")))
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
            self.addHandler(file_handler)

    def trace(self, msg: str, *args: Any, **context: Any) -> None:
        """Log at TRACE level, appending ``key=value`` pairs from ``context``."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, _with_context(msg, context), args)

    def success(self, msg: str, *args: Any, **context: Any) -> None:
        """Log at SUCCESS level, appending ``key=value`` pairs from ``context``."""
        if self.isEnabledFor(SUCCESS_LEVEL):
            self._log(SUCCESS_LEVEL, _with_context(msg, context), args)


def _with_context(msg: str, context: Mapping[str, Any]) -> str:
    if not context:
        return msg
    pairs = " ".join(f"{key}={value!r}" for key, value in context.items())
    return f"{msg} | {pairs}"


def _to_dict(config: Mapping[str, Any]) -> dict[str, Any]:
    # Box objects expose to_dict(); plain mappings are copied
    to_dict = getattr(config, "to_dict", None)
    if callable(to_dict):
        return dict(to_dict())
    return dict(config)


__all__ = [
    "FALLBACK_DEFAULTS",
    "FALLBACK_PRESETS",
    "LOGGING_LEVEL",
    "SUCCESS_LEVEL",
    "TRACE_LEVEL",
    "LogManager",
]
