"""Tests for the logging manager and ``init_logging``."""

# pylint: disable=protected-access

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from box import Box
from rich.logging import RichHandler

from mailkit.logging import SUCCESS_LEVEL, TRACE_LEVEL, LogManager, get_logger, init_logging
from mailkit.logging import manager as logging_manager_module


@pytest.fixture(autouse=True)
def _restore_mailkit_logger() -> Generator[None, None, None]:
    std_logger = logging.getLogger("mailkit")
    handlers = std_logger.handlers[:]
    level = std_logger.level
    yield
    for handler in std_logger.handlers[:]:
        if handler not in handlers:
            handler.close()
        std_logger.removeHandler(handler)
    for handler in handlers:
        std_logger.addHandler(handler)
    std_logger.setLevel(level)


def _close(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)


class TestLogManager:
    """Handler setup from presets and configuration."""

    def test_default_creation(self) -> None:
        """A console handler at INFO is attached by default."""
        logger = LogManager(name="test_default")
        assert isinstance(logger, logging.Logger)
        assert logger.level == TRACE_LEVEL  # logger allows all levels, handlers filter
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.handlers[0].level == logging.INFO

    def test_custom_console_level(self) -> None:
        """The console level comes from the configuration."""
        logger = LogManager(name="test_custom", config={"console": {"level": "WARNING"}})
        assert logger.handlers[0].level == logging.WARNING

    def test_box_config(self) -> None:
        """Box sections are accepted like plain mappings."""
        logger = LogManager(name="test_box", config=Box({"console": {"level": "TRACE"}}))
        assert logger.handlers[0].level == TRACE_LEVEL

    def test_dev_preset(self) -> None:
        """The dev preset logs DEBUG to the console."""
        logger = LogManager(name="test_dev", preset="dev")
        assert logger.handlers[0].level == logging.DEBUG

    def test_unknown_preset(self) -> None:
        """Unknown presets are rejected."""
        with pytest.raises(ValueError, match="Unknown logging preset"):
            LogManager(name="test_bad", preset="nope")

    def test_unknown_level(self) -> None:
        """Unknown level names are rejected."""
        with pytest.raises(ValueError, match="Unknown log level"):
            LogManager(name="test_level", config={"console": {"level": "LOUD"}})

    def test_file_output(self, tmp_path: Path) -> None:
        """File output writes formatted records."""
        log_file = tmp_path / "logs" / "mail.log"
        logger = LogManager(
            name="test_file",
            config={"output": "file", "file": {"path": str(log_file), "level": "INFO"}},
        )
        try:
            assert len(logger.handlers) == 1
            assert isinstance(logger.handlers[0], logging.FileHandler)
            logger.info("written")
            logger.debug("filtered")
        finally:
            _close(logger)
        content = log_file.read_text(encoding="utf-8")
        assert "written" in content
        assert "filtered" not in content

    def test_both_outputs(self, tmp_path: Path) -> None:
        """Both outputs attach two handlers."""
        logger = LogManager(
            name="test_both",
            config={"output": "both", "file": {"path": str(tmp_path / "both.log")}},
        )
        try:
            assert len(logger.handlers) == 2
        finally:
            _close(logger)

    def test_file_output_requires_path(self) -> None:
        """File output without a path is a configuration error."""
        with pytest.raises(ValueError, match="file.path"):
            LogManager(name="test_nopath", config={"output": "file"})

    def test_trace_and_success_context(self, tmp_path: Path) -> None:
        """Custom levels render key=value context."""
        log_file = tmp_path / "trace.log"
        logger = LogManager(
            name="test_trace",
            config={"output": "file", "file": {"path": str(log_file), "level": "TRACE"}},
        )
        try:
            logger.trace("Connecting", host="smtp.example.com")
            logger.success("Delivered")
        finally:
            _close(logger)
        content = log_file.read_text(encoding="utf-8")
        assert "TRACE" in content
        assert "Connecting | host='smtp.example.com'" in content
        assert "SUCCESS" in content


class TestLogFilePathValidation:
    """Sanity checks on log file locations."""

    @pytest.mark.parametrize("path", ["../escape.log", "logs/../../escape.log", "~/mail.log"])
    def test_rejects_traversal(self, path: str) -> None:
        """Parent and home shortcuts are refused."""
        with pytest.raises(ValueError, match="forbidden component"):
            logging_manager_module._validate_log_file_path(path)

    def test_rejects_extension(self) -> None:
        """Only log-like extensions are accepted."""
        with pytest.raises(ValueError, match="not allowed"):
            logging_manager_module._validate_log_file_path("mail.exe")

    def test_rejects_long_name(self) -> None:
        """File names longer than the file system limit are refused."""
        with pytest.raises(ValueError, match="maximum length"):
            logging_manager_module._validate_log_file_path("a" * 256 + ".log")

    def test_accepts_relative_log(self) -> None:
        """Plain relative paths resolve against the working directory."""
        assert logging_manager_module._validate_log_file_path("mail.log") == (Path.cwd() / "mail.log").resolve()


class TestLevels:
    """Registered level names."""

    def test_level_names(self) -> None:
        """TRACE and SUCCESS are known to the logging module."""
        assert logging.getLevelName(TRACE_LEVEL) == "TRACE"
        assert logging.getLevelName(SUCCESS_LEVEL) == "SUCCESS"


class TestInitLogging:
    """Wiring handlers onto the ``mailkit`` logger."""

    def test_uses_config_section(self) -> None:
        """Without arguments, the ``logger`` config section is used."""
        manager = init_logging()
        std_logger = logging.getLogger("mailkit")
        assert std_logger.level == TRACE_LEVEL
        assert std_logger.handlers == manager.handlers
        assert manager.handlers[0].level == logging.INFO

    def test_preset(self) -> None:
        """A preset replaces the configured handlers."""
        init_logging()
        manager = init_logging(preset="dev")
        std_logger = logging.getLogger("mailkit")
        assert std_logger.handlers == manager.handlers
        assert len(std_logger.handlers) == 1
        assert std_logger.handlers[0].level == logging.DEBUG

    def test_child_loggers_reach_handlers(self, tmp_path: Path) -> None:
        """Module loggers propagate into the configured handlers."""
        log_file = tmp_path / "mailkit.log"
        init_logging(config={"output": "file", "file": {"path": str(log_file), "level": "TRACE"}})
        logging.getLogger("mailkit.mail.session").log(TRACE_LEVEL, "[SESSION] derived")
        for handler in logging.getLogger("mailkit").handlers:
            handler.flush()
        assert "[SESSION] derived" in log_file.read_text(encoding="utf-8")


@pytest.mark.parametrize(
    "name, expected",
    [(None, "mailkit"), ("mailkit", "mailkit"), ("mailkit.mail", "mailkit.mail"), ("app", "mailkit.app")],
)
def test_get_logger(name: str | None, expected: str) -> None:
    """Loggers are namespaced under ``mailkit``."""
    assert get_logger(name).name == expected
