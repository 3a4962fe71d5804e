"""Shared pytest fixtures for the mailkit test suite."""

from __future__ import annotations

# Disable Rich colors BEFORE any imports, Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"

from collections.abc import Generator
from pathlib import Path

import pytest

from mailkit.config import clear_config
from mailkit.mail import MailBuilder

# pylint: disable=redefined-outer-name


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep user configuration files out of the tests.

    HOME and the working directory point to an empty temporary directory, so
    only the packaged defaults are loaded.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.chdir(tmp_path)
    clear_config()
    yield
    clear_config()


@pytest.fixture
def builder() -> MailBuilder:
    """Return a fresh builder using the packaged defaults."""

    return MailBuilder()


@pytest.fixture
def ready_builder(builder: MailBuilder) -> MailBuilder:
    """Return a builder holding everything a successful build needs."""

    builder.add_bcc("ab@bc.com", "a.b@c.org", "asdfwqesad@asdfasgasd.com.bd")
    builder.add_cc("ab@bc.com")
    builder.add_header("TEST", "TEST")
    builder.set_content("CONTENT", "text/plain")
    builder.subject = "TEST"
    builder.host_name = "HOST"
    builder.set_from("ab@bc.com")
    return builder
