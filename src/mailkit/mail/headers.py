"""Free-form header storage."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from mailkit.mail.exceptions import MailArgumentError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

# RFC 5322 field names: printable US-ASCII except ":" and space
_HEADER_NAME_PATTERN = re.compile(r"[\x21-\x39\x3b-\x7e]+")


def _validate_header(name: str | None, value: str | None) -> None:
    if not name:
        raise MailArgumentError("name can not be null or empty")
    if not value:
        raise MailArgumentError("value can not be null or empty")
    if not _HEADER_NAME_PATTERN.fullmatch(name):
        raise MailArgumentError(f"Invalid header name: {name!r}")
    if "\r" in value or "\n" in value:
        raise MailArgumentError(f"Header {name!r} value can not contain CR or LF")


class HeaderStore:
    """Ordered header name/value pairs with case-insensitive names.

    Re-adding a header keeps its original position, and the latest spelling
    and value win.
    """

    def __init__(self) -> None:
        self._headers: dict[str, tuple[str, str]] = {}

    def add_header(self, name: str, value: str) -> None:
        """Store ``value`` under ``name``.

        Raises:
            MailArgumentError: If ``name`` or ``value`` is empty, ``name``
                holds a colon, whitespace or control characters, or
                ``value`` holds CR or LF.
        """
        _validate_header(name, value)
        self._headers[name.lower()] = (name, value)

    def set_headers(self, headers: Mapping[str, str]) -> None:
        """Replace all headers with ``headers`` after validating every pair."""
        for name, value in headers.items():
            _validate_header(name, value)
        self._headers = {name.lower(): (name, value) for name, value in headers.items()}

    def get_header(self, name: str) -> str | None:
        """Return the value stored for ``name``, ignoring case."""
        entry = self._headers.get(name.lower())
        return entry[1] if entry else None

    def items(self) -> list[tuple[str, str]]:
        """Return ``(name, value)`` pairs in insertion order."""
        return list(self._headers.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._headers.values())

    def __len__(self) -> int:
        return len(self._headers)


__all__ = ["HeaderStore"]
