"""E-mail address parsing and validation helpers.

Parsing relies on :func:`email.utils.parseaddr` and then applies a small set
of structural checks (lengths, domain labels, TLD). It is intentionally not a
full RFC 5322 grammar.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from email.utils import formataddr, parseaddr
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

#: RFC 5321 limit for the local part.
MAX_LOCAL_PART_LENGTH = 64

#: RFC 5321 limit for the domain part.
MAX_DOMAIN_LENGTH = 255

#: Minimum length of the top-level domain label.
MIN_TLD_LENGTH = 2

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_LOCAL_PART_PATTERN = re.compile(r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~.-]+$")
_DOMAIN_LABEL_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")


class ValidationError(ValueError):
    """Raised when an e-mail address fails validation."""


@dataclass(frozen=True, slots=True)
class EmailAddress:
    """A validated mailbox with an optional display name.

    Attributes:
        address: The bare ``local@domain`` mailbox.
        name: Display name, empty when absent.

    Examples:
        >>> EmailAddress(name="Ada", address="ada@example.org").formatted
        'Ada <ada@example.org>'
    """

    address: str
    name: str = ""

    @property
    def display_name(self) -> str:
        """Display name without control characters or double quotes."""
        return _CONTROL_CHARS.sub("", self.name).replace('"', "'").strip()

    @property
    def formatted(self) -> str:
        """Render the address for a header, sanitizing the display name."""
        display = self.display_name
        if not display:
            return self.address
        return formataddr((display, self.address))

    def __str__(self) -> str:
        return self.formatted


def _validate_mailbox(mailbox: str, raw: str) -> None:
    local, sep, domain = mailbox.rpartition("@")
    if not sep or not local or not domain:
        raise ValidationError(f"Invalid email address: {raw!r}")
    if len(local) > MAX_LOCAL_PART_LENGTH:
        raise ValidationError(f"Local part too long in {raw!r} (max {MAX_LOCAL_PART_LENGTH} chars)")
    if len(domain) > MAX_DOMAIN_LENGTH:
        raise ValidationError(f"Domain too long in {raw!r} (max {MAX_DOMAIN_LENGTH} chars)")
    if not _LOCAL_PART_PATTERN.match(local) or local.startswith(".") or local.endswith(".") or ".." in local:
        raise ValidationError(f"Invalid local part in {raw!r}")

    labels = domain.split(".")
    if len(labels) < 2 or any(not label for label in labels):
        raise ValidationError(f"Invalid domain in {raw!r}")
    if not all(_DOMAIN_LABEL_PATTERN.match(label) for label in labels):
        raise ValidationError(f"Invalid domain in {raw!r}")
    if len(labels[-1]) < MIN_TLD_LENGTH:
        raise ValidationError(f"Top-level domain too short in {raw!r}")


def parse_email_address(value: str, name: str | None = None) -> EmailAddress:
    """Parse ``value`` into an :class:`EmailAddress`.

    ``value`` may be a bare mailbox or ``Display Name <mailbox>``. An explicit
    ``name`` takes precedence over a display name found in ``value``.

    Raises:
        ValidationError: If ``value`` is empty or not a plausible address,
            or the display name holds control characters.

    Examples:
        >>> parse_email_address("Grace Hopper <grace@example.org>").name
        'Grace Hopper'
        >>> parse_email_address("ab@bc.com").address
        'ab@bc.com'
    """
    if not value or not value.strip():
        raise ValidationError("Email address can not be empty")

    parsed_name, mailbox = parseaddr(value.strip())
    if not mailbox or " " in mailbox:
        raise ValidationError(f"Invalid email address: {value!r}")
    _validate_mailbox(mailbox, value)

    display = name if name is not None else parsed_name
    if display and _CONTROL_CHARS.search(display):
        raise ValidationError(f"Display name can not contain control characters: {display!r}")
    return EmailAddress(address=mailbox, name=display or "")


def normalize_address_list(values: Iterable[str]) -> list[EmailAddress]:
    """Parse every entry of ``values``; the first failure propagates."""
    return [parse_email_address(value) for value in values]


__all__ = [
    "MAX_DOMAIN_LENGTH",
    "MAX_LOCAL_PART_LENGTH",
    "MIN_TLD_LENGTH",
    "EmailAddress",
    "ValidationError",
    "normalize_address_list",
    "parse_email_address",
]
