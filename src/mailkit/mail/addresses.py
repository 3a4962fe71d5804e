"""Role-keyed address storage for a message under construction."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from mailkit.mail.exceptions import MailValidationError
from mailkit.utils.validators import EmailAddress, ValidationError, normalize_address_list, parse_email_address

if TYPE_CHECKING:
    from collections.abc import Sequence

#: Message used whenever a bulk add receives nothing usable.
INVALID_ADDRESS_LIST = "Address List provided was invalid"


class AddressRole(str, Enum):
    """Function of an address within a message.

    Attributes:
        TO: Primary recipients.
        CC: Carbon-copy recipients.
        BCC: Blind carbon-copy recipients, never rendered as a header.
        REPLY_TO: Addresses replies should go to.
        FROM: The author (singular).
        BOUNCE: Envelope sender receiving delivery failures (singular).
    """

    TO = "to"
    CC = "cc"
    BCC = "bcc"
    REPLY_TO = "reply_to"
    FROM = "from"
    BOUNCE = "bounce"

    @property
    def singular(self) -> bool:
        """Whether the role holds at most one address."""
        return self in (AddressRole.FROM, AddressRole.BOUNCE)


#: Roles whose addresses receive the message.
RECEIVER_ROLES = (AddressRole.TO, AddressRole.CC, AddressRole.BCC)


class AddressBook:
    """Validated addresses grouped by :class:`AddressRole`.

    Multi-valued roles keep insertion order and allow duplicates. Every
    mutation is all-or-nothing: input is fully parsed before anything is
    stored.

    Examples:
        >>> book = AddressBook()
        >>> book.add_addresses(AddressRole.BCC, ["ab@bc.com", "a.b@c.org"])
        >>> len(book.get(AddressRole.BCC))
        2
    """

    def __init__(self) -> None:
        self._addresses: dict[AddressRole, list[EmailAddress]] = {role: [] for role in AddressRole}

    def add_addresses(self, role: AddressRole, emails: Sequence[str] | str) -> None:
        """Append every address of ``emails`` to a multi-valued role.

        Raises:
            MailValidationError: If ``emails`` is empty, any entry is invalid,
                or ``role`` is singular. Nothing is stored in that case.
        """
        if isinstance(emails, str):
            emails = (emails,)
        if not emails:
            raise MailValidationError(INVALID_ADDRESS_LIST)
        if role.singular:
            raise MailValidationError(f"Role {role.value!r} holds a single address, use add_address()")
        try:
            parsed = normalize_address_list(emails)
        except ValidationError as e:
            raise MailValidationError(f"{INVALID_ADDRESS_LIST}: {e}") from e
        self._addresses[role].extend(parsed)

    def add_address(self, role: AddressRole, email: str, name: str | None = None) -> EmailAddress:
        """Store one address; singular roles are replaced, others appended.

        Raises:
            MailValidationError: If ``email`` is not a valid address.
        """
        try:
            address = parse_email_address(email, name)
        except ValidationError as e:
            raise MailValidationError(str(e)) from e
        if role.singular:
            self._addresses[role] = [address]
        else:
            self._addresses[role].append(address)
        return address

    def get(self, role: AddressRole) -> list[EmailAddress]:
        """Return a copy of the addresses stored for ``role``."""
        return list(self._addresses[role])

    def get_single(self, role: AddressRole) -> EmailAddress | None:
        """Return the first address stored for ``role``, if any."""
        stored = self._addresses[role]
        return stored[0] if stored else None

    def clear(self, role: AddressRole) -> None:
        """Remove every address stored for ``role``."""
        self._addresses[role] = []

    def has_receivers(self) -> bool:
        """Whether at least one TO, CC or BCC address is present."""
        return any(self._addresses[role] for role in RECEIVER_ROLES)


__all__ = ["INVALID_ADDRESS_LIST", "RECEIVER_ROLES", "AddressBook", "AddressRole"]
