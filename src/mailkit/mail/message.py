"""The immutable artifact produced by :meth:`MailBuilder.build`."""

from __future__ import annotations

from dataclasses import dataclass
from email.headerregistry import Address
from email.message import EmailMessage
from email.utils import format_datetime
from typing import TYPE_CHECKING

from mailkit.mail.exceptions import MailValidationError

if TYPE_CHECKING:
    from datetime import datetime

    from mailkit.mail.session import MailSession
    from mailkit.utils.validators import EmailAddress


def _header_address(address: EmailAddress) -> Address:
    return Address(display_name=address.display_name, addr_spec=address.address)


@dataclass(frozen=True, slots=True)
class BuiltMessage:
    """A fully assembled, read-only message.

    Attributes:
        from_address: Author of the message.
        to: Primary recipients.
        cc: Carbon-copy recipients.
        bcc: Blind carbon-copy recipients, excluded from rendered headers.
        reply_to: Reply-To addresses.
        bounce_address: Envelope sender override.
        subject: Subject line.
        charset: Charset used for text bodies.
        headers: Custom headers in insertion order.
        body: Message body.
        content_type: Declared MIME type of ``body``.
        sent_date: Date header value.
        message_id: Generated Message-ID.
        session: Session handle the message should be sent with.
    """

    from_address: EmailAddress
    to: tuple[EmailAddress, ...]
    cc: tuple[EmailAddress, ...]
    bcc: tuple[EmailAddress, ...]
    reply_to: tuple[EmailAddress, ...]
    bounce_address: EmailAddress | None
    subject: str | None
    charset: str
    headers: tuple[tuple[str, str], ...]
    body: str | bytes | None
    content_type: str | None
    sent_date: datetime
    message_id: str
    session: MailSession

    @property
    def recipients(self) -> tuple[EmailAddress, ...]:
        """Every envelope recipient: To, then Cc, then Bcc."""
        return self.to + self.cc + self.bcc

    @property
    def envelope_sender(self) -> EmailAddress:
        """Address used for ``MAIL FROM``: the bounce address, else the author."""
        return self.bounce_address or self.from_address

    def to_email_message(self) -> EmailMessage:
        """Render a new :class:`~email.message.EmailMessage` for this artifact.

        Each call returns an independent object, so the artifact itself is
        never mutated by callers or transports.

        Raises:
            MailValidationError: If ``content_type`` is not a ``type/subtype``
                MIME type, or the :mod:`email` package rejects a header.
        """
        try:
            return self._render()
        except MailValidationError:
            raise
        except ValueError as e:
            raise MailValidationError(f"Cannot render message {self.message_id}: {e}") from e

    def _render(self) -> EmailMessage:
        message = EmailMessage()
        message["From"] = _header_address(self.from_address)
        if self.to:
            message["To"] = [_header_address(address) for address in self.to]
        if self.cc:
            message["Cc"] = [_header_address(address) for address in self.cc]
        if self.reply_to:
            message["Reply-To"] = [_header_address(address) for address in self.reply_to]
        if self.subject is not None:
            message["Subject"] = self.subject
        message["Date"] = format_datetime(self.sent_date)
        message["Message-ID"] = self.message_id
        self._set_body(message)

        # custom headers win over rendered ones with the same name
        for name, value in self.headers:
            if name in message:
                del message[name]
            message[name] = value
        return message

    def _set_body(self, message: EmailMessage) -> None:
        if self.body is None:
            return
        content_type = (self.content_type or "text/plain").split(";", 1)[0].strip().lower()
        maintype, sep, subtype = content_type.partition("/")
        if not sep or not maintype or not subtype:
            raise MailValidationError(f"Invalid content type: {self.content_type!r}")

        if isinstance(self.body, bytes):
            message.set_content(self.body, maintype=maintype, subtype=subtype)
        elif maintype == "text":
            message.set_content(self.body, subtype=subtype, charset=self.charset)
        else:
            message.set_content(self.body.encode(self.charset), maintype=maintype, subtype=subtype)

    def as_bytes(self) -> bytes:
        """Serialize the rendered message."""
        return self.to_email_message().as_bytes()


__all__ = ["BuiltMessage"]
