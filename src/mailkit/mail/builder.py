"""Build-once message builder.

:class:`MailBuilder` accumulates addresses, headers, content and transport
settings, then freezes them into a :class:`~mailkit.mail.message.BuiltMessage`.
A builder builds exactly once::

    UNBUILT --build()--> BUILT

Validation failures during :meth:`MailBuilder.build` leave the builder
``UNBUILT`` so the caller can fix the offending field and try again.

Examples:
    >>> builder = MailBuilder()
    >>> builder.set_from("sender@example.com")
    >>> builder.add_to("user@example.com")
    >>> builder.subject = "Greetings"
    >>> builder.set_content("Hello", "text/plain")
    >>> message = builder.build()
    >>> [address.address for address in message.to]
    ['user@example.com']
    >>> builder.state
    <BuildState.BUILT: 'built'>
"""

from __future__ import annotations

import logging
from email.utils import make_msgid
from enum import Enum
from typing import TYPE_CHECKING, Any

from mailkit.config import get_config
from mailkit.mail.addresses import AddressBook, AddressRole
from mailkit.mail.content import MailContent
from mailkit.mail.exceptions import MailArgumentError, MailConfigurationError, MailStateError
from mailkit.mail.headers import HeaderStore
from mailkit.mail.message import BuiltMessage
from mailkit.mail.session import TransportConfig

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from mailkit.mail.session import MailSession
    from mailkit.mail.transport import MailTransport
    from mailkit.utils.validators import EmailAddress

log = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"


class BuildState(str, Enum):
    """Lifecycle of a :class:`MailBuilder`.

    Attributes:
        UNBUILT: Inputs may still change and ``build()`` may be called.
        BUILT: The message has been built; ``build()`` raises.
    """

    UNBUILT = "unbuilt"
    BUILT = "built"


class MailBuilder:
    """Accumulate message state and build it into a :class:`BuiltMessage` once.

    Without ``config``, the constructor reads the ``mail`` section through
    :func:`~mailkit.config.get_config`. On the first call in a process this
    loads ``mailkit.conf.yml`` files from the home and working directories,
    so a malformed file raises :class:`~mailkit.config.ConfigFormatError`
    here. Passing ``config`` skips configuration files entirely. Apart from
    that, the builder performs no I/O.

    Args:
        transport: Default transport used by :meth:`send`.
        config: ``mail`` configuration section. Defaults to the ``mail``
            section of the loaded mailkit configuration.

    Raises:
        ConfigFormatError: If ``config`` is omitted and a configuration file
            is not a valid YAML mapping.
    """

    def __init__(
        self,
        *,
        transport: MailTransport | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        if config is None:
            config = get_config().get("mail", {})
        self._transport = transport
        self._addresses = AddressBook()
        self._headers = HeaderStore()
        self._content = MailContent()
        self._transport_config = TransportConfig.from_config(config.get("smtp"))
        self._charset: str = config.get("charset") or DEFAULT_CHARSET
        self._subject: str | None = None
        self._state = BuildState.UNBUILT
        self._message: BuiltMessage | None = None

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------

    def add_to(self, *emails: str) -> None:
        """Append To recipients; at least one address is required."""
        self._addresses.add_addresses(AddressRole.TO, emails)

    def add_cc(self, *emails: str) -> None:
        """Append Cc recipients; at least one address is required."""
        self._addresses.add_addresses(AddressRole.CC, emails)

    def add_bcc(self, *emails: str) -> None:
        """Append Bcc recipients; at least one address is required."""
        self._addresses.add_addresses(AddressRole.BCC, emails)

    def add_reply_to(self, email: str, name: str | None = None) -> None:
        """Append one Reply-To address, optionally with a display name."""
        self._addresses.add_address(AddressRole.REPLY_TO, email, name)

    def set_from(self, email: str, name: str | None = None) -> None:
        """Set the author of the message."""
        self._addresses.add_address(AddressRole.FROM, email, name)

    def set_bounce_address(self, email: str) -> None:
        """Set the envelope sender that receives delivery failures."""
        address = self._addresses.add_address(AddressRole.BOUNCE, email)
        self._transport_config.bounce_address = address

    @property
    def addresses(self) -> AddressBook:
        """Address book backing this builder."""
        return self._addresses

    @property
    def from_address(self) -> EmailAddress | None:
        """Author of the message."""
        return self._addresses.get_single(AddressRole.FROM)

    @property
    def bounce_address(self) -> EmailAddress | None:
        """Envelope sender override."""
        return self._addresses.get_single(AddressRole.BOUNCE)

    @property
    def to_addresses(self) -> list[EmailAddress]:
        """To recipients in insertion order."""
        return self._addresses.get(AddressRole.TO)

    @property
    def cc_addresses(self) -> list[EmailAddress]:
        """Cc recipients in insertion order."""
        return self._addresses.get(AddressRole.CC)

    @property
    def bcc_addresses(self) -> list[EmailAddress]:
        """Bcc recipients in insertion order."""
        return self._addresses.get(AddressRole.BCC)

    @property
    def reply_to_addresses(self) -> list[EmailAddress]:
        """Reply-To addresses in insertion order."""
        return self._addresses.get(AddressRole.REPLY_TO)

    # ------------------------------------------------------------------
    # Headers and content
    # ------------------------------------------------------------------

    def add_header(self, name: str, value: str) -> None:
        """Add a custom header; see :meth:`HeaderStore.add_header`."""
        self._headers.add_header(name, value)

    @property
    def headers(self) -> HeaderStore:
        """Custom headers of the message."""
        return self._headers

    @property
    def subject(self) -> str | None:
        """Subject line."""
        return self._subject

    @subject.setter
    def subject(self, value: str | None) -> None:
        if value is not None and ("\r" in value or "\n" in value):
            raise MailArgumentError("subject can not contain CR or LF")
        self._subject = value

    @property
    def charset(self) -> str:
        """Charset used to encode text bodies."""
        return self._charset

    @charset.setter
    def charset(self, value: str) -> None:
        self._charset = value or DEFAULT_CHARSET

    def set_content(self, body: str | bytes, content_type: str) -> None:
        """Set the body and its MIME type."""
        self._content.set_content(body, content_type)

    @property
    def content(self) -> MailContent:
        """Body container of the message."""
        return self._content

    @property
    def sent_date(self) -> datetime:
        """Explicit send date, or the current time when none was set."""
        return self._content.sent_date

    @sent_date.setter
    def sent_date(self, value: datetime) -> None:
        self._content.sent_date = value

    # ------------------------------------------------------------------
    # Transport configuration
    # ------------------------------------------------------------------

    @property
    def transport_config(self) -> TransportConfig:
        """Transport settings and session cache of this builder."""
        return self._transport_config

    @property
    def host_name(self) -> str | None:
        """Explicitly configured SMTP host name."""
        return self._transport_config.host_name

    @host_name.setter
    def host_name(self, value: str | None) -> None:
        self._transport_config.host_name = value

    @property
    def ssl_on_connect(self) -> bool:
        """Whether the connection is opened over SSL/TLS."""
        return self._transport_config.ssl_on_connect

    @ssl_on_connect.setter
    def ssl_on_connect(self, value: bool) -> None:
        self._transport_config.ssl_on_connect = value

    @property
    def socket_connection_timeout(self) -> int:
        """Connect timeout in milliseconds."""
        return self._transport_config.socket_connection_timeout

    @socket_connection_timeout.setter
    def socket_connection_timeout(self, value: int) -> None:
        self._transport_config.socket_connection_timeout = value

    def set_pop_before_smtp(self, enabled: bool, host: str | None, username: str | None, password: str | None) -> None:
        """Record POP-before-SMTP settings for the transport."""
        self._transport_config.set_pop_before_smtp(enabled, host, username, password)

    def set_mail_session(self, session: MailSession) -> None:
        """Send with ``session`` instead of one derived from the settings."""
        self._transport_config.set_mail_session(session)

    def get_mail_session(self) -> MailSession:
        """Return the session the message will be sent with."""
        return self._transport_config.get_mail_session()

    # ------------------------------------------------------------------
    # Build and send
    # ------------------------------------------------------------------

    @property
    def state(self) -> BuildState:
        """Current build state."""
        return self._state

    @property
    def built_message(self) -> BuiltMessage | None:
        """The built message, ``None`` until :meth:`build` succeeds."""
        return self._message

    def build(self) -> BuiltMessage:
        """Validate the accumulated state and freeze it into a message.

        Returns:
            The immutable message.

        Raises:
            MailStateError: If the builder has already built a message.
            MailConfigurationError: If the from address or every receiver
                is missing.
        """
        if self._state is BuildState.BUILT:
            raise MailStateError("The MimeMessage is already built.")

        from_address = self.from_address
        if from_address is None:
            raise MailConfigurationError("From address required")
        if not self._addresses.has_receivers():
            raise MailConfigurationError("At least one receiver address required")

        session = self._transport_config.get_mail_session()
        domain = session.host or from_address.address.rpartition("@")[2]

        message = BuiltMessage(
            from_address=from_address,
            to=tuple(self.to_addresses),
            cc=tuple(self.cc_addresses),
            bcc=tuple(self.bcc_addresses),
            reply_to=tuple(self.reply_to_addresses),
            bounce_address=self.bounce_address,
            subject=self._subject,
            charset=self._charset,
            headers=tuple(self._headers.items()),
            body=self._content.body,
            content_type=self._content.content_type,
            sent_date=self._content.sent_date,
            message_id=make_msgid(domain=domain),
            session=session,
        )

        self._state = BuildState.BUILT
        self._message = message
        log.debug("Built message %s for %d recipient(s)", message.message_id, len(message.recipients))
        return message

    def send(self, transport: MailTransport | None = None) -> str:
        """Build the message and deliver it.

        Args:
            transport: Transport to use instead of the builder default.

        Returns:
            The Message-ID of the sent message.

        Raises:
            MailConfigurationError: If no transport is available, or
                :meth:`build` fails validation.
            MailStateError: If the builder has already built a message.
            MailTransportError: If delivery fails.
        """
        backend = transport or self._transport
        if backend is None:
            raise MailConfigurationError("No transport configured for sending")
        message = self.build()
        backend.send(message, message.session)
        return message.message_id


__all__ = ["DEFAULT_CHARSET", "BuildState", "MailBuilder"]
