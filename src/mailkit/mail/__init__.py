"""Message building for mailkit.

The builder validates and accumulates message state, then freezes it once
into a :class:`BuiltMessage`. Delivery is delegated to a
:class:`MailTransport` together with the :class:`MailSession` resolved at
build time.

Examples:
    >>> from mailkit.mail import MailBuilder
    >>> builder = MailBuilder()
    >>> builder.set_from("ab@bc.com")
    >>> builder.add_bcc("a.b@c.org", "asdfwqesad@asdfasgasd.com.bd")
    >>> len(builder.bcc_addresses)
    2
"""

from mailkit.mail.addresses import AddressBook, AddressRole
from mailkit.mail.builder import BuildState, MailBuilder
from mailkit.mail.content import MailContent
from mailkit.mail.exceptions import (
    MailArgumentError,
    MailConfigurationError,
    MailError,
    MailStateError,
    MailTransportError,
    MailValidationError,
)
from mailkit.mail.headers import HeaderStore
from mailkit.mail.message import BuiltMessage
from mailkit.mail.session import MailSession, PopBeforeSmtp, SMTPCredentials, TransportConfig
from mailkit.mail.transport import MailTransport

__all__ = [
    "AddressBook",
    "AddressRole",
    "BuildState",
    "BuiltMessage",
    "HeaderStore",
    "MailArgumentError",
    "MailBuilder",
    "MailConfigurationError",
    "MailContent",
    "MailError",
    "MailSession",
    "MailStateError",
    "MailTransport",
    "MailTransportError",
    "MailValidationError",
    "PopBeforeSmtp",
    "SMTPCredentials",
    "TransportConfig",
]
