"""Specialized exceptions raised by the mailkit.mail module.

Exception hierarchy::

    MailkitError
        MailError (base for all mail errors)
            MailValidationError (invalid address input, also ValueError)
            MailArgumentError (invalid header/setting argument, also ValueError)
            MailConfigurationError (message or transport not ready to build/send)
            MailStateError (builder already built, also RuntimeError)
            MailTransportError (delivery attempt failed)
"""

from __future__ import annotations

from mailkit.config.exceptions import MailkitError


class MailError(MailkitError):
    """Base exception for all mail module errors."""


class MailValidationError(MailError, ValueError):
    """Address input could not be validated.

    Raised for empty address lists and for entries that are not
    syntactically valid e-mail addresses.
    """


class MailArgumentError(MailError, ValueError):
    """An argument passed to a mail setter is empty or out of range."""


class MailConfigurationError(MailError):
    """The message or its transport is not configured well enough to proceed.

    Raised by :meth:`MailBuilder.build` when the from address or every
    receiver is missing, and by transports lacking a host name.
    """


class MailStateError(MailError, RuntimeError):
    """The builder was asked to build a message it has already built."""


class MailTransportError(MailError):
    """A transport failed to deliver the message."""


__all__ = [
    "MailArgumentError",
    "MailConfigurationError",
    "MailError",
    "MailStateError",
    "MailTransportError",
    "MailValidationError",
]
