"""SMTP transport backed by :mod:`smtplib`.

Connection details come from the :class:`~mailkit.mail.session.MailSession`
handed to :meth:`SMTPTransport.send`, so one transport instance can serve
builders configured for different servers.

When the session enables POP-before-SMTP, a POP3 login is performed with
:mod:`poplib` before the SMTP connection is opened.

Examples:
    >>> builder = MailBuilder()  # doctest: +SKIP
    >>> builder.host_name = "smtp.example.com"  # doctest: +SKIP
    >>> builder.set_from("sender@example.com")  # doctest: +SKIP
    >>> builder.add_to("user@example.com")  # doctest: +SKIP
    >>> builder.send(SMTPTransport())  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import poplib
import smtplib
import ssl
from typing import TYPE_CHECKING

from mailkit.logging import TRACE_LEVEL
from mailkit.mail.exceptions import MailConfigurationError, MailTransportError
from mailkit.mail.transport import MailTransport

if TYPE_CHECKING:
    from mailkit.mail.message import BuiltMessage
    from mailkit.mail.session import MailSession, PopBeforeSmtp

__all__ = ["SMTPTransport"]

log = logging.getLogger(__name__)


def _seconds(milliseconds: int) -> float:
    return milliseconds / 1000


def _pop_before_smtp(settings: PopBeforeSmtp, timeout: float) -> None:
    """Log in and out of the POP3 server named in ``settings``.

    Raises:
        MailConfigurationError: If the POP3 host is missing.
        MailTransportError: If the POP3 dialog fails.
    """
    if not settings.host:
        raise MailConfigurationError("POP-before-SMTP requires a POP3 host")

    log.log(TRACE_LEVEL, "[POP3] Authenticating against %s as %s", settings.host, settings.username)
    try:
        client = poplib.POP3(settings.host, timeout=timeout)
        try:
            client.user(settings.username or "")
            client.pass_(settings.password or "")
        finally:
            client.quit()
    except (poplib.error_proto, OSError) as e:
        raise MailTransportError(f"POP-before-SMTP authentication failed: {e}") from e
    log.log(TRACE_LEVEL, "[POP3] Authentication successful")


class SMTPTransport(MailTransport):
    """Synchronous SMTP delivery.

    Args:
        ssl_context: Context used for SMTPS and STARTTLS. Defaults to
            :func:`ssl.create_default_context`.
    """

    def __init__(self, *, ssl_context: ssl.SSLContext | None = None) -> None:
        self._ssl_context = ssl_context

    @property
    def ssl_context(self) -> ssl.SSLContext:
        """SSL context used for encrypted connections."""
        if self._ssl_context is None:
            self._ssl_context = ssl.create_default_context()
        return self._ssl_context

    def send(self, message: BuiltMessage, session: MailSession) -> None:
        """Deliver ``message`` over SMTP.

        Raises:
            MailConfigurationError: If the session has no host name.
            MailValidationError: If the message cannot be rendered.
            MailTransportError: If POP3, the SMTP dialog or the socket fails.
        """
        if not session.host:
            raise MailConfigurationError("Cannot find valid hostname for mail session")

        email_message = message.to_email_message()
        sender = message.envelope_sender.address
        recipients = [address.address for address in message.recipients]

        timeout = _seconds(session.connection_timeout)
        if session.pop_before_smtp.enabled:
            _pop_before_smtp(session.pop_before_smtp, timeout)

        try:
            with self._connect(session, timeout) as client:
                sock = getattr(client, "sock", None)
                if sock is not None:
                    sock.settimeout(_seconds(session.timeout))
                if session.debug and log.isEnabledFor(TRACE_LEVEL):
                    client.set_debuglevel(1)
                client.ehlo()
                self._maybe_starttls(client, session)
                if session.credentials is not None:
                    log.log(TRACE_LEVEL, "[SMTP] Authenticating as: %s", session.credentials.username)
                    client.login(session.credentials.username, session.credentials.password)
                    log.log(TRACE_LEVEL, "[SMTP] Authentication successful")
                log.log(TRACE_LEVEL, "[SMTP] MAIL FROM: %s", sender)
                log.log(TRACE_LEVEL, "[SMTP] RCPT TO: %s", ", ".join(recipients))
                client.send_message(email_message, from_addr=sender, to_addrs=recipients)
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(str(e)) from e

        log.debug("Message %s sent to %d recipient(s) via %s", message.message_id, len(recipients), session.host)
        log.log(TRACE_LEVEL, "[SMTP] Message sent successfully")

    def _connect(self, session: MailSession, timeout: float) -> smtplib.SMTP:
        if session.ssl_on_connect:
            log.log(TRACE_LEVEL, "[SMTP] Connecting to %s:%d (SSL)", session.host, session.ssl_port)
            return smtplib.SMTP_SSL(
                host=session.host,
                port=session.ssl_port,
                timeout=timeout,
                context=self.ssl_context,
            )
        log.log(TRACE_LEVEL, "[SMTP] Connecting to %s:%d", session.host, session.port)
        return smtplib.SMTP(host=session.host, port=session.port, timeout=timeout)

    def _maybe_starttls(self, client: smtplib.SMTP, session: MailSession) -> None:
        if session.ssl_on_connect or not (session.start_tls_enabled or session.start_tls_required):
            return
        if not client.has_extn("STARTTLS"):
            if session.start_tls_required:
                raise MailTransportError(f"STARTTLS is required but not offered by {session.host}")
            return
        log.log(TRACE_LEVEL, "[SMTP] Upgrading connection with STARTTLS")
        client.starttls(context=self.ssl_context)
        client.ehlo()
