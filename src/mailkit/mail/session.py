"""Transport configuration and the session handle derived from it.

A :class:`MailSession` is the immutable handle a transport uses to deliver a
built message. :class:`TransportConfig` either returns a session injected by
the caller, or derives one from its own settings and memoizes it until a
setting changes.

Examples:
    >>> config = TransportConfig()
    >>> config.host_name = "smtp.example.com"
    >>> config.get_mail_session() is config.get_mail_session()
    True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mailkit.logging import TRACE_LEVEL
from mailkit.mail.exceptions import MailArgumentError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mailkit.utils.validators import EmailAddress

log = logging.getLogger(__name__)

DEFAULT_SMTP_PORT = 25
DEFAULT_SSL_SMTP_PORT = 465
#: Socket timeouts are expressed in milliseconds.
DEFAULT_SOCKET_TIMEOUT_MS = 60_000

MAIL_HOST = "mail.smtp.host"
MAIL_PORT = "mail.smtp.port"
MAIL_SMTP_FROM = "mail.smtp.from"
MAIL_SMTP_AUTH = "mail.smtp.auth"
MAIL_SMTP_USER = "mail.smtp.user"
MAIL_SMTP_CONNECTIONTIMEOUT = "mail.smtp.connectiontimeout"
MAIL_SMTP_TIMEOUT = "mail.smtp.timeout"
MAIL_SMTP_SSL_ENABLE = "mail.smtp.ssl.enable"
MAIL_SMTP_SSL_PORT = "mail.smtp.ssl.port"
MAIL_TRANSPORT_STARTTLS_ENABLE = "mail.smtp.starttls.enable"
MAIL_TRANSPORT_STARTTLS_REQUIRED = "mail.smtp.starttls.required"
MAIL_DEBUG = "mail.debug"


@dataclass(frozen=True, slots=True)
class SMTPCredentials:
    """Username and password used to authenticate against the SMTP server."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class PopBeforeSmtp:
    """POP-before-SMTP settings, used by transports before connecting.

    Attributes:
        enabled: Whether the POP3 login must happen first.
        host: POP3 server host.
        username: POP3 user.
        password: POP3 password.
    """

    enabled: bool = False
    host: str | None = None
    username: str | None = None
    password: str | None = field(default=None, repr=False)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


@dataclass(frozen=True, slots=True)
class MailSession:
    """Immutable transport session handle.

    Attributes:
        host: SMTP host name, ``None`` when unknown.
        port: Plain SMTP port.
        ssl_port: Port used when ``ssl_on_connect`` is set.
        ssl_on_connect: Open the connection over SSL/TLS.
        start_tls_enabled: Upgrade with STARTTLS when the server offers it.
        start_tls_required: Fail when STARTTLS is not offered.
        bounce_address: Envelope sender override (``MAIL FROM``).
        connection_timeout: Connect timeout in milliseconds.
        timeout: Socket I/O timeout in milliseconds.
        credentials: SMTP login, if any.
        pop_before_smtp: POP-before-SMTP settings.
        debug: Emit the SMTP dialog at TRACE level.
    """

    host: str | None = None
    port: int = DEFAULT_SMTP_PORT
    ssl_port: int = DEFAULT_SSL_SMTP_PORT
    ssl_on_connect: bool = False
    start_tls_enabled: bool = False
    start_tls_required: bool = False
    bounce_address: str | None = None
    connection_timeout: int = DEFAULT_SOCKET_TIMEOUT_MS
    timeout: int = DEFAULT_SOCKET_TIMEOUT_MS
    credentials: SMTPCredentials | None = None
    pop_before_smtp: PopBeforeSmtp = field(default_factory=PopBeforeSmtp)
    debug: bool = False

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> MailSession:
        """Create a session from ``mail.*`` style properties.

        Unknown keys are ignored. Credentials and POP-before-SMTP settings
        cannot be expressed as properties and stay unset.

        Examples:
            >>> MailSession.from_properties({"mail.smtp.host": "smtp.example.com"}).host
            'smtp.example.com'
        """
        return cls(
            host=properties.get(MAIL_HOST) or None,
            port=int(properties.get(MAIL_PORT, DEFAULT_SMTP_PORT)),
            ssl_port=int(properties.get(MAIL_SMTP_SSL_PORT, DEFAULT_SSL_SMTP_PORT)),
            ssl_on_connect=_as_bool(properties.get(MAIL_SMTP_SSL_ENABLE, False)),
            start_tls_enabled=_as_bool(properties.get(MAIL_TRANSPORT_STARTTLS_ENABLE, False)),
            start_tls_required=_as_bool(properties.get(MAIL_TRANSPORT_STARTTLS_REQUIRED, False)),
            bounce_address=properties.get(MAIL_SMTP_FROM) or None,
            connection_timeout=int(properties.get(MAIL_SMTP_CONNECTIONTIMEOUT, DEFAULT_SOCKET_TIMEOUT_MS)),
            timeout=int(properties.get(MAIL_SMTP_TIMEOUT, DEFAULT_SOCKET_TIMEOUT_MS)),
            debug=_as_bool(properties.get(MAIL_DEBUG, False)),
        )

    def to_properties(self) -> dict[str, str]:
        """Render the session as ``mail.*`` string properties."""
        properties = {
            MAIL_PORT: str(self.port),
            MAIL_SMTP_SSL_PORT: str(self.ssl_port),
            MAIL_SMTP_SSL_ENABLE: str(self.ssl_on_connect).lower(),
            MAIL_TRANSPORT_STARTTLS_ENABLE: str(self.start_tls_enabled).lower(),
            MAIL_TRANSPORT_STARTTLS_REQUIRED: str(self.start_tls_required).lower(),
            MAIL_SMTP_CONNECTIONTIMEOUT: str(self.connection_timeout),
            MAIL_SMTP_TIMEOUT: str(self.timeout),
            MAIL_SMTP_AUTH: str(self.credentials is not None).lower(),
            MAIL_DEBUG: str(self.debug).lower(),
        }
        if self.host:
            properties[MAIL_HOST] = self.host
        if self.bounce_address:
            properties[MAIL_SMTP_FROM] = self.bounce_address
        if self.credentials is not None:
            properties[MAIL_SMTP_USER] = self.credentials.username
        return properties


def _validate_port(value: int, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 65535:
        raise MailArgumentError(f"{label} must be an integer between 1 and 65535, got {value!r}")
    return value


def _validate_timeout(value: int, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise MailArgumentError(f"{label} must be a positive number of milliseconds, got {value!r}")
    return value


class TransportConfig:
    """Mutable transport settings plus the session handle derived from them.

    ``host_name`` only ever reflects the value set on this object: a session
    injected with :meth:`set_mail_session` is used for delivery but does not
    feed back into the individual settings.

    Any setter drops the memoized derived session, so the next
    :meth:`get_mail_session` call rebuilds it.
    """

    def __init__(
        self,
        *,
        smtp_port: int = DEFAULT_SMTP_PORT,
        ssl_smtp_port: int = DEFAULT_SSL_SMTP_PORT,
        ssl_on_connect: bool = False,
        start_tls_enabled: bool = False,
        start_tls_required: bool = False,
        socket_connection_timeout: int = DEFAULT_SOCKET_TIMEOUT_MS,
        socket_timeout: int = DEFAULT_SOCKET_TIMEOUT_MS,
        debug: bool = False,
    ) -> None:
        self._host_name: str | None = None
        self._smtp_port = _validate_port(smtp_port, "SMTP port")
        self._ssl_smtp_port = _validate_port(ssl_smtp_port, "SSL SMTP port")
        self._ssl_on_connect = ssl_on_connect
        self._start_tls_enabled = start_tls_enabled
        self._start_tls_required = start_tls_required
        self._socket_connection_timeout = _validate_timeout(socket_connection_timeout, "Socket connection timeout")
        self._socket_timeout = _validate_timeout(socket_timeout, "Socket timeout")
        self._bounce_address: EmailAddress | None = None
        self._credentials: SMTPCredentials | None = None
        self._pop_before_smtp = PopBeforeSmtp()
        self._debug = debug
        self._session: MailSession | None = None
        self._derived_session: MailSession | None = None

    @classmethod
    def from_config(cls, smtp: Mapping[str, Any] | None = None) -> TransportConfig:
        """Create a config seeded from a ``mail.smtp`` configuration section."""
        smtp = smtp or {}
        return cls(
            smtp_port=int(smtp.get("port", DEFAULT_SMTP_PORT)),
            ssl_smtp_port=int(smtp.get("ssl_port", DEFAULT_SSL_SMTP_PORT)),
            ssl_on_connect=_as_bool(smtp.get("ssl_on_connect", False)),
            start_tls_enabled=_as_bool(smtp.get("start_tls_enabled", False)),
            start_tls_required=_as_bool(smtp.get("start_tls_required", False)),
            socket_connection_timeout=int(smtp.get("connection_timeout", DEFAULT_SOCKET_TIMEOUT_MS)),
            socket_timeout=int(smtp.get("timeout", DEFAULT_SOCKET_TIMEOUT_MS)),
            debug=_as_bool(smtp.get("debug", False)),
        )

    def _invalidate(self) -> None:
        self._derived_session = None

    @property
    def host_name(self) -> str | None:
        """Explicitly configured SMTP host name."""
        return self._host_name

    @host_name.setter
    def host_name(self, value: str | None) -> None:
        self._host_name = value or None
        self._invalidate()

    @property
    def smtp_port(self) -> int:
        """Plain SMTP port."""
        return self._smtp_port

    @smtp_port.setter
    def smtp_port(self, value: int) -> None:
        self._smtp_port = _validate_port(value, "SMTP port")
        self._invalidate()

    @property
    def ssl_smtp_port(self) -> int:
        """Port used when connecting over SSL."""
        return self._ssl_smtp_port

    @ssl_smtp_port.setter
    def ssl_smtp_port(self, value: int) -> None:
        self._ssl_smtp_port = _validate_port(value, "SSL SMTP port")
        self._invalidate()

    @property
    def ssl_on_connect(self) -> bool:
        """Whether the connection is opened over SSL/TLS."""
        return self._ssl_on_connect

    @ssl_on_connect.setter
    def ssl_on_connect(self, value: bool) -> None:
        self._ssl_on_connect = bool(value)
        self._invalidate()

    @property
    def start_tls_enabled(self) -> bool:
        """Whether STARTTLS is used when offered."""
        return self._start_tls_enabled

    @start_tls_enabled.setter
    def start_tls_enabled(self, value: bool) -> None:
        self._start_tls_enabled = bool(value)
        self._invalidate()

    @property
    def start_tls_required(self) -> bool:
        """Whether delivery fails when STARTTLS is not offered."""
        return self._start_tls_required

    @start_tls_required.setter
    def start_tls_required(self, value: bool) -> None:
        self._start_tls_required = bool(value)
        self._invalidate()

    @property
    def socket_connection_timeout(self) -> int:
        """Connect timeout in milliseconds."""
        return self._socket_connection_timeout

    @socket_connection_timeout.setter
    def socket_connection_timeout(self, value: int) -> None:
        self._socket_connection_timeout = _validate_timeout(value, "Socket connection timeout")
        self._invalidate()

    @property
    def socket_timeout(self) -> int:
        """Socket I/O timeout in milliseconds."""
        return self._socket_timeout

    @socket_timeout.setter
    def socket_timeout(self, value: int) -> None:
        self._socket_timeout = _validate_timeout(value, "Socket timeout")
        self._invalidate()

    @property
    def bounce_address(self) -> EmailAddress | None:
        """Envelope sender used instead of the from address."""
        return self._bounce_address

    @bounce_address.setter
    def bounce_address(self, value: EmailAddress | None) -> None:
        self._bounce_address = value
        self._invalidate()

    @property
    def credentials(self) -> SMTPCredentials | None:
        """SMTP login credentials."""
        return self._credentials

    def set_authentication(self, username: str, password: str) -> None:
        """Authenticate with ``username``/``password`` when sending."""
        self._credentials = SMTPCredentials(username=username, password=password)
        self._invalidate()

    @property
    def pop_before_smtp(self) -> PopBeforeSmtp:
        """Recorded POP-before-SMTP settings."""
        return self._pop_before_smtp

    def set_pop_before_smtp(self, enabled: bool, host: str | None, username: str | None, password: str | None) -> None:
        """Record POP-before-SMTP settings; the transport performs the login."""
        self._pop_before_smtp = PopBeforeSmtp(enabled=enabled, host=host, username=username, password=password)
        self._invalidate()

    @property
    def debug(self) -> bool:
        """Whether transports log the SMTP dialog."""
        return self._debug

    @debug.setter
    def debug(self, value: bool) -> None:
        self._debug = bool(value)
        self._invalidate()

    def set_mail_session(self, session: MailSession) -> None:
        """Use ``session`` for delivery instead of deriving one.

        Raises:
            MailArgumentError: If ``session`` is ``None``.
        """
        if session is None:
            raise MailArgumentError("no mail session supplied")
        self._session = session
        self._invalidate()

    def get_mail_session(self) -> MailSession:
        """Return the injected session, or the memoized derived one."""
        if self._session is not None:
            return self._session
        if self._derived_session is None:
            self._derived_session = self._derive_session()
        return self._derived_session

    def _derive_session(self) -> MailSession:
        session = MailSession(
            host=self._host_name,
            port=self._smtp_port,
            ssl_port=self._ssl_smtp_port,
            ssl_on_connect=self._ssl_on_connect,
            start_tls_enabled=self._start_tls_enabled,
            start_tls_required=self._start_tls_required,
            bounce_address=self._bounce_address.address if self._bounce_address else None,
            connection_timeout=self._socket_connection_timeout,
            timeout=self._socket_timeout,
            credentials=self._credentials,
            pop_before_smtp=self._pop_before_smtp,
            debug=self._debug,
        )
        if log.isEnabledFor(TRACE_LEVEL):
            log.log(TRACE_LEVEL, "[SESSION] Derived mail session: %s", session.to_properties())
        return session


__all__ = [
    "DEFAULT_SMTP_PORT",
    "DEFAULT_SOCKET_TIMEOUT_MS",
    "DEFAULT_SSL_SMTP_PORT",
    "MailSession",
    "PopBeforeSmtp",
    "SMTPCredentials",
    "TransportConfig",
]
