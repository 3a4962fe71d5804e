"""Message body, content type and send date."""

from __future__ import annotations

from datetime import datetime, timezone


class MailContent:
    """Holds the body of a message and when it is considered sent.

    Attributes:
        body: Message body, text or raw bytes.
        content_type: MIME type declared for ``body``.
    """

    def __init__(self) -> None:
        self.body: str | bytes | None = None
        self.content_type: str | None = None
        self._sent_date: datetime | None = None

    def set_content(self, body: str | bytes, content_type: str) -> None:
        """Set the body together with its declared MIME type."""
        self.body = body
        self.content_type = content_type

    @property
    def sent_date(self) -> datetime:
        """Explicit send date, or the current UTC time when none was set."""
        if self._sent_date is None:
            return datetime.now(timezone.utc)
        return self._sent_date

    @sent_date.setter
    def sent_date(self, value: datetime) -> None:
        self._sent_date = value

    @property
    def has_sent_date(self) -> bool:
        """Whether a send date was set explicitly."""
        return self._sent_date is not None


__all__ = ["MailContent"]
