"""Transport abstraction consuming built messages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mailkit.mail.message import BuiltMessage
    from mailkit.mail.session import MailSession


class MailTransport(ABC):
    """Deliver a :class:`BuiltMessage` using a :class:`MailSession`.

    Implementations raise :class:`~mailkit.mail.exceptions.MailTransportError`
    when delivery fails. Retrying is left to the caller.
    """

    @abstractmethod
    def send(self, message: BuiltMessage, session: MailSession) -> None:
        """Deliver ``message`` according to ``session``."""


__all__ = ["MailTransport"]
