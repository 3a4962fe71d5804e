"""mailkit: validated, build-once e-mail messages with cached transport sessions."""

from mailkit.config.exceptions import MailkitError
from mailkit.mail import (
    BuildState,
    BuiltMessage,
    MailBuilder,
    MailError,
    MailSession,
    MailTransport,
)
from mailkit.meta import __app_name__, __author__, __version__

__all__ = [
    "BuildState",
    "BuiltMessage",
    "MailBuilder",
    "MailError",
    "MailSession",
    "MailTransport",
    "MailkitError",
    "__app_name__",
    "__author__",
    "__version__",
]
