"""Transport implementations for mail delivery.

Available transports:
    - SMTPTransport: Standard SMTP protocol with optional POP-before-SMTP (sync)
"""

from mailkit.mail.transports.smtp import SMTPTransport

__all__ = ["SMTPTransport"]
