#!/usr/bin/env python3
"""Send a message over SMTP with TRACE-level logging.

TRACE logging shows the derived session properties, the envelope and the
authentication steps. With ``debug`` enabled on the transport settings, the
raw smtplib dialog is printed as well.

Setup:
    1. Go to https://ethereal.email and create a free account
    2. Set environment variables:
       export ETHEREAL_USER="your-user@ethereal.email"
       export ETHEREAL_PASS="your-password"

Usage:
    python examples/mail/smtp_trace.py
"""

from __future__ import annotations

import os
import sys

from mailkit.logging import init_logging
from mailkit.mail import MailBuilder, MailError
from mailkit.mail.transports import SMTPTransport

ETHEREAL_HOST = "smtp.ethereal.email"
ETHEREAL_PORT = 587


def main() -> None:
    """Send one message with TRACE logging enabled."""
    user = os.getenv("ETHEREAL_USER")
    password = os.getenv("ETHEREAL_PASS")
    if not user or not password:
        print("Set ETHEREAL_USER and ETHEREAL_PASS (see https://ethereal.email)")
        sys.exit(1)

    log = init_logging(config={"console": {"level": "TRACE"}})

    builder = MailBuilder(transport=SMTPTransport())
    builder.host_name = ETHEREAL_HOST
    config = builder.transport_config
    config.smtp_port = ETHEREAL_PORT
    config.start_tls_required = True
    config.debug = True
    config.set_authentication(user, password)

    builder.set_from(user, "mailkit trace demo")
    builder.add_to(user)
    builder.subject = "mailkit TRACE demo"
    builder.set_content("Sent with TRACE logging enabled.", "text/plain")

    try:
        message_id = builder.send()
    except MailError as e:
        log.error("Delivery failed: %s", e)
        sys.exit(1)
    log.success("Sent %s", message_id)


if __name__ == "__main__":  # pragma: no cover - manual example
    main()
