"""Plain-text mail composition using :class:`mailkit.mail.MailBuilder`."""

from __future__ import annotations

from mailkit.mail import MailBuilder


def build_plain_message() -> None:
    """Build a plain-text message once and print the RFC 5322 payload."""
    builder = MailBuilder()
    builder.set_from("sender@example.com", "Sender")
    builder.add_to("user@example.com")
    builder.add_bcc("audit@example.com")
    builder.subject = "Plain Greetings"
    builder.set_content("Hello from mailkit!\nThis message uses the plain content type.", "text/plain")

    message = builder.build()
    print(message.as_bytes().decode("utf-8"))
    print(f"Envelope recipients: {[address.address for address in message.recipients]}")


if __name__ == "__main__":  # pragma: no cover - manual example
    build_plain_message()
