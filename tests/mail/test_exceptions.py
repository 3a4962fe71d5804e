"""Tests for the mail exception hierarchy."""

from __future__ import annotations

import pytest

from mailkit import MailkitError
from mailkit.mail.exceptions import (
    MailArgumentError,
    MailConfigurationError,
    MailError,
    MailStateError,
    MailTransportError,
    MailValidationError,
)


@pytest.mark.parametrize(
    "exc_type",
    [MailArgumentError, MailConfigurationError, MailStateError, MailTransportError, MailValidationError],
)
def test_all_mail_errors_share_base(exc_type: type[Exception]) -> None:
    """Every mail error can be caught as MailError and MailkitError."""
    assert issubclass(exc_type, MailError)
    assert issubclass(exc_type, MailkitError)


@pytest.mark.parametrize(
    "exc_type, builtin",
    [(MailValidationError, ValueError), (MailArgumentError, ValueError), (MailStateError, RuntimeError)],
)
def test_builtin_compatibility(exc_type: type[Exception], builtin: type[Exception]) -> None:
    """Argument and state errors also behave like the builtin types."""
    with pytest.raises(builtin):
        raise exc_type("boom")


def test_configuration_error_is_not_value_error() -> None:
    """Missing configuration is not an argument problem."""
    assert not issubclass(MailConfigurationError, ValueError)
