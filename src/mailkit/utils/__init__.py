"""Shared utilities for mailkit."""

from mailkit.utils.validators import (
    EmailAddress,
    ValidationError,
    normalize_address_list,
    parse_email_address,
)

__all__ = [
    "EmailAddress",
    "ValidationError",
    "normalize_address_list",
    "parse_email_address",
]
