"""
Validators package.

Provides common validation functions for user input.
"""

from app.validators.unified import (
    normalize_email,
    validate_amount,
    validate_email,
    validate_full_name,
    validate_password,
    validate_reason,
    validate_usdt_address,
)


__all__ = [
    "normalize_email",
    "validate_amount",
    "validate_email",
    "validate_full_name",
    "validate_password",
    "validate_reason",
    "validate_usdt_address",
]
