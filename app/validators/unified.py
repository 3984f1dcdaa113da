"""Unified validators for the whole project."""
import re
from decimal import Decimal, InvalidOperation

from app.config.business_constants import (
    MIN_FULL_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    MIN_REJECTION_REASON_LENGTH,
    MIN_USDT_ADDRESS_LENGTH,
    MONEY_SCALE,
)


def validate_amount(
    amount: str | int | Decimal | None,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal | None = None,
) -> tuple[bool, Decimal | None, str | None]:
    """
    Single amount validator.

    Args:
        amount: Amount as string, int or Decimal
        min_val: Minimum allowed value
        max_val: Maximum allowed value (optional)

    Returns:
        Tuple of (is_valid, parsed_value, error_message)
        - (True, value, None) if valid
        - (False, None, error_message) if invalid

    Examples:
        >>> validate_amount("100.50")
        (True, Decimal('100.50'), None)
        >>> validate_amount("-10")
        (False, None, 'Amount must be >= 0')
    """
    if amount is None or isinstance(amount, (bool, float)):
        return False, None, "Amount is required"

    if isinstance(amount, str):
        amount = amount.strip().replace(",", ".")
        if not amount:
            return False, None, "Amount is required"

    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        return False, None, "Invalid amount format"

    if not value.is_finite():
        return False, None, "Amount must be a finite number"

    if value < min_val:
        return False, None, f"Amount must be >= {min_val}"

    if max_val is not None and value > max_val:
        return False, None, f"Amount must be <= {max_val}"

    if value.as_tuple().exponent < -MONEY_SCALE:
        return (
            False,
            None,
            f"Amount has too many decimal places (maximum {MONEY_SCALE})",
        )

    return True, value, None


def validate_usdt_address(address: str | None) -> tuple[bool, str | None]:
    """
    Validate a payout address.

    Only length is checked: the platform pays out manually and trusts the
    admin to verify the network format.

    Args:
        address: Address to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not address or not isinstance(address, str) or not address.strip():
        return False, "USDT address is required"

    if len(address.strip()) < MIN_USDT_ADDRESS_LENGTH:
        return (
            False,
            f"USDT address must be at least {MIN_USDT_ADDRESS_LENGTH} characters",
        )

    return True, None


def validate_email(email: str | None) -> tuple[bool, str | None]:
    """
    Single email validator.

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, error_message)
        - (True, None) if valid
        - (False, error_message) if invalid

    Examples:
        >>> validate_email("user@example.com")
        (True, None)
        >>> validate_email("invalid")
        (False, "Email must contain '@'")
    """
    if not email or not isinstance(email, str):
        return False, "Email is empty"

    email = email.strip()

    if not email:
        return False, "Email is empty"

    if len(email) > 255:
        return False, "Email is too long (maximum 255 characters)"

    if "@" not in email:
        return False, "Email must contain '@'"

    parts = email.split("@")
    if len(parts) != 2:
        return False, "Email must contain exactly one '@'"

    local, domain = parts

    if not local or len(local) > 64:
        return False, "Email local part must be 1-64 characters"

    if "." not in domain:
        return False, "Email domain must contain a dot (.)"

    if any(not part for part in domain.split(".")):
        return False, "Email domain has invalid structure"

    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    if not re.match(pattern, email):
        return False, "Invalid email format"

    return True, None


def validate_password(password: str | None) -> tuple[bool, str | None]:
    """Validate login password length."""
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return (
            False,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )
    return True, None


def validate_full_name(full_name: str | None) -> tuple[bool, str | None]:
    """Validate display name."""
    if not full_name or len(full_name.strip()) < MIN_FULL_NAME_LENGTH:
        return (
            False,
            f"Full name must be at least {MIN_FULL_NAME_LENGTH} characters",
        )
    if len(full_name.strip()) > 255:
        return False, "Full name is too long (maximum 255 characters)"
    return True, None


def validate_reason(
    reason: str | None,
    min_length: int = MIN_REJECTION_REASON_LENGTH,
) -> tuple[bool, str | None]:
    """
    Validate an admin-supplied reason.

    Args:
        reason: Free text reason
        min_length: Minimum length after stripping

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not reason or len(reason.strip()) < min_length:
        return False, f"Reason must be at least {min_length} characters"
    return True, None


def normalize_email(email: str) -> str:
    """
    Normalize email to lowercase without surrounding whitespace.

    Args:
        email: Email address

    Returns:
        Normalized email
    """
    return email.strip().lower()
