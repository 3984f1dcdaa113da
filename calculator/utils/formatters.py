"""
Formatting utilities for money and percentages.

Functions that render Decimal values for API responses and audit trails.
"""

from decimal import Decimal

from calculator.constants import MONEY_QUANTUM


def format_money(amount: Decimal | int | str | None) -> str:
    """
    Render a money value as a fixed 6-place decimal string.

    Args:
        amount: Amount to render (None renders as zero)

    Returns:
        Plain decimal string without exponent

    Example:
        >>> format_money(Decimal("113"))
        '113.000000'
    """
    value = Decimal(amount if amount is not None else 0)
    return f"{value.quantize(MONEY_QUANTUM):f}"


def format_currency(
    amount: Decimal | int,
    currency: str = "USDT",
    decimals: int = 2,
) -> str:
    """
    Format amount for human-readable messages.

    Args:
        amount: Amount to format
        currency: Currency code or symbol
        decimals: Number of decimal places

    Returns:
        Formatted string with thousands separators

    Example:
        >>> format_currency(Decimal("1234.5"))
        '1,234.50 USDT'
        >>> format_currency(Decimal("5"), currency="$")
        '$5.00'
    """
    quantum = Decimal(1).scaleb(-decimals)
    formatted = f"{Decimal(amount).quantize(quantum):,.{decimals}f}"

    if currency.startswith("$"):
        return f"{currency}{formatted}"
    return f"{formatted} {currency}"


def format_percentage(
    value: Decimal | int,
    decimals: int = 2,
    show_sign: bool = False,
) -> str:
    """
    Format value already expressed in percent.

    Args:
        value: Percent value
        decimals: Number of decimal places
        show_sign: Prefix positive values with +

    Returns:
        Formatted string with percent sign

    Example:
        >>> format_percentage(Decimal("12.5"))
        '12.50%'
        >>> format_percentage(3, decimals=0, show_sign=True)
        '+3%'
    """
    value = Decimal(value)
    sign = "+" if show_sign and value > 0 else ""
    return f"{sign}{value:.{decimals}f}%"
