"""
Formatting utilities for display and logging.
"""

from datetime import date
from typing import Optional


def format_price(price: Optional[float], decimals: int = 2) -> str:
    """
    Format price with specified decimals.

    Example:
        >>> format_price(575.126)
        '$575.13'
    """
    if price is None:
        return "-"
    return f"${price:,.{decimals}f}"


def format_percentage(
    value: float, decimals: int = 2, include_sign: bool = True
) -> str:
    """
    Format a value that is already expressed in percent.

    Args:
        value: Percentage value (2.5 = 2.5%)
        decimals: Number of decimal places
        include_sign: Include + sign for positive values

    Returns:
        Formatted percentage string

    Example:
        >>> format_percentage(2.5)
        '+2.50%'
        >>> format_percentage(-1.234, decimals=1)
        '-1.2%'
    """
    sign = "+" if include_sign and value > 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_date(value: Optional[date]) -> str:
    """Format a date as YYYY-MM-DD, or '-' when missing."""
    if value is None:
        return "-"
    return value.isoformat()
