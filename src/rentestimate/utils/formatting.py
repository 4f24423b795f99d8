"""
Price Formatting Utilities

Formats monthly rents for human-readable output.
"""

from typing import Optional, Union


def format_rent(price: Union[int, float, None]) -> str:
    """Format a monthly rent in pounds.

    Example:
        >>> format_rent(1480)
        '£1,480 pcm'
    """
    if price is None:
        return "-"
    return f"£{int(round(price)):,} pcm"


def format_rent_range(low: Optional[float], high: Optional[float]) -> str:
    """Format a rent range.

    Example:
        >>> format_rent_range(1270, 1690)
        '£1,270 - £1,690 pcm'
    """
    if low is None and high is None:
        return "-"
    if low is None:
        return format_rent(high)
    if high is None or low == high:
        return format_rent(low)
    return f"£{int(round(low)):,} - £{int(round(high)):,} pcm"
