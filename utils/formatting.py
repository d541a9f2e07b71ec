"""Output formatting utilities for budget charts.

Provides reusable functions for:
- Formatting budget values for chart labels
- Building the "title (value)" label text shared by both charts
"""

from typing import Optional


def format_value(value: Optional[float], precision: int = 2) -> str:
    """Format a budget value for display inside a label.

    Whole numbers are shown without a decimal point; other values are
    rounded to ``precision`` places with trailing zeros stripped, so the
    same input always yields the same text.

    Args:
        value: Budget value (can be None, zero or negative)
        precision: Maximum decimal places (default: 2)

    Returns:
        Formatted string like "1200", "12.5" or "-40"

    Examples:
        format_value(1200.0) -> "1200"
        format_value(12.5) -> "12.5"
        format_value(None) -> "0"
    """
    if value is None:
        return "0"
    rounded = round(float(value), precision)
    if rounded == int(rounded):
        # avoids "-0" for tiny negatives rounded to zero
        return str(int(rounded)) if rounded != 0 else "0"
    return f"{rounded:.{precision}f}".rstrip("0").rstrip(".")


def format_label(title: str, value: Optional[float]) -> str:
    """Build the label text for a chart slice: title, then value in parentheses.

    Examples:
        format_label("Rent", 1200) -> "Rent (1200)"
        format_label("", 0) -> " (0)"
    """
    return f"{title} ({format_value(value)})"
