"""String processing utilities for budget payloads.

The upstream budget endpoint is hand-maintained JSON, so amounts sometimes
arrive as strings ("1,200", "$400") and titles with stray whitespace.  These
helpers turn such values into the plain float/str the data model expects.
"""

import math

from utils.patterns import WHITESPACE, CURRENCY_SYMBOLS


def safe_float(val, default: float = 0.0) -> float:
    """Safely convert value to float with fallback default.

    Handles:
    - None, empty strings -> default
    - Numeric types -> float
    - Strings with currency symbols, whitespace, commas
    - NaN / infinity -> default
    - Invalid input -> default

    Args:
        val: Value to convert (any type)
        default: Value to return on failure (default: 0.0)

    Returns:
        float: Parsed value or default
    """
    if val is None or val == '':
        return default
    # bool is an int subclass; JSON true/false is not an amount
    if isinstance(val, bool):
        return default
    if isinstance(val, (int, float)):
        result = float(val)
        return result if math.isfinite(result) else default

    try:
        s = str(val).strip()
        # Remove currency symbols and normalize whitespace
        s = CURRENCY_SYMBOLS.sub('', s)
        s = s.replace(',', '').strip()
        result = float(s) if s else default
    except (ValueError, TypeError):
        return default
    return result if math.isfinite(result) else default


def normalize_whitespace(s: str) -> str:
    """Normalize multiple whitespace characters to single spaces.

    Converts tabs, newlines, multiple spaces to single space.

    Example:
        "Car \\n  Insurance" -> "Car Insurance"
    """
    return WHITESPACE.sub(' ', s).strip()
