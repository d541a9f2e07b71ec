"""Shared utilities for the budget charts service."""

# String utilities
from utils.strings import safe_float, normalize_whitespace

# HTTP utilities
from utils.http import (
    RetryStrategy,
    SessionManager,
    TimeoutManager,
)

# Output formatting
from utils.formatting import (
    format_value,
    format_label,
)

# Configuration
from utils.config import AppConfig

__all__ = [
    # Strings
    "safe_float",
    "normalize_whitespace",
    # HTTP
    "RetryStrategy",
    "SessionManager",
    "TimeoutManager",
    # Formatting
    "format_value",
    "format_label",
    # Config
    "AppConfig",
]
