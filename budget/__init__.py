"""
Budget data access: the item model, payload normalization, the upstream
transport, and the process-wide single-flight cache.

Re-exports key entry points so callers can do::

    from budget import BudgetCache, BudgetItem, RequestsTransport
"""

from budget.models import (
    BudgetItem,
    CacheState,
    BudgetError,
    TransportError,
    ParseError,
    SurfaceUnavailable,
)
from budget.normalize import extract_items, coerce_item, normalize_payload
from budget.transport import BudgetTransport, RequestsTransport
from budget.cache import BudgetCache

__all__ = [
    "BudgetItem",
    "CacheState",
    "BudgetError",
    "TransportError",
    "ParseError",
    "SurfaceUnavailable",
    "extract_items",
    "coerce_item",
    "normalize_payload",
    "BudgetTransport",
    "RequestsTransport",
    "BudgetCache",
]
