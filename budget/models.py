"""
Budget data model and error taxonomy.

BudgetItem is frozen: the cache hands the same tuple of items to every
consumer, so nothing downstream may mutate it.

Errors:
    TransportError      : network or HTTP status failure talking upstream
    ParseError          : payload decoded but its shape is not recognized
    SurfaceUnavailable  : rendering target not mounted yet (retried, never shown)

A zero budget total is not an error; the donut layout falls back to equal
angles for it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class BudgetItem:
    """One labeled amount from the upstream budget."""

    title: str
    budget: float

    @property
    def magnitude(self) -> float:
        """Absolute value used for slice sizing."""
        return abs(self.budget)

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "budget": self.budget}


class CacheState(str, enum.Enum):
    EMPTY = "empty"
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class BudgetError(Exception):
    """Base class for budget data and rendering errors."""


class TransportError(BudgetError):
    """The upstream request failed (connection, timeout or HTTP status)."""

    def __init__(self, message: str, url: str = "", status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(BudgetError):
    """The upstream payload could not be read as a budget list."""


class SurfaceUnavailable(BudgetError):
    """The drawing surface is not attached yet."""
