"""
Payload normalization for the upstream budget endpoint.

The endpoint returns either ``{"myBudget": [...]}`` or a bare list.  Entries
are coerced rather than validated: a missing budget becomes 0 and a missing
title becomes "", so the number of slices and labels always matches the
number of entries the server sent.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from budget.models import BudgetItem, ParseError
from utils.strings import normalize_whitespace, safe_float

WRAPPER_FIELD = "myBudget"


def extract_items(payload: Any) -> list[Any]:
    """Return the raw entry list from a decoded payload.

    Raises:
        ParseError: if the payload is neither a list nor a mapping holding a
            list under ``myBudget``.
    """
    if isinstance(payload, Mapping):
        wrapped = payload.get(WRAPPER_FIELD)
        if isinstance(wrapped, list):
            return wrapped
        raise ParseError(
            f"Expected a list under '{WRAPPER_FIELD}', got {type(wrapped).__name__}"
        )
    if isinstance(payload, list):
        return payload
    raise ParseError(f"Unrecognized budget payload of type {type(payload).__name__}")


def coerce_item(raw: Any) -> BudgetItem:
    """Coerce one raw entry into a BudgetItem, never failing."""
    if not isinstance(raw, Mapping):
        return BudgetItem(title="", budget=0.0)
    title = raw.get("title")
    title = "" if title is None else normalize_whitespace(str(title))
    return BudgetItem(title=title, budget=safe_float(raw.get("budget"), 0.0))


def normalize_payload(payload: Any) -> tuple[BudgetItem, ...]:
    """Decoded JSON payload -> immutable, ordered tuple of BudgetItem."""
    return tuple(coerce_item(raw) for raw in extract_items(payload))
