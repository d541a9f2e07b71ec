"""Deterministic slice colors shared by the pie and donut charts."""

from __future__ import annotations

DEFAULT_PALETTE: tuple[str, ...] = (
    "#ffc65d",
    "#ff6384",
    "#36a2eb",
    "#f6db19",
    "#9ad0f5",
    "#ff9f40",
)


def color_for(index: int, palette: tuple[str, ...] = DEFAULT_PALETTE) -> str:
    """Color for the slice at ``index``; keyed by position, never by title."""
    if not palette:
        raise ValueError("palette must contain at least one color")
    return palette[index % len(palette)]


def colors_for(count: int, palette: tuple[str, ...] = DEFAULT_PALETTE) -> list[str]:
    return [color_for(i, palette) for i in range(count)]
