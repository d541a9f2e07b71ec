"""
Donut chart layout: slice angles, leader lines and label placement.

The engine is pure.  It takes the item list and a viewport size and returns
a complete DonutGeometry; a resize is simply another ``layout()`` call with
the same items.  Geometry is always rebuilt in full so the slices stay a
contiguous partition of the circle.

Conventions:
    - Angles are radians, 0 at twelve o'clock, increasing clockwise.
    - Points are relative to the chart center, SVG axes (y grows downward).
    - R = min(width, height) / 2; the ring spans 0.5R..0.8R, leader lines
      bend at 0.9R.

Label flow:
    A slice whose mid-angle is < π sits on the right half: its leader runs
    right and its text is start-anchored.  Otherwise the leader runs left and
    the text is end-anchored, so text never grows toward the ring.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, NamedTuple, Sequence

from budget.models import BudgetItem
from charts.palette import DEFAULT_PALETTE, color_for
from utils.formatting import format_label

TAU = 2 * math.pi

OUTER_RADIUS_FRACTION = 0.8
INNER_RADIUS_FRACTION = 0.5
BEND_RADIUS_FRACTION = 0.9
LEADER_OFFSET_FRACTION = 0.1   # horizontal run after the bend
LABEL_GAP_FRACTION = 0.02      # space between leader end and text


class Point(NamedTuple):
    x: float
    y: float


def polar(angle: float, radius: float) -> Point:
    """Point at ``angle`` (clockwise from twelve o'clock) and ``radius``."""
    return Point(radius * math.sin(angle), -radius * math.cos(angle))


# ── Data structures ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ArcSlice:
    item: BudgetItem
    index: int
    start_angle: float
    end_angle: float
    color: str

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def mid_angle(self) -> float:
        return self.start_angle + (self.end_angle - self.start_angle) / 2

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "title": self.item.title,
            "budget": self.item.budget,
            "start_angle": self.start_angle,
            "end_angle": self.end_angle,
            "color": self.color,
        }


@dataclass(frozen=True)
class LabelPlacement:
    text: str
    anchor_point: Point
    text_anchor: str                                # "start" | "end"
    leader_polyline: tuple[Point, Point, Point]     # centroid, bend, terminal

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "anchor_point": list(self.anchor_point),
            "text_anchor": self.text_anchor,
            "leader_polyline": [list(p) for p in self.leader_polyline],
        }


@dataclass(frozen=True)
class DonutGeometry:
    width: float
    height: float
    outer_radius: float
    inner_radius: float
    slices: tuple[ArcSlice, ...] = ()
    labels: tuple[LabelPlacement, ...] = ()

    @property
    def center(self) -> Point:
        return Point(self.width / 2, self.height / 2)

    @property
    def is_empty(self) -> bool:
        return not self.slices

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "center": list(self.center),
            "outer_radius": self.outer_radius,
            "inner_radius": self.inner_radius,
            "slices": [s.to_dict() for s in self.slices],
            "labels": [lbl.to_dict() for lbl in self.labels],
        }


# ── Angle partition ───────────────────────────────────────────────────────────


def _magnitude(item: BudgetItem) -> float:
    m = abs(item.budget)
    return m if math.isfinite(m) else 0.0


def slice_bounds(items: Sequence[BudgetItem]) -> list[tuple[float, float]]:
    """(start, end) angle per item, a contiguous partition of [0, 2π].

    Slices are proportional to |budget|.  When every budget is zero each
    slice gets 2π/n.  The last slice takes whatever angle is left so the
    partition closes exactly at 2π.

    Magnitudes are scaled by the largest one before summing, so budgets
    near the float limit cannot overflow the total.
    """
    n = len(items)
    if n == 0:
        return []
    magnitudes = [_magnitude(item) for item in items]
    largest = max(magnitudes)
    if largest > 0:
        magnitudes = [m / largest for m in magnitudes]
    total = math.fsum(magnitudes)

    bounds: list[tuple[float, float]] = []
    cumulative = 0.0
    for i, m in enumerate(magnitudes):
        if i == n - 1:
            end = TAU
        else:
            span = TAU / n if total == 0 else TAU * m / total
            end = min(cumulative + span, TAU)
        bounds.append((cumulative, end))
        cumulative = end
    return bounds


# ── Engine ────────────────────────────────────────────────────────────────────


class DonutLayoutEngine:
    """Computes donut geometry from items and a viewport size."""

    def __init__(
        self,
        palette: tuple[str, ...] = DEFAULT_PALETTE,
        outer_fraction: float = OUTER_RADIUS_FRACTION,
        inner_fraction: float = INNER_RADIUS_FRACTION,
        bend_fraction: float = BEND_RADIUS_FRACTION,
        leader_offset_fraction: float = LEADER_OFFSET_FRACTION,
        label_gap_fraction: float = LABEL_GAP_FRACTION,
    ) -> None:
        if not 0 < inner_fraction < outer_fraction:
            raise ValueError("inner_fraction must be positive and below outer_fraction")
        self.palette = palette
        self.outer_fraction = outer_fraction
        self.inner_fraction = inner_fraction
        self.bend_fraction = bend_fraction
        self.leader_offset_fraction = leader_offset_fraction
        self.label_gap_fraction = label_gap_fraction

    def layout(
        self,
        items: Sequence[BudgetItem],
        viewport_width: float,
        viewport_height: float,
    ) -> DonutGeometry:
        """Build slices and label placements for one layout pass.

        Raises:
            ValueError: if either viewport dimension is not a positive number.
        """
        for name, value in (("viewport_width", viewport_width),
                            ("viewport_height", viewport_height)):
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be a positive number, got {value!r}")

        radius = min(viewport_width, viewport_height) / 2
        outer_r = radius * self.outer_fraction
        inner_r = radius * self.inner_fraction

        slices = tuple(
            ArcSlice(
                item=item,
                index=i,
                start_angle=start,
                end_angle=end,
                color=color_for(i, self.palette),
            )
            for i, (item, (start, end)) in enumerate(zip(items, slice_bounds(items)))
        )
        labels = tuple(self._place_label(s, radius, inner_r, outer_r) for s in slices)

        return DonutGeometry(
            width=float(viewport_width),
            height=float(viewport_height),
            outer_radius=outer_r,
            inner_radius=inner_r,
            slices=slices,
            labels=labels,
        )

    def _place_label(
        self,
        arc: ArcSlice,
        radius: float,
        inner_r: float,
        outer_r: float,
    ) -> LabelPlacement:
        mid = arc.mid_angle
        right = mid < math.pi
        sign = 1.0 if right else -1.0

        centroid = polar(mid, (inner_r + outer_r) / 2)
        bend = polar(mid, radius * self.bend_fraction)
        terminal = Point(bend.x + sign * radius * self.leader_offset_fraction, bend.y)
        anchor = Point(terminal.x + sign * radius * self.label_gap_fraction, terminal.y)

        return LabelPlacement(
            text=format_label(arc.item.title, arc.item.budget),
            anchor_point=anchor,
            text_anchor="start" if right else "end",
            leader_polyline=(centroid, bend, terminal),
        )
