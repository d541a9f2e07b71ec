"""SVG path data for donut slices.

Paths are expressed relative to the chart center; the surface places them
inside a group translated to the center.
"""

from __future__ import annotations

import math

from charts.donut import TAU, ArcSlice, polar

_FULL_CIRCLE_EPS = 1e-9


def _fmt(p) -> str:
    return f"{p.x:.3f},{p.y:.3f}"


def annular_sector_path(start: float, end: float, inner_r: float, outer_r: float) -> str:
    """Closed path for the ring segment between two angles."""
    span = end - start
    if span >= TAU - _FULL_CIRCLE_EPS:
        return full_ring_path(inner_r, outer_r, start)

    large = 1 if span > math.pi else 0
    o0, o1 = polar(start, outer_r), polar(end, outer_r)
    i0, i1 = polar(end, inner_r), polar(start, inner_r)
    return " ".join([
        f"M {_fmt(o0)}",
        f"A {outer_r:.3f},{outer_r:.3f} 0 {large} 1 {_fmt(o1)}",
        f"L {_fmt(i0)}",
        f"A {inner_r:.3f},{inner_r:.3f} 0 {large} 0 {_fmt(i1)}",
        "Z",
    ])


def full_ring_path(inner_r: float, outer_r: float, start: float = 0.0) -> str:
    """A complete ring as two half arcs per rim.

    A single SVG arc whose end point equals its start point draws nothing,
    so each rim is split at the opposite side.  The inner rim runs the other
    way, which leaves the hole unfilled under the nonzero fill rule.
    """
    half = start + math.pi
    o0, o1 = polar(start, outer_r), polar(half, outer_r)
    i0, i1 = polar(start, inner_r), polar(half, inner_r)
    return " ".join([
        f"M {_fmt(o0)}",
        f"A {outer_r:.3f},{outer_r:.3f} 0 0 1 {_fmt(o1)}",
        f"A {outer_r:.3f},{outer_r:.3f} 0 0 1 {_fmt(o0)}",
        f"M {_fmt(i0)}",
        f"A {inner_r:.3f},{inner_r:.3f} 0 0 0 {_fmt(i1)}",
        f"A {inner_r:.3f},{inner_r:.3f} 0 0 0 {_fmt(i0)}",
        "Z",
    ])


def slice_path(arc: ArcSlice, inner_r: float, outer_r: float) -> str:
    return annular_sector_path(arc.start_angle, arc.end_angle, inner_r, outer_r)


def polyline_points(points) -> list[tuple[float, float]]:
    return [(round(p.x, 3), round(p.y, 3)) for p in points]
