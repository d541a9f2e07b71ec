"""
Donut rendering surfaces.

A surface is anything that can report whether it is attached, report its
content size, and draw a DonutGeometry.  Every draw clears what the previous
pass left behind.

``render_when_ready`` handles a surface that is not attached yet: it waits
one event-loop tick per attempt and gives up quietly after ``max_attempts``,
so an absent surface means an absent chart, never an error page.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

import svgwrite

from budget.models import SurfaceUnavailable
from charts.donut import DonutGeometry
from charts.paths import polyline_points, slice_path

logger = logging.getLogger(__name__)


class DrawingSurface(Protocol):
    def is_ready(self) -> bool: ...

    def content_box(self) -> tuple[float, float]: ...

    def clear(self) -> None: ...

    def draw(self, geometry: DonutGeometry) -> None: ...


class SvgSurface:
    """Draws donut geometry into an in-memory SVG document."""

    def __init__(
        self,
        width: float | None = None,
        height: float | None = None,
        leader_color: str = "#555555",
        text_color: str = "#222222",
        font_size: int = 12,
    ) -> None:
        self._size: tuple[float, float] | None = None
        if width is not None and height is not None:
            self.attach(width, height)
        self.leader_color = leader_color
        self.text_color = text_color
        self.font_size = font_size
        self._drawing: svgwrite.Drawing | None = None
        self.draw_count = 0

    # ── mount state ───────────────────────────────────────────────────────

    def attach(self, width: float, height: float) -> None:
        self._size = (float(width), float(height))

    def detach(self) -> None:
        self._size = None
        self._drawing = None

    def is_ready(self) -> bool:
        return self._size is not None

    def content_box(self) -> tuple[float, float]:
        if self._size is None:
            raise SurfaceUnavailable("SVG surface is not attached")
        return self._size

    # ── drawing ───────────────────────────────────────────────────────────

    def clear(self) -> None:
        if self._size is None:
            self._drawing = None
            return
        width, height = self._size
        self._drawing = svgwrite.Drawing(size=(width, height), profile="full", debug=False)
        self._drawing.attribs["viewBox"] = f"0 0 {width:g} {height:g}"

    def draw(self, geometry: DonutGeometry) -> None:
        if self._size is None:
            raise SurfaceUnavailable("SVG surface is not attached")
        self.clear()
        dwg = self._drawing
        cx, cy = geometry.center
        chart = dwg.g(transform=f"translate({cx:.3f},{cy:.3f})", class_="donut")

        arcs = dwg.g(class_="slices")
        for arc in geometry.slices:
            arcs.add(dwg.path(
                d=slice_path(arc, geometry.inner_radius, geometry.outer_radius),
                fill=arc.color,
                stroke="#ffffff",
                stroke_width=1,
            ))
        chart.add(arcs)

        leaders = dwg.g(class_="leaders", fill="none", stroke=self.leader_color)
        texts = dwg.g(class_="labels", fill=self.text_color, font_size=self.font_size)
        for label in geometry.labels:
            leaders.add(dwg.polyline(points=polyline_points(label.leader_polyline)))
            texts.add(dwg.text(
                label.text,
                insert=(round(label.anchor_point.x, 3), round(label.anchor_point.y, 3)),
                text_anchor=label.text_anchor,
                dominant_baseline="middle",
            ))
        chart.add(leaders)
        chart.add(texts)

        dwg.add(chart)
        self.draw_count += 1

    @property
    def element_count(self) -> int:
        """Number of drawn shapes (paths, polylines, texts) currently held."""
        if self._drawing is None:
            return 0
        count = 0
        for chart in self._drawing.elements:
            for group in getattr(chart, "elements", []):
                count += len(getattr(group, "elements", []))
        return count

    def to_svg(self) -> str:
        if self._drawing is None:
            self.clear()
        if self._drawing is None:
            return ""
        return self._drawing.tostring()


async def render_when_ready(
    surface: DrawingSurface,
    build: Callable[[float, float], DonutGeometry],
    max_attempts: int = 5,
) -> DonutGeometry | None:
    """Lay out and draw once the surface is attached.

    ``build`` receives the surface's content size.  Each attempt that finds
    the surface unavailable waits one loop tick; after ``max_attempts`` the
    render is dropped and None is returned.  A layout that cannot be computed
    is logged and also returns None.
    """
    for attempt in range(1, max_attempts + 1):
        if surface.is_ready():
            try:
                width, height = surface.content_box()
                geometry = build(width, height)
                surface.draw(geometry)
                return geometry
            except SurfaceUnavailable:
                pass
            except (ValueError, ArithmeticError) as exc:
                logger.warning("donut layout failed, chart not drawn: %s", exc)
                return None
        logger.debug("surface unavailable, deferring draw (attempt %d/%d)",
                     attempt, max_attempts)
        await asyncio.sleep(0)
    logger.debug("surface never became available; donut not drawn")
    return None
