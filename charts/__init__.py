"""
Chart layout and rendering for the budget homepage.

Re-exports key entry points so callers can do::

    from charts import DonutLayoutEngine, BudgetChartsView, SvgSurface
"""

from charts.palette import DEFAULT_PALETTE, color_for, colors_for
from charts.donut import (
    ArcSlice,
    DonutGeometry,
    DonutLayoutEngine,
    LabelPlacement,
    Point,
    slice_bounds,
)
from charts.pie import ChartJsPieRenderer, PieChartData, PieRenderer, build_pie_data
from charts.surface import DrawingSurface, SvgSurface, render_when_ready
from charts.view import BudgetChartsView, ResizeEmitter, ResizeLease

__all__ = [
    "DEFAULT_PALETTE",
    "color_for",
    "colors_for",
    "ArcSlice",
    "DonutGeometry",
    "DonutLayoutEngine",
    "LabelPlacement",
    "Point",
    "slice_bounds",
    "ChartJsPieRenderer",
    "PieChartData",
    "PieRenderer",
    "build_pie_data",
    "DrawingSurface",
    "SvgSurface",
    "render_when_ready",
    "BudgetChartsView",
    "ResizeEmitter",
    "ResizeLease",
]
