"""
Chart payload endpoints.

    GET /api/v1/charts/pie      → {labels, values, colors} for the pie renderer
    GET /api/v1/charts/donut    → donut geometry for a viewport (?width=&height=)

Each call recomputes the payload in full from the cached items; a resized
viewport is just another request with new dimensions.
"""

from fastapi import APIRouter, Depends
from fastapi import Query as FQuery

from api.dependencies import get_cache, get_config, get_engine
from api.models import DonutGeometryOut, PieChartOut
from budget.cache import BudgetCache
from charts.donut import DonutLayoutEngine
from charts.pie import build_pie_data
from utils.config import AppConfig

router = APIRouter(prefix="/charts", tags=["charts"])


@router.get("/pie", response_model=PieChartOut, summary="Pie chart data")
async def pie_chart(
    cache: BudgetCache = Depends(get_cache),
    engine: DonutLayoutEngine = Depends(get_engine),
) -> PieChartOut:
    items = await cache.fetch_or_get()
    return PieChartOut(**build_pie_data(items, engine.palette).to_dict())


@router.get("/donut", response_model=DonutGeometryOut, summary="Donut chart geometry")
async def donut_chart(
    width: float | None = FQuery(None, gt=0, le=10_000, description="Viewport width in px"),
    height: float | None = FQuery(None, gt=0, le=10_000, description="Viewport height in px"),
    cache: BudgetCache = Depends(get_cache),
    engine: DonutLayoutEngine = Depends(get_engine),
    cfg: AppConfig = Depends(get_config),
) -> DonutGeometryOut:
    """Slices, leader lines and label anchors for the given viewport.

    Points are relative to ``center``; angles are radians clockwise from
    twelve o'clock.
    """
    items = await cache.fetch_or_get()
    geometry = engine.layout(items, width or cfg.chart_width, height or cfg.chart_height)
    return DonutGeometryOut.from_geometry(geometry)
