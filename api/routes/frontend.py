"""
Frontend HTML routes.

Routes:
    GET /                   → index.html (Chart.js pie + inline SVG donut)
    GET /charts/donut.svg   → standalone SVG donut for a viewport size

Both go through BudgetChartsView so the page and the SVG endpoint share the
same fetch, layout and draw path.  The homepage degrades to "chart absent"
when upstream data is unavailable; the SVG endpoint reports the error.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi import Query as FQuery
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from api.dependencies import get_cache, get_config, get_engine
from budget.cache import BudgetCache
from charts.donut import DonutLayoutEngine
from charts.pie import ChartJsPieRenderer
from charts.surface import SvgSurface
from charts.view import BudgetChartsView
from utils.config import AppConfig

logger = logging.getLogger(__name__)

router = APIRouter(tags=["frontend"])

_templates: Jinja2Templates | None = None


def set_templates(t: Jinja2Templates) -> None:
    global _templates
    _templates = t


def _tmpl() -> Jinja2Templates:
    if _templates is None:
        raise RuntimeError("Templates not initialised; call set_templates() first")
    return _templates


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(
    request: Request,
    width: float | None = FQuery(None, gt=0, le=10_000),
    height: float | None = FQuery(None, gt=0, le=10_000),
    cache: BudgetCache = Depends(get_cache),
    engine: DonutLayoutEngine = Depends(get_engine),
    cfg: AppConfig = Depends(get_config),
):
    """Render the homepage with both budget charts."""
    width = width or cfg.chart_width
    height = height or cfg.chart_height
    pie = ChartJsPieRenderer()
    surface = SvgSurface(width, height)
    view = BudgetChartsView(cache, engine, surface, pie_renderer=pie,
                            max_render_attempts=cfg.render_max_attempts)
    try:
        await view.mount()
        context = {
            "pie_config": pie.config,
            "donut_svg": surface.to_svg() if view.geometry is not None else "",
            "item_count": len(view.items or ()),
            "error": str(view.error) if view.error is not None else None,
            "width": width,
            "height": height,
        }
    finally:
        view.teardown()
    return _tmpl().TemplateResponse(request, "index.html", context)


@router.get("/charts/donut.svg", include_in_schema=False)
async def donut_svg(
    width: float | None = FQuery(None, gt=0, le=10_000),
    height: float | None = FQuery(None, gt=0, le=10_000),
    cache: BudgetCache = Depends(get_cache),
    engine: DonutLayoutEngine = Depends(get_engine),
    cfg: AppConfig = Depends(get_config),
):
    """Standalone SVG donut; the homepage re-requests it on resize."""
    surface = SvgSurface(width or cfg.chart_width, height or cfg.chart_height)
    view = BudgetChartsView(cache, engine, surface,
                            max_render_attempts=cfg.render_max_attempts)
    try:
        await view.mount()
    finally:
        view.teardown()
    if view.error is not None:
        raise view.error
    return Response(
        content=surface.to_svg(),
        media_type="image/svg+xml",
        headers={"Cache-Control": "no-cache"},
    )
