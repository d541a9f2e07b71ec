"""
FastAPI application factory.

Usage:
    python -m api.app                                   # Dev server on port 8000
    BUDGET_ENDPOINT=http://host:3000/budget python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

The service is read-only: it fetches the budget once from the upstream
endpoint (BUDGET_ENDPOINT), caches it for the life of the process, and
serves it as raw items, pie chart data, donut geometry, an SVG donut, and a
homepage showing both charts.

Logging: one stream handler on the root logger; APP_LOG_FORMAT=json switches
to newline-delimited JSON with request fields merged in.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

import api.dependencies as deps
from api.routes import budget as budget_routes
from api.routes import charts as chart_routes
from api.routes import frontend as frontend_routes
from api.models import HealthOut
from budget.cache import BudgetCache
from budget.models import ParseError, TransportError

_cfg = deps.get_config()

# ── Structured JSON logging ───────────────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


_logger = logging.getLogger("budget_charts_api")
_handler = logging.StreamHandler()
if _cfg.log_format == "json":
    _handler.setFormatter(_JsonFormatter())
else:
    _handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
logging.basicConfig(handlers=[_handler], level=logging.INFO, force=True)


def _error_body(error: str, detail: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": detail, "status_code": status_code},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the upstream HTTP session on shutdown."""
    yield
    transport = getattr(deps.get_cache(), "_transport", None)
    close = getattr(transport, "close", None)
    if callable(close):
        close()


def create_app(cache: BudgetCache | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        cache: Override the shared budget cache (useful for testing).

    Returns:
        Configured FastAPI application instance.
    """
    if cache is not None:
        deps.set_cache(cache)

    app = FastAPI(
        title="Personal Budget Charts",
        summary="Read-only budget data with pie and donut chart payloads.",
        description=(
            "Fetches a categorized budget from the upstream endpoint once per "
            "process and serves it to both charts.\n\n"
            "- **Angles** are radians, clockwise from twelve o'clock.\n"
            "- **Points** in donut geometry are relative to `center`.\n"
            "- Upstream failures return `502`; the next request retries."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "budget", "description": "Cached budget items."},
            {"name": "charts", "description": "Pie data and donut geometry."},
            {"name": "meta", "description": "Health check."},
        ],
    )

    # ── CORS middleware ───────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request with its duration and tag it with a request ID."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if _cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f rid=%s",
                request.method, request.url.path, response.status_code,
                duration_ms, request_id,
            )
        return response

    # ── Content Security Policy + security headers ───────────────────────────

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        # Chart.js comes from the jsDelivr CDN; the homepage has one inline script.
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' cdn.jsdelivr.net 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "connect-src 'self';"
        )
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of HTML traceback."""
        _logger.exception("unhandled error on %s", request.url.path)
        return _error_body("Internal server error", str(exc), 500)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error_body("Bad request", str(exc), 400)

    @app.exception_handler(TransportError)
    async def transport_error_handler(request: Request, exc: TransportError):
        return _error_body("Bad gateway", str(exc), 502)

    @app.exception_handler(ParseError)
    async def parse_error_handler(request: Request, exc: ParseError):
        return _error_body("Bad gateway", f"Unrecognized budget payload: {exc}", 502)

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", response_model=HealthOut, tags=["meta"], summary="Health check")
    def health():
        """Report cache state.  Always 200: missing data only means absent charts."""
        budget_cache = deps.get_cache()
        return {
            "status": "ok",
            "endpoint": budget_cache.endpoint,
            "cache": budget_cache.stats(),
        }

    # ── Register routers ──────────────────────────────────────────────────────

    prefix = "/api/v1"
    app.include_router(budget_routes.router, prefix=prefix)
    app.include_router(chart_routes.router, prefix=prefix)

    # ── Static files + Jinja2 templates ───────────────────────────────────────
    _here = Path(__file__).parent.parent  # project root

    static_dir = _here / "static"
    templates_dir = _here / "templates"

    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    if templates_dir.exists():
        templates = Jinja2Templates(directory=str(templates_dir))
        frontend_routes.set_templates(templates)
        app.include_router(frontend_routes.router)

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
