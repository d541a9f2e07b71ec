"""
Budget charts view: wires the cache to the pie renderer and the donut surface.

Lifecycle::

    view = BudgetChartsView(cache, engine, surface, pie_renderer, resize_source)
    await view.mount()          # fetch (or reuse) data, draw both charts
    view.on_resize(800, 500)    # explicit viewport change → full relayout
    view.teardown()             # release resize lease once, destroy pie

Teardown detaches the view from a fetch that is still pending but never
cancels it; other views may be waiting on the same fetch.  Data errors are
logged and leave the charts absent.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Callable, Protocol

from budget.cache import BudgetCache
from budget.models import BudgetError, BudgetItem, SurfaceUnavailable
from charts.donut import DonutGeometry, DonutLayoutEngine
from charts.pie import PieChartData, PieRenderer, build_pie_data
from charts.surface import DrawingSurface, render_when_ready

logger = logging.getLogger(__name__)

ResizeCallback = Callable[[float, float], None]


# ── Resize observation ────────────────────────────────────────────────────────


class Subscription(Protocol):
    def disconnect(self) -> None: ...


class ResizeSource(Protocol):
    def subscribe(self, callback: ResizeCallback) -> Subscription: ...


class ResizeLease:
    """One resize subscription, disconnected exactly once.

    Usable as a context manager; ``release()`` is idempotent.
    """

    def __init__(self, source: ResizeSource, callback: ResizeCallback) -> None:
        self._subscription: Subscription | None = source.subscribe(callback)

    @property
    def active(self) -> bool:
        return self._subscription is not None

    def release(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.disconnect()

    def __enter__(self) -> "ResizeLease":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()


class _EmitterSubscription:
    def __init__(self, emitter: "ResizeEmitter", callback: ResizeCallback) -> None:
        self._emitter = emitter
        self._callback = callback
        self.disconnect_count = 0

    def disconnect(self) -> None:
        self.disconnect_count += 1
        self._emitter._remove(self._callback)


class ResizeEmitter:
    """In-process resize source: callers push viewport sizes with ``emit``."""

    def __init__(self) -> None:
        self._callbacks: list[ResizeCallback] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: ResizeCallback) -> _EmitterSubscription:
        self._callbacks.append(callback)
        return _EmitterSubscription(self, callback)

    def _remove(self, callback: ResizeCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def emit(self, width: float, height: float) -> None:
        for callback in list(self._callbacks):
            callback(width, height)


# ── View ──────────────────────────────────────────────────────────────────────


class BudgetChartsView:
    """Owns one pie + donut pair bound to the shared budget cache."""

    def __init__(
        self,
        cache: BudgetCache,
        engine: DonutLayoutEngine,
        surface: DrawingSurface,
        pie_renderer: PieRenderer | None = None,
        resize_source: ResizeSource | None = None,
        max_render_attempts: int = 5,
    ) -> None:
        self._cache = cache
        self._engine = engine
        self._surface = surface
        self._pie = pie_renderer
        self._resize_source = resize_source
        self._max_render_attempts = max_render_attempts

        self._generation = 0
        self._mounted = False
        self._items: tuple[BudgetItem, ...] | None = None
        self._lease: ResizeLease | None = None
        self._mounting: asyncio.Future | None = None
        self.geometry: DonutGeometry | None = None
        self.pie_data: PieChartData | None = None
        self.error: BudgetError | None = None

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def items(self) -> tuple[BudgetItem, ...] | None:
        return self._items

    async def mount(self) -> bool:
        """Fetch data and draw both charts.  Returns True if the donut was drawn.

        A second call while the first is still waiting on data resolves with
        the first call's result.
        """
        if self._mounted:
            if self._mounting is not None:
                return await asyncio.shield(self._mounting)
            return self.geometry is not None
        self._mounted = True
        mounting = asyncio.get_running_loop().create_future()
        self._mounting = mounting
        drawn = False
        try:
            drawn = await self._mount()
        finally:
            if self._mounting is mounting:
                self._mounting = None
            if not mounting.done():
                mounting.set_result(drawn)
        return drawn

    async def _mount(self) -> bool:
        generation = self._generation
        self.error = None

        try:
            items = await self._cache.fetch_or_get()
        except BudgetError as exc:
            logger.warning("budget data unavailable, charts not drawn: %s", exc)
            self.error = exc
            self._mounted = False
            return False

        if generation != self._generation:
            # torn down while the fetch was pending
            return False

        self._items = items
        self.pie_data = build_pie_data(items, self._engine.palette)
        if self._pie is not None:
            self._pie.render(self.pie_data)

        self.geometry = await render_when_ready(
            self._surface, self._layout, self._max_render_attempts,
        )
        if generation != self._generation:
            return False

        if self._resize_source is not None and self._lease is None:
            self._lease = ResizeLease(self._resize_source, self.on_resize)
        return self.geometry is not None

    def _layout(self, width: float, height: float) -> DonutGeometry:
        return self._engine.layout(self._items or (), width, height)

    def on_resize(self, width: float, height: float) -> None:
        """Relayout the retained items for a new viewport and redraw."""
        if not self._mounted or self._items is None:
            return
        if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
            logger.debug("ignoring resize to unusable viewport %sx%s", width, height)
            return
        try:
            geometry = self._layout(width, height)
        except (ValueError, ArithmeticError) as exc:
            logger.warning("donut relayout failed, keeping previous chart: %s", exc)
            return
        try:
            self._surface.draw(geometry)
        except SurfaceUnavailable:
            logger.debug("surface detached, resize redraw skipped")
            return
        self.geometry = geometry

    def teardown(self) -> None:
        """Detach from data updates, release the resize lease, destroy the pie."""
        if not self._mounted:
            return
        self._mounted = False
        self._generation += 1
        if self._lease is not None:
            self._lease.release()
            self._lease = None
        if self._pie is not None:
            self._pie.destroy()

