"""
Tests for charts/view.py — mount, resize, teardown and the resize lease.
"""
import asyncio
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from budget.models import CacheState, TransportError
from charts.donut import DonutLayoutEngine
from charts.surface import SvgSurface
from charts.view import BudgetChartsView, ResizeEmitter, ResizeLease


class RecordingPie:
    def __init__(self):
        self.rendered = []
        self.destroyed = 0

    def render(self, data):
        self.rendered.append(data)

    def destroy(self):
        self.destroyed += 1


class RecordingEmitter(ResizeEmitter):
    """ResizeEmitter that keeps every subscription it hands out."""

    def __init__(self):
        super().__init__()
        self.subscriptions = []

    def subscribe(self, callback):
        sub = super().subscribe(callback)
        self.subscriptions.append(sub)
        return sub


@pytest.fixture
def parts():
    return RecordingPie(), SvgSurface(600, 400), RecordingEmitter()


def _view(cache, parts, **kwargs):
    pie, surface, emitter = parts
    return BudgetChartsView(cache, DonutLayoutEngine(), surface,
                            pie_renderer=pie, resize_source=emitter, **kwargs)


# ── ResizeLease ──────────────────────────────────────────────────────────────

class TestResizeLease:
    def test_release_disconnects_once(self):
        emitter = RecordingEmitter()
        lease = ResizeLease(emitter, lambda w, h: None)
        assert lease.active
        assert emitter.subscriber_count == 1
        lease.release()
        lease.release()
        assert not lease.active
        assert emitter.subscriber_count == 0
        assert emitter.subscriptions[0].disconnect_count == 1

    def test_context_manager(self):
        emitter = RecordingEmitter()
        seen = []
        with ResizeLease(emitter, lambda w, h: seen.append((w, h))):
            emitter.emit(10, 20)
        emitter.emit(30, 40)
        assert seen == [(10, 20)]
        assert emitter.subscriptions[0].disconnect_count == 1


# ── Mount ────────────────────────────────────────────────────────────────────

class TestMount:
    @pytest.mark.asyncio
    async def test_mount_draws_both_charts(self, cache, parts):
        pie, surface, emitter = parts
        view = _view(cache, parts)
        assert await view.mount() is True
        assert view.mounted
        assert len(pie.rendered) == 1
        assert pie.rendered[0].labels == ["Rent", "Food", "Fun"]
        assert view.geometry.outer_radius == pytest.approx(160.0)
        assert surface.element_count == 9
        assert emitter.subscriber_count == 1

    @pytest.mark.asyncio
    async def test_second_mount_is_noop(self, cache, parts):
        pie, _, emitter = parts
        view = _view(cache, parts)
        await view.mount()
        await view.mount()
        assert len(pie.rendered) == 1
        assert emitter.subscriber_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_mount_waits_for_first(self, make_cache, parts):
        pie, _, emitter = parts
        gate = asyncio.Event()
        cache, fake = make_cache(gate=gate)
        view = _view(cache, parts)
        first = asyncio.create_task(view.mount())
        await asyncio.sleep(0)
        second = asyncio.create_task(view.mount())
        await asyncio.sleep(0)
        assert not second.done()

        gate.set()
        assert await first is True
        assert await second is True
        assert fake.calls == 1
        assert len(pie.rendered) == 1
        assert emitter.subscriber_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_mount_shares_failure(self, make_cache, parts):
        gate = asyncio.Event()
        cache, _ = make_cache(TransportError("down"), gate=gate)
        view = _view(cache, parts)
        first = asyncio.create_task(view.mount())
        await asyncio.sleep(0)
        second = asyncio.create_task(view.mount())
        await asyncio.sleep(0)
        gate.set()
        assert await asyncio.gather(first, second) == [False, False]
        assert not view.mounted

    @pytest.mark.asyncio
    async def test_views_share_one_fetch(self, make_cache):
        gate = asyncio.Event()
        cache, fake = make_cache(gate=gate)
        views = [
            BudgetChartsView(cache, DonutLayoutEngine(), SvgSurface(600, 400))
            for _ in range(3)
        ]
        mounting = asyncio.gather(*(v.mount() for v in views))
        await asyncio.sleep(0)
        gate.set()
        assert await mounting == [True, True, True]
        assert fake.calls == 1

    @pytest.mark.asyncio
    async def test_data_error_leaves_charts_absent(self, make_cache, parts):
        pie, surface, emitter = parts
        cache, _ = make_cache(TransportError("connection refused"))
        view = _view(cache, parts)
        assert await view.mount() is False
        assert isinstance(view.error, TransportError)
        assert not view.mounted
        assert pie.rendered == []
        assert surface.draw_count == 0
        assert emitter.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_remount_after_error_retries(self, make_cache, sample_payload, parts):
        cache, fake = make_cache(TransportError("down"), sample_payload)
        view = _view(cache, parts)
        assert await view.mount() is False
        assert await view.mount() is True
        assert view.error is None
        assert fake.calls == 2

    @pytest.mark.asyncio
    async def test_unattached_surface_gives_up(self, cache):
        pie = RecordingPie()
        view = BudgetChartsView(cache, DonutLayoutEngine(), SvgSurface(),
                                pie_renderer=pie, max_render_attempts=3)
        assert await view.mount() is False
        assert view.geometry is None
        # the pie does not depend on the donut surface
        assert len(pie.rendered) == 1


# ── Resize ───────────────────────────────────────────────────────────────────

class TestResize:
    @pytest.mark.asyncio
    async def test_resize_relayouts_same_items(self, cache, parts):
        _, surface, emitter = parts
        view = _view(cache, parts)
        await view.mount()
        before = view.geometry

        emitter.emit(1000, 800)
        after = view.geometry
        assert after.outer_radius == pytest.approx(320.0)
        assert [s.start_angle for s in after.slices] == [s.start_angle for s in before.slices]
        assert surface.draw_count == 2
        assert surface.element_count == 9

    @pytest.mark.asyncio
    async def test_resize_does_not_refetch(self, make_cache, parts):
        cache, fake = make_cache()
        _, _, emitter = parts
        view = _view(cache, parts)
        await view.mount()
        emitter.emit(900, 900)
        emitter.emit(300, 300)
        assert fake.calls == 1

    @pytest.mark.asyncio
    async def test_empty_viewport_ignored(self, cache, parts):
        _, surface, emitter = parts
        view = _view(cache, parts)
        await view.mount()
        emitter.emit(0, 400)
        assert surface.draw_count == 1
        assert view.geometry.width == 600

    @pytest.mark.parametrize("width,height", [(float("nan"), 400), (600, float("inf"))])
    @pytest.mark.asyncio
    async def test_non_finite_viewport_ignored(self, cache, parts, width, height):
        _, surface, emitter = parts
        view = _view(cache, parts)
        await view.mount()
        emitter.emit(width, height)
        assert surface.draw_count == 1
        assert view.geometry.width == 600

    @pytest.mark.asyncio
    async def test_relayout_failure_keeps_previous_chart(self, cache, parts):
        _, surface, emitter = parts
        view = _view(cache, parts)
        await view.mount()
        before = view.geometry

        def broken(items, width, height):
            raise OverflowError("intermediate overflow in fsum")

        view._engine.layout = broken
        emitter.emit(800, 800)
        assert view.geometry is before
        assert surface.draw_count == 1

    @pytest.mark.asyncio
    async def test_detached_surface_skips_redraw(self, cache, parts):
        _, surface, emitter = parts
        view = _view(cache, parts)
        await view.mount()
        surface.detach()
        emitter.emit(800, 800)
        assert view.geometry.width == 600


# ── Teardown ─────────────────────────────────────────────────────────────────

class TestTeardown:
    @pytest.mark.asyncio
    async def test_teardown_releases_lease_once(self, cache, parts):
        pie, _, emitter = parts
        view = _view(cache, parts)
        await view.mount()
        view.teardown()
        view.teardown()
        assert emitter.subscriber_count == 0
        assert emitter.subscriptions[0].disconnect_count == 1
        assert pie.destroyed == 1
        assert not view.mounted

    @pytest.mark.asyncio
    async def test_remount_cycles_release_each_lease_once(self, cache, parts):
        _, _, emitter = parts
        view = _view(cache, parts)
        for _ in range(3):
            await view.mount()
            view.teardown()
        assert len(emitter.subscriptions) == 3
        assert [s.disconnect_count for s in emitter.subscriptions] == [1, 1, 1]
        assert emitter.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_resize_after_teardown_ignored(self, cache, parts):
        _, surface, _ = parts
        view = _view(cache, parts)
        await view.mount()
        view.teardown()
        view.on_resize(800, 800)
        assert surface.draw_count == 1

    @pytest.mark.asyncio
    async def test_teardown_during_fetch_keeps_fetch_alive(self, make_cache, parts):
        pie, surface, emitter = parts
        gate = asyncio.Event()
        cache, fake = make_cache(gate=gate)
        view = _view(cache, parts)
        mounting = asyncio.create_task(view.mount())
        await asyncio.sleep(0)
        assert cache.state is CacheState.PENDING

        view.teardown()
        gate.set()
        assert await mounting is False

        assert cache.state is CacheState.READY
        assert fake.calls == 1
        assert pie.rendered == []
        assert surface.draw_count == 0
        assert emitter.subscriber_count == 0

    def test_teardown_before_mount_is_noop(self, cache, parts):
        pie, _, _ = parts
        view = _view(cache, parts)
        view.teardown()
        assert pie.destroyed == 0
