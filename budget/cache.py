"""
Process-wide budget cache with single-flight fetching.

State machine::

    EMPTY ──fetch──▶ PENDING ──ok──▶ READY
      ▲                 │
      │                 └──error──▶ FAILED ──fetch──▶ PENDING
      └──────────── invalidate() (from any state)

While PENDING, every caller awaits the same future, so the transport is
called once per epoch no matter how many callers arrive.  Waiters are
shielded: a caller that gets cancelled (e.g. a view torn down mid-fetch)
does not cancel the fetch other callers depend on.

invalidate() starts a new epoch.  A fetch still running from the previous
epoch finishes, resolves its own waiters, and fills READY only if nothing
newer has been issued since.  A fetch issued after invalidate() is
independent of the stale one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from budget.models import BudgetError, BudgetItem, CacheState, TransportError
from budget.normalize import normalize_payload
from budget.transport import BudgetTransport

logger = logging.getLogger(__name__)


def _retrieve_exception(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()


class BudgetCache:
    """Owns the canonical list of budget items for the process lifetime."""

    def __init__(self, transport: BudgetTransport, endpoint: str) -> None:
        self._transport = transport
        self.endpoint = endpoint

        self._state = CacheState.EMPTY
        self._items: tuple[BudgetItem, ...] | None = None
        self._error: BudgetError | None = None
        self._inflight: asyncio.Future | None = None
        self._task: asyncio.Task | None = None
        self._epoch = 0

        self._fetch_count = 0
        self._hits = 0
        self._failures = 0

    # ── accessors ─────────────────────────────────────────────────────────

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def cached(self) -> tuple[BudgetItem, ...] | None:
        """The READY items, or None.  Never touches the network."""
        return self._items if self._state is CacheState.READY else None

    @property
    def last_error(self) -> BudgetError | None:
        return self._error if self._state is CacheState.FAILED else None

    async def fetch_or_get(self) -> tuple[BudgetItem, ...]:
        """Return the cached items, joining or starting the upstream fetch.

        Raises:
            TransportError: upstream request failed.
            ParseError: upstream payload shape not recognized.
        """
        if self._state is CacheState.READY and self._items is not None:
            self._hits += 1
            return self._items

        if self._state is CacheState.PENDING and self._inflight is not None:
            future = self._inflight
        else:
            future = self._start_fetch()
        return await asyncio.shield(future)

    def invalidate(self) -> None:
        """Reset to EMPTY and begin a new epoch."""
        if self._state is CacheState.PENDING:
            logger.info("budget cache invalidated while epoch %d fetch pending", self._epoch)
        self._epoch += 1
        self._state = CacheState.EMPTY
        self._items = None
        self._error = None
        self._inflight = None

    def stats(self) -> dict[str, Any]:
        return {
            "state": self._state.value,
            "epoch": self._epoch,
            "items": len(self._items) if self.cached is not None else 0,
            "fetch_count": self._fetch_count,
            "hits": self._hits,
            "failures": self._failures,
        }

    # ── fetch lifecycle ───────────────────────────────────────────────────

    def _start_fetch(self) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        # a failure nobody is left waiting on is still recorded in last_error
        future.add_done_callback(_retrieve_exception)
        epoch = self._epoch

        self._state = CacheState.PENDING
        self._inflight = future
        self._error = None
        self._fetch_count += 1
        logger.info("fetching budget from %s (epoch %d)", self.endpoint, epoch)

        self._task = loop.create_task(self._run_fetch(future, epoch))
        return future

    async def _run_fetch(self, future: asyncio.Future, epoch: int) -> None:
        try:
            payload = await self._transport.get_json(self.endpoint)
            items = normalize_payload(payload)
        except asyncio.CancelledError:
            if self._epoch == epoch and self._inflight is future:
                self._state = CacheState.EMPTY
                self._inflight = None
            if not future.done():
                future.cancel()
            raise
        except BudgetError as exc:
            self._fail(future, epoch, exc)
            return
        except Exception as exc:
            error = TransportError(f"GET {self.endpoint} failed: {exc}", url=self.endpoint)
            error.__cause__ = exc
            self._fail(future, epoch, error)
            return

        if self._epoch == epoch:
            self._state = CacheState.READY
            self._items = items
            self._inflight = None
        elif self._state is CacheState.EMPTY:
            # invalidated mid-flight and nothing newer issued
            self._state = CacheState.READY
            self._items = items
        logger.info("budget fetch (epoch %d) returned %d items", epoch, len(items))
        if not future.done():
            future.set_result(items)

    def _fail(self, future: asyncio.Future, epoch: int, error: BudgetError) -> None:
        self._failures += 1
        if self._epoch == epoch:
            self._state = CacheState.FAILED
            self._error = error
            self._inflight = None
        logger.warning("budget fetch (epoch %d) failed: %s", epoch, error)
        if not future.done():
            future.set_exception(error)
