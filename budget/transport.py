"""
Upstream transport: an asynchronous GET that returns decoded JSON.

``RequestsTransport`` keeps the pooled, retrying ``requests`` session from
``utils.http`` and runs the blocking call in a worker thread so the event
loop stays free while the fetch is in flight.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Protocol

import requests

from budget.models import ParseError, TransportError
from utils.http import RetryStrategy, SessionManager, TimeoutManager

logger = logging.getLogger(__name__)


class BudgetTransport(Protocol):
    async def get_json(self, url: str) -> Any: ...


class RequestsTransport:
    """GET-JSON transport backed by a pooled ``requests`` session."""

    def __init__(
        self,
        session_manager: SessionManager | None = None,
        timeout_manager: TimeoutManager | None = None,
    ) -> None:
        self.session_manager = session_manager or SessionManager(RetryStrategy())
        self.timeout_manager = timeout_manager or TimeoutManager()

    def _get_json_blocking(self, url: str) -> Any:
        timeout = self.timeout_manager.get_timeout(url)
        start = time.monotonic()
        try:
            resp = self.session_manager.session.get(url, timeout=timeout)
            resp.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise TransportError(f"GET {url} returned HTTP {status}", url=url,
                                 status_code=status) from exc
        except requests.RequestException as exc:
            raise TransportError(f"GET {url} failed: {exc}", url=url) from exc
        self.timeout_manager.record_time(url, time.monotonic() - start)

        try:
            return resp.json()
        except ValueError as exc:
            raise ParseError(f"GET {url} did not return JSON: {exc}") from exc

    async def get_json(self, url: str) -> Any:
        logger.debug("GET %s", url)
        return await asyncio.to_thread(self._get_json_blocking, url)

    def close(self) -> None:
        self.session_manager.close()
