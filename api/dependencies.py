"""
Process-wide dependencies for the API.

The budget cache is a single instance shared by every request, so concurrent
page loads join the same upstream fetch.  Routes receive it through
``Depends(get_cache)``; ``create_app(cache=...)`` swaps it for tests.
"""

import threading

from budget.cache import BudgetCache
from budget.transport import RequestsTransport
from charts.donut import DonutLayoutEngine
from utils.config import AppConfig
from utils.http import TimeoutManager

_cfg: AppConfig = AppConfig.from_env()
_cache: BudgetCache | None = None
_cache_lock = threading.Lock()
_engine: DonutLayoutEngine = DonutLayoutEngine()


def get_config() -> AppConfig:
    return _cfg


def get_cache() -> BudgetCache:
    """Return the shared BudgetCache, creating it on first use."""
    global _cache
    if _cache is None:
        with _cache_lock:
            if _cache is None:
                transport = RequestsTransport(
                    timeout_manager=TimeoutManager(base_timeout=_cfg.budget_timeout),
                )
                _cache = BudgetCache(transport, _cfg.budget_endpoint)
    return _cache


def set_cache(cache: BudgetCache | None) -> None:
    global _cache
    with _cache_lock:
        _cache = cache


def get_engine() -> DonutLayoutEngine:
    return _engine
