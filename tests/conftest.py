"""
Pytest fixtures for the budget charts tests.

Provides a scripted fake transport (no network), sample upstream payloads,
and a cache wired to the fake.  Async tests use ``@pytest.mark.asyncio``.
"""

import asyncio
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from budget.cache import BudgetCache  # noqa: E402

ENDPOINT = "http://budget.test/budget"

SAMPLE_PAYLOAD = {
    "myBudget": [
        {"title": "Rent", "budget": 1200},
        {"title": "Food", "budget": 400},
        {"title": "Fun", "budget": 400},
    ]
}


class FakeTransport:
    """Scripted transport.

    ``responses`` are consumed one per call; an exception instance is raised
    instead of returned.  The last response repeats once the script runs
    out.  When ``gate`` is set, every call waits on it before answering.
    """

    def __init__(self, *responses, gate: asyncio.Event | None = None):
        self.responses = list(responses) or [SAMPLE_PAYLOAD]
        self.gate = gate
        self.calls = 0
        self.urls: list[str] = []

    async def get_json(self, url):
        self.calls += 1
        self.urls.append(url)
        index = min(self.calls, len(self.responses)) - 1
        response = self.responses[index]
        if self.gate is not None:
            await self.gate.wait()
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def sample_payload():
    return SAMPLE_PAYLOAD


@pytest.fixture
def transport():
    return FakeTransport(SAMPLE_PAYLOAD)


@pytest.fixture
def cache(transport):
    return BudgetCache(transport, ENDPOINT)


@pytest.fixture
def make_cache():
    """Factory: ``cache, transport = make_cache(*responses, gate=None)``."""
    def _make(*responses, gate=None):
        fake = FakeTransport(*responses, gate=gate)
        return BudgetCache(fake, ENDPOINT), fake
    return _make
