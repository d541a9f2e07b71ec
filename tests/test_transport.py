"""
Tests for budget/transport.py — RequestsTransport error mapping.

The pooled session's ``get`` is replaced with a stub; no network access.
"""
import sys
from pathlib import Path

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from budget.models import ParseError, TransportError
from budget.transport import RequestsTransport
from utils.http import TimeoutManager

URL = "http://budget.test/budget"


class _StubResponse:
    def __init__(self, status_code=200, payload=None, bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


def _transport_returning(monkeypatch, outcome):
    transport = RequestsTransport(timeout_manager=TimeoutManager(base_timeout=7))
    calls = []

    def fake_get(url, timeout=None):
        calls.append((url, timeout))
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    monkeypatch.setattr(transport.session_manager.session, "get", fake_get)
    return transport, calls


class TestRequestsTransport:
    @pytest.mark.asyncio
    async def test_returns_decoded_json(self, monkeypatch):
        payload = {"myBudget": [{"title": "Rent", "budget": 1200}]}
        transport, calls = _transport_returning(monkeypatch, _StubResponse(payload=payload))
        assert await transport.get_json(URL) == payload
        assert calls == [(URL, 7)]
        transport.close()

    @pytest.mark.asyncio
    async def test_records_response_time(self, monkeypatch):
        transport, _ = _transport_returning(monkeypatch, _StubResponse(payload=[]))
        await transport.get_json(URL)
        assert len(transport.timeout_manager.response_times["budget.test"]) == 1
        transport.close()

    @pytest.mark.asyncio
    async def test_http_status_maps_to_transport_error(self, monkeypatch):
        transport, _ = _transport_returning(monkeypatch, _StubResponse(status_code=503))
        with pytest.raises(TransportError) as exc_info:
            await transport.get_json(URL)
        assert exc_info.value.status_code == 503
        assert exc_info.value.url == URL
        transport.close()

    @pytest.mark.asyncio
    async def test_connection_error_maps_to_transport_error(self, monkeypatch):
        transport, _ = _transport_returning(
            monkeypatch, requests.ConnectionError("connection refused"))
        with pytest.raises(TransportError):
            await transport.get_json(URL)
        transport.close()

    @pytest.mark.asyncio
    async def test_invalid_json_maps_to_parse_error(self, monkeypatch):
        transport, _ = _transport_returning(monkeypatch, _StubResponse(bad_json=True))
        with pytest.raises(ParseError):
            await transport.get_json(URL)
        transport.close()
