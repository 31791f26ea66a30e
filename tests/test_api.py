"""Tests for the FastAPI backend and its report cache."""

from __future__ import annotations

import time
from unittest.mock import patch

import httpx
import pytest
from fastapi.testclient import TestClient

from pnl_core.api import app as app_module
from pnl_core.api.app import app, get_client
from pnl_core.api.cache import TTLCache

WALLET = "0x" + "ab" * 20


class FakeDataClient:
    def __init__(self, rows: list[dict] | None = None, error: Exception | None = None):
        self.rows = rows or []
        self.error = error
        self.calls: list[str] = []

    async def get_trades(self, user: str) -> list[dict]:
        self.calls.append(user)
        if self.error is not None:
            raise self.error
        return self.rows


def _row(trade_id: str, side: str, size: str, price: str, ts: int, outcome: str = "Yes") -> dict:
    return {
        "id": trade_id,
        "timestamp": ts,
        "conditionId": "0xcond",
        "outcome": outcome,
        "side": side,
        "size": size,
        "price": price,
        "title": "Will it snow in Paris?",
        "category": "Weather",
    }


ROUND_TRIP = [
    # Newest first, as the data API serves them
    _row("t3", "SELL", "100", "0.70", 1704070800),
    _row("t2", "BUY", "50", "0.60", 1704067260),
    _row("t1", "BUY", "50", "0.40", 1704067200),
]


@pytest.fixture()
def fake_client():
    fake = FakeDataClient(rows=ROUND_TRIP)
    app.dependency_overrides[get_client] = lambda: fake
    app_module._report_cache.clear()
    yield fake
    app.dependency_overrides.clear()
    app_module._report_cache.clear()


@pytest.fixture()
def client():
    return TestClient(app)


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_pnl_round_trip(client, fake_client):
    resp = client.get("/api/pnl", params={"wallet": WALLET})
    assert resp.status_code == 200
    data = resp.json()

    assert data["wallet"] == WALLET
    assert data["method"] == "fifo"
    assert data["trades_count"] == 3
    assert data["oversells"] == 0

    (pos,) = data["positions"]
    assert pos["side"] == "Long YES"
    assert pos["entry_vwap"] == pytest.approx(0.5)
    assert pos["exit_vwap"] == pytest.approx(0.7)
    assert pos["realized_pnl"] == pytest.approx(20.0)
    assert pos["realized_pnl_percent"] == pytest.approx(40.0)
    assert pos["closed_at"] is not None
    assert pos["market_title"] == "Will it snow in Paris?"

    assert data["summary"]["total_positions_closed"] == 1
    assert data["summary"]["most_used_category"] == "Weather"


def test_pnl_normalizes_wallet_and_caches(client, fake_client):
    padded = "  0x" + "AB" * 20 + " "
    first = client.get("/api/pnl", params={"wallet": padded})
    second = client.get("/api/pnl", params={"wallet": WALLET})
    assert first.status_code == 200
    assert second.json() == first.json()
    assert fake_client.calls == [WALLET]


@pytest.mark.parametrize("wallet", ["abc", "0x123", "0x" + "g" * 40, "0x" + "a" * 41])
def test_pnl_rejects_bad_wallet(client, fake_client, wallet):
    resp = client.get("/api/pnl", params={"wallet": wallet})
    assert resp.status_code == 400
    assert fake_client.calls == []


def test_pnl_requires_wallet(client, fake_client):
    assert client.get("/api/pnl").status_code == 422


def test_upstream_failure_is_502(client, fake_client):
    fake_client.error = httpx.ConnectError("connection refused")
    resp = client.get("/api/pnl", params={"wallet": WALLET})
    assert resp.status_code == 502


def test_malformed_trade_is_502(client, fake_client):
    fake_client.rows = [_row("t1", "BUY", "ten", "0.5", 1704067200)]
    resp = client.get("/api/pnl", params={"wallet": WALLET})
    assert resp.status_code == 502
    assert "size" in resp.json()["detail"]


@pytest.mark.parametrize("price", ["inf", "NaN"])
def test_non_finite_trade_is_502(client, fake_client, price):
    fake_client.rows = [_row("t1", "BUY", "10", price, 1704067200)]
    resp = client.get("/api/pnl", params={"wallet": WALLET})
    assert resp.status_code == 502
    assert "non-finite price" in resp.json()["detail"]


def test_oversell_reported_not_fatal(client, fake_client):
    fake_client.rows = [_row("t1", "SELL", "10", "0.6", 1704067200, outcome="No")]
    data = client.get("/api/pnl", params={"wallet": WALLET}).json()
    assert data["oversells"] == 1
    assert data["positions"][0]["realized_pnl"] == pytest.approx(6.0)
    assert data["positions"][0]["side"] == "Long NO"


def test_trades_sorted_oldest_first(client, fake_client):
    resp = client.get("/api/trades", params={"wallet": WALLET})
    assert resp.status_code == 200
    assert [t["trade_id"] for t in resp.json()] == ["t1", "t2", "t3"]


# ═══════════════════════════════════════════════════════════════
# Cache tests
# ═══════════════════════════════════════════════════════════════


class TestTTLCache:
    def test_set_and_get(self):
        cache = TTLCache(ttl_seconds=10.0)
        cache.set("key", {"value": 42})
        assert cache.get("key") == {"value": 42}

    def test_missing_key(self):
        assert TTLCache().get("nope") is None

    def test_expiry(self):
        cache = TTLCache(ttl_seconds=0.5)
        cache.set("key", "data")
        assert cache.get("key") == "data"

        original_time = time.monotonic()
        with patch("pnl_core.api.cache.time") as mock_time:
            mock_time.monotonic.return_value = original_time + 1.0
            assert cache.get("key") is None
        assert len(cache) == 0

    def test_evicts_oldest_when_full(self):
        cache = TTLCache(max_entries=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert cache.get("a") is None
        assert cache.get("b") == 2
        assert cache.get("c") == 3

    def test_clear(self):
        cache = TTLCache()
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0
