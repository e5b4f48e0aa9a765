"""HTTP-level tests for the journal API."""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from jose import jwt

from tradejournal.config import settings

D = Decimal

TRADE = {
    "symbol": "nvda",
    "direction": "long",
    "entry_date": "2026-01-05T14:30:00Z",
    "entry_price": "100",
    "quantity": "10",
    "stop_loss": "95",
    "commissions": "2",
    "setup_name": "breakout",
}

CLOSE = {"exit_date": "2026-01-05T16:00:00Z", "exit_price": "110"}


def _create(client, headers, **overrides):
    resp = client.post("/api/trades", json={**TRADE, **overrides}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _close(client, headers, trade_id, **overrides):
    return client.post(
        f"/api/trades/{trade_id}/close", json={**CLOSE, **overrides}, headers=headers
    )


# ---------------------------------------------------------------------------
# 1. Auth
# ---------------------------------------------------------------------------

class TestAuth:
    def test_login(self, client, user):
        resp = client.post("/api/auth/login", json={"username": "alice", "password": "secret-pw"})
        assert resp.status_code == 200
        token = resp.json()["access_token"]
        me = client.get("/api/trades", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200

    def test_login_wrong_password(self, client, user):
        resp = client.post("/api/auth/login", json={"username": "alice", "password": "nope"})
        assert resp.status_code == 401

    def test_missing_token(self, client):
        assert client.get("/api/trades").status_code in (401, 403)

    def test_bad_token(self, client):
        resp = client.get("/api/trades", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_token_without_subject(self, client):
        token = jwt.encode(
            {"sub": None, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        resp = client.get("/api/trades", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_health_is_public(self, client):
        resp = client.get("/api/system/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


# ---------------------------------------------------------------------------
# 2. Trades
# ---------------------------------------------------------------------------

class TestTrades:
    def test_create(self, client, auth_headers):
        trade = _create(client, auth_headers)
        assert trade["status"] == "open"
        assert trade["symbol"] == "NVDA"
        assert D(trade["risk_amount"]) == D(50)
        assert trade["pnl"] is None

    def test_create_invalid_price(self, client, auth_headers):
        resp = client.post(
            "/api/trades", json={**TRADE, "entry_price": "0"}, headers=auth_headers
        )
        assert resp.status_code == 422
        assert resp.json()["detail"] == "entry_price must be > 0"

    def test_create_wrong_side_stop(self, client, auth_headers):
        resp = client.post(
            "/api/trades", json={**TRADE, "stop_loss": "105"}, headers=auth_headers
        )
        assert resp.status_code == 422
        assert "stop_loss" in resp.json()["detail"]

    def test_create_bad_grade_payload(self, client, auth_headers):
        trade = _create(client, auth_headers)
        resp = client.patch(
            f"/api/trades/{trade['id']}", json={"overall_grade": "Z"}, headers=auth_headers
        )
        assert resp.status_code == 422

    def test_close(self, client, auth_headers):
        trade = _create(client, auth_headers)
        resp = _close(client, auth_headers, trade["id"])
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "closed"
        assert D(body["pnl"]) == D(100)
        assert D(body["net_pnl"]) == D(98)
        assert D(body["r_multiple"]) == D(2)
        assert body["hold_time_minutes"] == 90

    def test_double_close(self, client, auth_headers):
        trade = _create(client, auth_headers)
        assert _close(client, auth_headers, trade["id"]).status_code == 200
        resp = _close(client, auth_headers, trade["id"], exit_price="150")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Open trade not found"

        stored = client.get(f"/api/trades/{trade['id']}", headers=auth_headers).json()
        assert D(stored["exit_price"]) == D(110)

    def test_cancel(self, client, auth_headers):
        trade = _create(client, auth_headers)
        resp = client.post(f"/api/trades/{trade['id']}/cancel", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["status"] == "cancelled"
        assert _close(client, auth_headers, trade["id"]).status_code == 404

    @pytest.mark.parametrize("method,suffix", [
        ("get", ""),
        ("patch", ""),
        ("delete", ""),
        ("post", "/close"),
        ("post", "/cancel"),
    ])
    def test_other_user_sees_not_found(self, client, auth_headers, other_headers, method, suffix):
        trade = _create(client, auth_headers)
        kwargs = {"headers": other_headers}
        if method == "patch":
            kwargs["json"] = {"thesis": "mine now"}
        elif suffix == "/close":
            kwargs["json"] = CLOSE
        resp = getattr(client, method)(f"/api/trades/{trade['id']}{suffix}", **kwargs)
        assert resp.status_code == 404

    def test_unknown_id(self, client, auth_headers):
        resp = client.get(f"/api/trades/{uuid.uuid4()}", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Trade not found"

    def test_patch_locked_after_close(self, client, auth_headers):
        trade = _create(client, auth_headers)
        _close(client, auth_headers, trade["id"])
        resp = client.patch(
            f"/api/trades/{trade['id']}", json={"stop_loss": "90"}, headers=auth_headers
        )
        assert resp.status_code == 422

        resp = client.patch(
            f"/api/trades/{trade['id']}", json={"lessons": "be patient"}, headers=auth_headers
        )
        assert resp.status_code == 200
        assert resp.json()["lessons"] == "be patient"

    def test_delete(self, client, auth_headers):
        trade = _create(client, auth_headers)
        resp = client.delete(f"/api/trades/{trade['id']}", headers=auth_headers)
        assert resp.status_code == 204
        assert client.get(f"/api/trades/{trade['id']}", headers=auth_headers).status_code == 404

    def test_legs(self, client, auth_headers):
        trade = _create(client, auth_headers)
        leg = {"action": "BUY", "quantity": "5", "price": "100", "timestamp": TRADE["entry_date"]}
        for _ in range(2):
            resp = client.post(f"/api/trades/{trade['id']}/legs", json=leg, headers=auth_headers)
            assert resp.status_code == 201

        detail = client.get(f"/api/trades/{trade['id']}", headers=auth_headers).json()
        assert [l["leg_number"] for l in detail["legs"]] == [1, 2]
        assert detail["legs"][0]["action"] == "buy"

    def test_leg_rejects_zero_price(self, client, auth_headers):
        trade = _create(client, auth_headers)
        leg = {"action": "sell", "quantity": "5", "price": "0", "timestamp": TRADE["entry_date"]}
        resp = client.post(f"/api/trades/{trade['id']}/legs", json=leg, headers=auth_headers)
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# 3. Listing
# ---------------------------------------------------------------------------

class TestListing:
    def test_filters_and_paging(self, client, auth_headers):
        for symbol in ["aapl", "amd", "tsla"]:
            _create(client, auth_headers, symbol=symbol)
        resp = client.get(
            "/api/trades",
            params={"symbol": "a", "sort_by": "symbol", "sort_order": "asc", "per_page": 1},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 3
        assert body["total_pages"] == 3
        assert [t["symbol"] for t in body["trades"]] == ["AAPL"]

    def test_status_filter(self, client, auth_headers):
        first = _create(client, auth_headers)
        _create(client, auth_headers)
        _close(client, auth_headers, first["id"])
        body = client.get(
            "/api/trades", params={"status": "closed"}, headers=auth_headers
        ).json()
        assert [t["id"] for t in body["trades"]] == [first["id"]]

    def test_invalid_sort(self, client, auth_headers):
        resp = client.get("/api/trades", params={"sort_by": "hashed_password"}, headers=auth_headers)
        assert resp.status_code == 422
        assert "Invalid sort column" in resp.json()["detail"]

    def test_stats(self, client, auth_headers):
        trade = _create(client, auth_headers)
        _close(client, auth_headers, trade["id"])
        stats = client.get("/api/trades/stats", headers=auth_headers).json()
        assert stats["total_trades"] == 1
        assert D(stats["total_pnl"]) == D(98)
        assert stats["profit_factor"] is None


# ---------------------------------------------------------------------------
# 4. Analytics
# ---------------------------------------------------------------------------

class TestAnalytics:
    def _closed(self, client, headers, exit_price, setup="breakout"):
        trade = _create(client, headers, setup_name=setup)
        assert _close(client, headers, trade["id"], exit_price=exit_price).status_code == 200

    def test_empty_ledger(self, client, auth_headers):
        assert client.get("/api/analytics/equity-curve", headers=auth_headers).json()["points"] == []
        drawdown = client.get("/api/analytics/drawdown", headers=auth_headers).json()
        assert D(drawdown["max_drawdown"]) == 0
        assert drawdown["recovery_factor"] is None
        assert client.get("/api/analytics/setups", headers=auth_headers).json() == []

    def test_equity_curve_and_setups(self, client, auth_headers):
        for price in ["110", "90", "120"]:
            self._closed(client, auth_headers, price)
        self._closed(client, auth_headers, "130", setup="rare")

        points = client.get("/api/analytics/equity-curve", headers=auth_headers).json()["points"]
        assert len(points) == 4
        assert D(points[-1]["cumulative_pnl"]) == D(100 - 100 + 200 + 300 - 8)

        setups = client.get("/api/analytics/setups", headers=auth_headers).json()
        assert [s["setup_name"] for s in setups] == ["breakout"]
        assert setups[0]["trade_count"] == 3

    def test_starting_balance_is_reported_not_added(self, client, auth_headers):
        self._closed(client, auth_headers, "110")
        body = client.get(
            "/api/analytics/equity-curve",
            params={"starting_balance": "25000"},
            headers=auth_headers,
        ).json()
        assert D(body["starting_balance"]) == D(25000)
        assert D(body["points"][0]["cumulative_pnl"]) == D(98)

    def test_starting_balance_defaults_to_zero(self, client, auth_headers):
        body = client.get("/api/analytics/equity-curve", headers=auth_headers).json()
        assert D(body["starting_balance"]) == 0

    def test_ledger_scoped_to_user(self, client, auth_headers, other_headers):
        self._closed(client, auth_headers, "110")
        resp = client.get("/api/analytics/win-loss", headers=other_headers)
        assert resp.json()["wins"] == []

    def test_time(self, client, auth_headers):
        self._closed(client, auth_headers, "110")
        body = client.get("/api/analytics/time", headers=auth_headers).json()
        assert body["hourly"][0]["hour"] == 14
        assert body["daily"][0]["day_name"] == "Monday"
        assert body["monthly"][0]["month"] == "2026-01"


# ---------------------------------------------------------------------------
# 5. Risk calculators
# ---------------------------------------------------------------------------

class TestRiskEndpoints:
    def test_position_size(self, client, auth_headers):
        resp = client.post("/api/risk/position-size", json={
            "account_size": "10000", "risk_percent": "1", "entry_price": "100", "stop_loss": "98",
        }, headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert D(body["position_size"]) == D(50)
        assert D(body["risk_amount"]) == D(100)
        assert D(body["position_value"]) == D(5000)

    def test_risk_reward(self, client, auth_headers):
        body = client.post("/api/risk/risk-reward", json={
            "entry_price": "100", "stop_loss": "98", "target_price": "106",
        }, headers=auth_headers).json()
        assert D(body["risk_reward_ratio"]) == D(3)

    def test_kelly(self, client, auth_headers):
        body = client.post("/api/risk/kelly", json={
            "win_rate": "60", "avg_win": "200", "avg_loss": "100",
        }, headers=auth_headers).json()
        kelly = D(body["kelly_percentage"])
        assert D(0) < kelly <= D(100)
        assert D(body["half_kelly"]) == kelly / 2

    def test_portfolio_heat(self, client, auth_headers):
        body = client.post("/api/risk/portfolio-heat", json={
            "open_positions_risk": ["100", "150", "200"], "account_size": "10000",
        }, headers=auth_headers).json()
        assert D(body["portfolio_heat"]) == D("4.5")
        assert body["positions_count"] == 3

    def test_requires_auth(self, client):
        resp = client.post("/api/risk/breakeven", json={"entry_price": "10", "quantity": "1"})
        assert resp.status_code in (401, 403)
