from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

from fastapi.testclient import TestClient

from backend.analytics.aggregator import compute_analytics
from backend.analytics.store import clear_events
from backend.app import app
from backend.recommendations.models import OrderLineItem, UserHistory

client = TestClient(app)


def _login_user(c):
    c.post("/auth/login", json={"username": "user", "password": "user123"})


def _login_admin(c):
    c.post("/auth/login", json={"username": "admin", "password": "admin123"})


def test_analytics_returns_empty_initially():
    clear_events()
    _login_admin(client)
    resp = client.get("/analytics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_requests"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["for_you"]["personalized_rate"] == 0.0


def test_analytics_tracks_for_you_requests():
    clear_events()
    anonymous = TestClient(app)
    anonymous.get("/recommendations/for-you")
    _login_user(client)
    client.get("/recommendations/for-you")
    _login_admin(client)
    body = client.get("/analytics").json()
    assert body["total_requests"] == 2
    assert body["requests_by_kind"] == {"for_you": 2}
    assert body["for_you"]["anonymous"] == 1
    assert body["for_you"]["personalized_rate"] == 100.0
    assert body["for_you"]["backfill_rate"] == 0.0


def test_analytics_tracks_every_ranking_kind():
    clear_events()
    client.get("/dishes/trending")
    client.get("/dishes/new")
    client.get("/dishes/d08/similar")
    _login_admin(client)
    body = client.get("/analytics").json()
    assert body["requests_by_kind"] == {"trending": 1, "new": 1, "similar": 1}
    assert any(d["dish_id"] == "d07" for d in body["top_recommended_dishes"])


def test_compute_analytics_counts_empty_results():
    events = [
        {"kind": "similar", "results_returned": 0, "dish_ids": [], "response_time_ms": 2.0},
        {"kind": "for_you", "results_returned": 2, "dish_ids": ["a", "b"],
         "response_time_ms": 4.0, "user": "u-1", "personalized": False, "backfilled": 2},
    ]
    body = compute_analytics(events)
    assert body["empty_results"] == 1
    assert body["avg_response_time_ms"] == 3.0
    assert body["for_you"]["backfill_rate"] == 100.0
    assert body["for_you"]["backfilled_items"] == 2
    assert body["for_you"]["personalized_rate"] == 0.0


def test_analytics_counts_popular_backfill():
    # d01 is ordered often enough to drop out of scoring but is still popular
    history = UserHistory(
        user_id="u-2000",
        orders=[OrderLineItem(
            dish_id="d01",
            quantity=5,
            unit_price=100.0,
            completed_at=datetime(2024, 10, 1, tzinfo=timezone.utc),
        )],
    )
    clear_events()
    c = TestClient(app)
    _login_user(c)
    with patch("backend.app.get_user_history", return_value=history):
        suggestions = c.get("/recommendations/for-you").json()["suggestions"]

    assert [d["id"] for d in suggestions][-1] == "d01"
    _login_admin(client)
    body = client.get("/analytics").json()
    assert body["for_you"]["backfill_rate"] == 100.0
    assert body["for_you"]["backfilled_items"] == 1
