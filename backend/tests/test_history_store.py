from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from backend.errors import DataAccessError
from backend.history.store import (
    get_delivered_line_items,
    get_user_history,
    load_history_tables,
    reload_history,
)
from backend.recommendations.config import RecommendationConfig


def test_user_history_keeps_every_order_status():
    history = get_user_history("u-1001")

    ordered = {item.dish_id for item in history.orders}
    assert ordered == {"d07", "d16", "d03", "d13", "d09", "d08"}
    assert {item.status for item in history.orders} == {"delivered", "cancelled"}
    assert sum(item.quantity for item in history.orders if item.dish_id == "d07") == 2


def test_user_history_favorites_and_preferences():
    history = get_user_history("u-1002")

    assert [f.dish_id for f in history.favorites] == ["d05", "d11"]
    assert history.favorites[0].category == "mains"
    assert history.dietary_preferences == ["vegan", "gluten-free"]


def test_unknown_user_has_empty_history():
    history = get_user_history("u-404")

    assert history.user_id == "u-404"
    assert history.orders == []
    assert history.favorites == []
    assert history.dietary_preferences == []


def test_delivered_line_items_span_all_users():
    items = get_delivered_line_items()

    assert {item.status for item in items} == {"delivered"}
    assert "d10" not in {item.dish_id for item in items}
    assert "d99" in {item.dish_id for item in items}


def test_missing_tables_are_empty(tmp_path: Path):
    tables = load_history_tables(RecommendationConfig(data_dir=tmp_path))

    assert all(df.empty for df in tables.values())


def test_corrupt_table_raises(tmp_path: Path):
    (tmp_path / "orders.csv").write_text("order_id,user_id\no-1,u-1\n")

    with pytest.raises(DataAccessError):
        load_history_tables(RecommendationConfig(data_dir=tmp_path))


def test_failed_load_surfaces_as_error():
    reload_history()
    with patch(
        "backend.history.store.load_history_tables",
        side_effect=DataAccessError("history unavailable"),
    ):
        with pytest.raises(DataAccessError):
            get_user_history("u-1001")
    reload_history()


def test_user_history_includes_orders_still_in_progress(tmp_path: Path):
    (tmp_path / "orders.csv").write_text(
        "order_id,user_id,status,completed_at,dish_id,quantity,unit_price\n"
        "o-1,u1,delivered,2024-10-01T12:00:00+00:00,d1,1,9.50\n"
        "o-2,u1,Preparing,2024-10-02T12:00:00+00:00,d2,5,11.00\n"
    )
    config = RecommendationConfig(data_dir=tmp_path)

    reload_history()
    with patch("backend.history.store.load_history_tables", return_value=load_history_tables(config)):
        history = get_user_history("u1")
        delivered = get_delivered_line_items()
    reload_history()

    assert {item.dish_id for item in history.orders} == {"d1", "d2"}
    assert [item.status for item in history.orders] == ["delivered", "preparing"]
    assert [item.dish_id for item in delivered] == ["d1"]
