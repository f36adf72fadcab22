from __future__ import annotations

import pytest

from shopbooks.models import StockHistoryEntry, StockItem
from shopbooks.services.stock import (
    add_stock_item,
    check_available,
    history_by_item,
    list_history,
    list_stock,
    record_closing,
    reset_stock,
    stock_summary,
    update_stock_balance,
)


def test_add_stock_item(conn):
    item = add_stock_item(conn, name=" Bread ", quantity="40", unit_price="2.5")
    assert item == StockItem("Bread", 40, 2.5, None)
    assert list_stock(conn) == [item]


@pytest.mark.parametrize(
    "kwargs, message",
    [
        (dict(name="", quantity=1, unit_price=1), "Item name is required"),
        (dict(name="Tea", quantity=None, unit_price=1), "Quantity is required"),
        (dict(name="Tea", quantity=1, unit_price="x"), "Unit price is required"),
    ],
)
def test_add_stock_item_requires_fields(conn, kwargs, message):
    with pytest.raises(ValueError, match=message):
        add_stock_item(conn, **kwargs)


def test_duplicate_item_rejected(conn):
    add_stock_item(conn, name="Bread", quantity=1, unit_price=1)
    with pytest.raises(ValueError, match="Item exists"):
        add_stock_item(conn, name="Bread", quantity=5, unit_price=2)
    assert list_stock(conn)[0].quantity == 1


@pytest.mark.parametrize("opening, closing, price", [(40, 25, 2.5), (10, 10, 3.0), (5, 0, 1.2), (8, 12, 4.0)])
def test_record_closing_rolls_over(conn, opening, closing, price):
    add_stock_item(conn, name="Milk", quantity=opening, unit_price=price)
    entry = record_closing(conn, name="Milk", closing=closing, date="2025-04-01")

    assert entry.opening == opening
    assert entry.closing == closing
    assert entry.consumed == opening - closing
    assert entry.value_opening == pytest.approx(opening * price)
    assert entry.value_closing == pytest.approx(closing * price)
    assert list_history(conn) == [entry]

    item = check_available(conn, "Milk")
    assert item.quantity == closing
    assert item.last_closing == closing


def test_consecutive_closings_chain(conn):
    add_stock_item(conn, name="Sugar", quantity=30, unit_price=2.0)
    record_closing(conn, name="Sugar", closing=20, date="2025-04-01")
    second = record_closing(conn, name="Sugar", closing=12, date="2025-04-02")
    assert second.opening == 20
    assert second.consumed == 8
    assert [h.date for h in list_history(conn)] == ["2025-04-01", "2025-04-02"]


def test_record_closing_defaults_to_today(conn, monkeypatch):
    from shopbooks.services import stock

    monkeypatch.setattr(stock, "iso_today", lambda: "2030-01-01")
    add_stock_item(conn, name="Salt", quantity=3, unit_price=1.0)
    assert record_closing(conn, name="Salt", closing=1).date == "2030-01-01"


def test_record_closing_unknown_item(conn):
    with pytest.raises(ValueError, match="Item not found"):
        record_closing(conn, name="Ghost", closing=1)
    assert list_history(conn) == []


def test_balance_update_reports_variance(conn):
    add_stock_item(conn, name="Oil", quantity=10, unit_price=9.0)
    res = update_stock_balance(conn, name="Oil", counted=7)
    assert res.previous == 10
    assert res.variance == -3
    assert check_available(conn, "Oil").quantity == 7
    assert list_history(conn) == []

    assert update_stock_balance(conn, name="Oil", counted=9).variance == 2


def test_balance_update_requires_count(conn):
    add_stock_item(conn, name="Oil", quantity=10, unit_price=9.0)
    with pytest.raises(ValueError, match="Counted quantity is required"):
        update_stock_balance(conn, name="Oil", counted="")


def test_check_available_missing(conn):
    with pytest.raises(ValueError, match="Item not found"):
        check_available(conn, "Nothing")


def test_stock_summary():
    summary = stock_summary([StockItem("A", 2, 1.5), StockItem("B", 4, 2.0)])
    assert summary.total_items == 2
    assert summary.total_value == pytest.approx(11.0)


def test_history_by_item_newest_first():
    history = [
        StockHistoryEntry("2025-01-01", "A", 5, 4, 1, 5.0, 4.0),
        StockHistoryEntry("2025-01-01", "B", 3, 2, 1, 3.0, 2.0),
        StockHistoryEntry("2025-01-02", "A", 4, 1, 3, 4.0, 1.0),
    ]
    grouped = history_by_item(history)
    assert list(grouped) == ["A", "B"]
    assert [h.date for h in grouped["A"]] == ["2025-01-02", "2025-01-01"]


def test_reset_stock_clears_items_and_history(conn):
    add_stock_item(conn, name="Tea", quantity=5, unit_price=1.0)
    record_closing(conn, name="Tea", closing=2, date="2025-01-01")
    reset_stock(conn)
    assert list_stock(conn) == []
    assert list_history(conn) == []
