from __future__ import annotations

import pytest

from shopbooks.models import ShiftProduct
from shopbooks.services.shift_sales import (
    add_product,
    delete_product,
    list_products,
    replace_products,
    sheet_totals,
    update_product,
)


def test_add_product_derives_closing_and_revenue(conn):
    p = add_product(conn, name="Soap", opening_stock=20, quantity_sold=7, price=3.5)
    assert p.closing_stock == 13
    assert p.revenue == pytest.approx(24.5)
    assert list_products(conn) == [p]


def test_sold_cannot_exceed_opening(conn):
    with pytest.raises(ValueError, match="cannot exceed opening stock"):
        add_product(conn, name="Soap", opening_stock=2, quantity_sold=3, price=1)
    assert list_products(conn) == []


def test_update_and_delete(conn):
    add_product(conn, name="Soap", opening_stock=5, quantity_sold=1, price=2)
    add_product(conn, name="Rice", opening_stock=9, quantity_sold=4, price=6)

    updated = update_product(conn, 0, name="Soap", opening_stock=5, quantity_sold=5, price=2)
    assert list_products(conn)[0] == updated

    with pytest.raises(ValueError, match="cannot exceed"):
        update_product(conn, 1, name="Rice", opening_stock=1, quantity_sold=4, price=6)

    removed = delete_product(conn, 0)
    assert removed.name == "Soap"
    assert [p.name for p in list_products(conn)] == ["Rice"]

    with pytest.raises(ValueError, match="Product not found"):
        delete_product(conn, 5)


def test_replace_products_skips_blank_rows_and_validates(conn):
    rows = [
        {"name": "Tea", "opening_stock": 4, "quantity_sold": 1, "price": 2.0},
        {"name": float("nan"), "opening_stock": None, "quantity_sold": None, "price": None},
    ]
    assert replace_products(conn, rows) == [ShiftProduct("Tea", 4, 1, 2.0)]

    with pytest.raises(ValueError):
        replace_products(conn, [{"name": "Tea", "opening_stock": 1, "quantity_sold": 2, "price": 1}])
    assert list_products(conn) == [ShiftProduct("Tea", 4, 1, 2.0)]


def test_sheet_totals():
    totals = sheet_totals([ShiftProduct("A", 10, 4, 2.0), ShiftProduct("B", 5, 5, 1.5)])
    assert totals.opening_stock == 15
    assert totals.quantity_sold == 9
    assert totals.closing_stock == 6
    assert totals.revenue == pytest.approx(15.5)
