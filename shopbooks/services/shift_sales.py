from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from shopbooks.models import ShiftProduct
from shopbooks.store import load_shift_products, save_shift_products
from shopbooks.utils import is_blank, to_float, to_int

logger = logging.getLogger(__name__)


@dataclass
class SheetTotals:
    opening_stock: int
    quantity_sold: int
    closing_stock: int
    revenue: float


def _build(name: Any, opening_stock: Any, quantity_sold: Any, price: Any) -> ShiftProduct:
    product = ShiftProduct(
        name=str(name or "").strip(),
        opening_stock=to_int(opening_stock, default=0),
        quantity_sold=to_int(quantity_sold, default=0),
        price=to_float(price, default=0.0),
    )
    if not product.name:
        raise ValueError("Product name is required.")
    if product.opening_stock < 0 or product.quantity_sold < 0 or product.price < 0:
        raise ValueError("Opening stock, quantity sold and price must be >= 0.")
    if product.quantity_sold > product.opening_stock:
        raise ValueError("Quantity sold cannot exceed opening stock.")
    return product


def list_products(conn) -> list[ShiftProduct]:
    return load_shift_products(conn)


def add_product(conn, *, name: str, opening_stock: Any, quantity_sold: Any, price: Any) -> ShiftProduct:
    product = _build(name, opening_stock, quantity_sold, price)
    products = load_shift_products(conn)
    products.append(product)
    save_shift_products(conn, products)
    logger.info("Shift sheet: added %s", product.name)
    return product


def update_product(
    conn,
    index: int,
    *,
    name: str,
    opening_stock: Any,
    quantity_sold: Any,
    price: Any,
) -> ShiftProduct:
    products = load_shift_products(conn)
    if not 0 <= int(index) < len(products):
        raise ValueError("Product not found.")
    product = _build(name, opening_stock, quantity_sold, price)
    products[int(index)] = product
    save_shift_products(conn, products)
    return product


def delete_product(conn, index: int) -> ShiftProduct:
    products = load_shift_products(conn)
    if not 0 <= int(index) < len(products):
        raise ValueError("Product not found.")
    removed = products.pop(int(index))
    save_shift_products(conn, products)
    logger.info("Shift sheet: deleted %s", removed.name)
    return removed


def replace_products(conn, rows: Iterable[dict]) -> list[ShiftProduct]:
    """
    Save an edited sheet wholesale (used by the data editor). Every row is
    validated before anything is written.
    """
    products = []
    for r in rows:
        if is_blank(r.get("name")):
            continue
        products.append(_build(r.get("name"), r.get("opening_stock"), r.get("quantity_sold"), r.get("price")))
    save_shift_products(conn, products)
    return products


def sheet_totals(products: Iterable[ShiftProduct]) -> SheetTotals:
    products = list(products)
    return SheetTotals(
        opening_stock=sum(p.opening_stock for p in products),
        quantity_sold=sum(p.quantity_sold for p in products),
        closing_stock=sum(p.closing_stock for p in products),
        revenue=sum(p.revenue for p in products),
    )
