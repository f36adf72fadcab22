from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from shopbooks.models import StockHistoryEntry, StockItem
from shopbooks.store import load_stock, load_stock_history, save_stock, save_stock_history
from shopbooks.utils import iso_today, normalize_date, to_float, to_int

logger = logging.getLogger(__name__)


@dataclass
class BalanceResult:
    item: StockItem
    previous: int
    variance: int


@dataclass
class StockSummary:
    total_items: int
    total_value: float


def list_stock(conn) -> list[StockItem]:
    return load_stock(conn)


def list_history(conn) -> list[StockHistoryEntry]:
    return load_stock_history(conn)


def _find(items: list[StockItem], name: str) -> StockItem:
    item = next((s for s in items if s.name == name), None)
    if item is None:
        raise ValueError("Item not found.")
    return item


def _required_name(name: Optional[str]) -> str:
    n = str(name or "").strip()
    if not n:
        raise ValueError("Item name is required.")
    return n


def add_stock_item(conn, *, name: str, quantity: Any, unit_price: Any) -> StockItem:
    name = _required_name(name)
    qty = to_int(quantity)
    price = to_float(unit_price)
    if qty is None:
        raise ValueError("Quantity is required.")
    if price is None:
        raise ValueError("Unit price is required.")

    items = load_stock(conn)
    if any(s.name == name for s in items):
        raise ValueError("Item exists - use balance/closing to update.")

    item = StockItem(name=name, quantity=qty, unit_price=price, last_closing=None)
    items.append(item)
    save_stock(conn, items)
    logger.info("Added stock item %s: %d @ %.2f", name, qty, price)
    return item


def update_stock_balance(conn, *, name: str, counted: Any) -> BalanceResult:
    """Stocktake correction: overwrite quantity with the counted figure."""
    name = _required_name(name)
    cnt = to_int(counted)
    if cnt is None:
        raise ValueError("Counted quantity is required.")

    items = load_stock(conn)
    item = _find(items, name)
    previous = int(item.quantity)
    item.quantity = cnt
    save_stock(conn, items)

    variance = cnt - previous
    logger.info("Balance for %s: %d -> %d (variance %+d)", name, previous, cnt, variance)
    return BalanceResult(item=item, previous=previous, variance=variance)


def closing_entry(item: StockItem, closing: int, date: str) -> StockHistoryEntry:
    opening = int(item.quantity or 0)
    return StockHistoryEntry(
        date=date,
        item=item.name,
        opening=opening,
        closing=int(closing),
        consumed=opening - int(closing),
        value_opening=opening * float(item.unit_price),
        value_closing=int(closing) * float(item.unit_price),
    )


def record_closing(conn, *, name: str, closing: Any, date: Any = None) -> StockHistoryEntry:
    """
    Append a history entry for the day, then roll the closing quantity
    forward as the item's next opening quantity.
    """
    name = _required_name(name)
    closing_qty = to_int(closing)
    if closing_qty is None:
        raise ValueError("Closing quantity is required.")

    items = load_stock(conn)
    item = _find(items, name)
    entry = closing_entry(item, closing_qty, normalize_date(date) or iso_today())

    history = load_stock_history(conn)
    history.append(entry)
    save_stock_history(conn, history)

    item.last_closing = closing_qty
    item.quantity = closing_qty
    save_stock(conn, items)

    logger.info("Closing for %s on %s: %d -> %d (consumed %d)", name, entry.date, entry.opening, closing_qty, entry.consumed)
    return entry


def check_available(conn, name: str) -> StockItem:
    return _find(load_stock(conn), _required_name(name))


def stock_summary(items: Iterable[StockItem]) -> StockSummary:
    items = list(items)
    return StockSummary(
        total_items=len(items),
        total_value=sum(s.quantity * s.unit_price for s in items),
    )


def history_by_item(history: Iterable[StockHistoryEntry]) -> dict[str, list[StockHistoryEntry]]:
    """Entries grouped per item, newest first; items in order of their latest entry."""
    grouped: dict[str, list[StockHistoryEntry]] = {}
    for h in reversed(list(history)):
        grouped.setdefault(h.item, []).append(h)
    return grouped


def reset_stock(conn) -> None:
    save_stock(conn, [])
    save_stock_history(conn, [])
    logger.info("Stock and stock history reset")
