"""
Typed persistence for every collection.

Each collection lives under its own key in the kv_store table as a JSON
document and is read back wholesale. A missing or corrupt document resets
only that collection to empty.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

from shopbooks.db import q, x
from shopbooks.models import (
    Account,
    ShiftProduct,
    ShiftReport,
    StockHistoryEntry,
    StockItem,
    Transaction,
)
from shopbooks.utils import iso_now

logger = logging.getLogger(__name__)

KEY_ACCOUNTS = "accounts"
KEY_TRANSACTIONS = "transactions"
KEY_STOCK = "stock"
KEY_STOCK_HISTORY = "stock_history"
KEY_SHIFT = "shift_report"
KEY_CASH_ON_HAND = "cash_on_hand"
KEY_SHIFT_PRODUCTS = "shift_products"

ALL_KEYS = (
    KEY_ACCOUNTS,
    KEY_TRANSACTIONS,
    KEY_STOCK,
    KEY_STOCK_HISTORY,
    KEY_SHIFT,
    KEY_CASH_ON_HAND,
    KEY_SHIFT_PRODUCTS,
)

T = TypeVar("T")


def read_raw(conn, key: str) -> Optional[str]:
    rows = q(conn, "SELECT value FROM kv_store WHERE key=?", (key,))
    return str(rows[0]["value"]) if rows else None


def write_raw(conn, key: str, value: str) -> None:
    x(
        conn,
        """
        INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
        """,
        (key, value, iso_now()),
    )


def delete_all(conn) -> None:
    x(conn, "DELETE FROM kv_store")


def _load_list(conn, key: str, parse: Callable[[dict], T]) -> list[T]:
    raw = read_raw(conn, key)
    if raw is None:
        return []
    try:
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"expected a list, got {type(data).__name__}")
        return [parse(d) for d in data]
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("Stored %s is unreadable, starting empty: %s", key, e)
        return []


def _save_list(conn, key: str, items: list[Any]) -> None:
    write_raw(conn, key, json.dumps([i.to_dict() for i in items]))


def load_accounts(conn) -> list[Account]:
    return _load_list(conn, KEY_ACCOUNTS, Account.from_dict)


def save_accounts(conn, accounts: list[Account]) -> None:
    _save_list(conn, KEY_ACCOUNTS, accounts)


def load_transactions(conn) -> list[Transaction]:
    return _load_list(conn, KEY_TRANSACTIONS, Transaction.from_dict)


def save_transactions(conn, transactions: list[Transaction]) -> None:
    _save_list(conn, KEY_TRANSACTIONS, transactions)


def load_stock(conn) -> list[StockItem]:
    return _load_list(conn, KEY_STOCK, StockItem.from_dict)


def save_stock(conn, items: list[StockItem]) -> None:
    _save_list(conn, KEY_STOCK, items)


def load_stock_history(conn) -> list[StockHistoryEntry]:
    return _load_list(conn, KEY_STOCK_HISTORY, StockHistoryEntry.from_dict)


def save_stock_history(conn, history: list[StockHistoryEntry]) -> None:
    _save_list(conn, KEY_STOCK_HISTORY, history)


def load_shift_products(conn) -> list[ShiftProduct]:
    return _load_list(conn, KEY_SHIFT_PRODUCTS, ShiftProduct.from_dict)


def save_shift_products(conn, products: list[ShiftProduct]) -> None:
    _save_list(conn, KEY_SHIFT_PRODUCTS, products)


def load_shift_report(conn) -> Optional[ShiftReport]:
    raw = read_raw(conn, KEY_SHIFT)
    if raw is None:
        return None
    try:
        data = json.loads(raw)
        # An empty object is what a never-generated report looks like.
        if not data:
            return None
        return ShiftReport.from_dict(data)
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Stored %s is unreadable, starting empty: %s", KEY_SHIFT, e)
        return None


def save_shift_report(conn, report: Optional[ShiftReport]) -> None:
    write_raw(conn, KEY_SHIFT, json.dumps(report.to_dict() if report else {}))


def load_cash_on_hand(conn) -> float:
    raw = read_raw(conn, KEY_CASH_ON_HAND)
    if raw is None:
        return 0.0
    try:
        value = float(json.loads(raw))
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"cash on hand must be a finite number >= 0, got {value}")
        return value
    except (ValueError, TypeError) as e:
        logger.warning("Stored %s is unreadable, using 0: %s", KEY_CASH_ON_HAND, e)
        return 0.0


def save_cash_on_hand(conn, value: float) -> None:
    write_raw(conn, KEY_CASH_ON_HAND, json.dumps(float(value)))


@dataclass
class BookState:
    accounts: list[Account] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    stock: list[StockItem] = field(default_factory=list)
    stock_history: list[StockHistoryEntry] = field(default_factory=list)
    shift_report: Optional[ShiftReport] = None
    cash_on_hand: float = 0.0
    shift_products: list[ShiftProduct] = field(default_factory=list)


def load_state(conn) -> BookState:
    return BookState(
        accounts=load_accounts(conn),
        transactions=load_transactions(conn),
        stock=load_stock(conn),
        stock_history=load_stock_history(conn),
        shift_report=load_shift_report(conn),
        cash_on_hand=load_cash_on_hand(conn),
        shift_products=load_shift_products(conn),
    )


def save_state(conn, state: BookState) -> None:
    save_accounts(conn, state.accounts)
    save_transactions(conn, state.transactions)
    save_stock(conn, state.stock)
    save_stock_history(conn, state.stock_history)
    save_shift_report(conn, state.shift_report)
    save_cash_on_hand(conn, state.cash_on_hand)
    save_shift_products(conn, state.shift_products)
