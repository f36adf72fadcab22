from __future__ import annotations

import logging
import random
from datetime import date, timedelta

from shopbooks.services.accounts import add_account, list_accounts
from shopbooks.services.stock import add_stock_item, list_stock, record_closing
from shopbooks.services.transactions import add_transaction, get_cash_on_hand, list_transactions, set_cash_on_hand
from shopbooks.store import delete_all

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNTS = [
    ("Cash", "Asset"),
    ("Bank", "Asset"),
    ("Inventory", "Asset"),
    ("Supplier Payables", "Liability"),
    ("Owner Capital", "Equity"),
    ("Sales", "Revenue"),
    ("Rent", "Expense"),
    ("Wages", "Expense"),
    ("Stock Purchases", "Expense"),
]

DEFAULT_STOCK = [
    ("Bread", 40, 12.5),
    ("Milk 1L", 60, 18.0),
    ("Sugar 2kg", 25, 45.0),
    ("Cooking Oil 2L", 18, 95.0),
]


def upsert_reference_data(conn) -> None:
    """Adds the default chart of accounts; existing names are left alone."""
    existing = {a.name for a in list_accounts(conn)}
    for name, account_type in DEFAULT_ACCOUNTS:
        if name not in existing:
            add_account(conn, name=name, account_type=account_type)


def wipe_all(conn) -> None:
    delete_all(conn)
    logger.info("All stored data wiped")


def _seed_ledger(conn, rng: random.Random, base_date: date) -> None:
    add_transaction(
        conn,
        date=base_date.isoformat(),
        description="Owner investment",
        debit_account="Bank",
        credit_account="Owner Capital",
        amount=5000.0,
    )
    for i in range(3):
        d = (base_date + timedelta(days=i)).isoformat()
        add_transaction(
            conn,
            date=d,
            description="Counter sales",
            debit_account="Cash",
            credit_account="Sales",
            amount=round(rng.uniform(600, 1400), 2),
        )
        add_transaction(
            conn,
            date=d,
            description="Restock",
            debit_account="Stock Purchases",
            credit_account="Cash",
            amount=round(rng.uniform(150, 450), 2),
        )
    add_transaction(
        conn,
        date=(base_date + timedelta(days=2)).isoformat(),
        description="Monthly rent",
        debit_account="Rent",
        credit_account="Bank",
        amount=1200.0,
    )


def load_demo_data(conn, *, seed: int = 7) -> None:
    """Seeds demo data; a ledger, cash figure or stock item already present is kept."""
    rng = random.Random(seed)
    upsert_reference_data(conn)
    if get_cash_on_hand(conn) == 0:
        set_cash_on_hand(conn, 500.0)

    base_date = date.today() - timedelta(days=3)
    if list_transactions(conn):
        logger.info("Ledger already has transactions, demo ledger not posted")
    else:
        _seed_ledger(conn, rng, base_date)

    existing = {s.name for s in list_stock(conn)}
    for name, qty, price in DEFAULT_STOCK:
        if name in existing:
            continue
        add_stock_item(conn, name=name, quantity=qty, unit_price=price)
        for i in range(2):
            closing = max(0, int(qty * rng.uniform(0.4, 0.8)))
            record_closing(conn, name=name, closing=closing, date=(base_date + timedelta(days=i)).isoformat())
            qty = closing
