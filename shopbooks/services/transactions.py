from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable

from shopbooks.models import Account, CashRow, Transaction
from shopbooks.services.accounts import account_types_by_name
from shopbooks.store import (
    load_accounts,
    load_cash_on_hand,
    load_transactions,
    save_cash_on_hand,
    save_transactions,
)
from shopbooks.utils import is_blank, normalize_date, to_float

logger = logging.getLogger(__name__)


def list_transactions(conn) -> list[Transaction]:
    return load_transactions(conn)


def _validate_amount(amount: Any) -> float:
    amt = to_float(amount)
    if amt is None:
        raise ValueError("Amount is required.")
    if amt <= 0:
        raise ValueError("Amount must be > 0.")
    return amt


def add_transaction(
    conn,
    *,
    date: Any,
    description: str,
    debit_account: str,
    credit_account: str,
    amount: Any,
) -> Transaction:
    required = {
        "Date": date,
        "Description": description,
        "Debit account": debit_account,
        "Credit account": credit_account,
    }
    for label, value in required.items():
        if is_blank(value):
            raise ValueError(f"{label} is required.")
    amt = _validate_amount(amount)

    types = account_types_by_name(load_accounts(conn))
    debit_account = str(debit_account).strip()
    credit_account = str(credit_account).strip()
    if debit_account not in types or credit_account not in types:
        raise ValueError("Add the accounts first: both debit and credit accounts must exist.")

    tx = Transaction(
        date=normalize_date(date),
        description=str(description).strip(),
        debit_account=debit_account,
        credit_account=credit_account,
        amount=amt,
    )
    transactions = load_transactions(conn)
    transactions.append(tx)
    save_transactions(conn, transactions)
    logger.info("Posted %s: Dr %s / Cr %s %.2f", tx.date, debit_account, credit_account, amt)
    return tx


def reset_transactions(conn) -> int:
    n = len(load_transactions(conn))
    save_transactions(conn, [])
    logger.info("Reset %d transaction(s)", n)
    return n


def compute_balances(accounts: Iterable[Account], transactions: Iterable[Transaction]) -> dict[str, float]:
    """
    balance = sum(amount where debit side) - sum(amount where credit side).

    Registered accounts always appear (starting at 0). Names that only occur
    in transactions (accounts cleared after posting) are tallied too.
    """
    balances: dict[str, float] = {a.name: 0.0 for a in accounts}
    for tx in transactions:
        balances[tx.debit_account] = balances.get(tx.debit_account, 0.0) + float(tx.amount)
        balances[tx.credit_account] = balances.get(tx.credit_account, 0.0) - float(tx.amount)
    return balances


def group_by_date(transactions: Iterable[Transaction]) -> dict[str, list[Transaction]]:
    grouped: dict[str, list[Transaction]] = defaultdict(list)
    for tx in transactions:
        grouped[str(tx.date)].append(tx)
    return {d: grouped[d] for d in sorted(grouped)}


# -------------------------
# Cash on hand
# -------------------------

def get_cash_on_hand(conn) -> float:
    return load_cash_on_hand(conn)


def set_cash_on_hand(conn, value: Any) -> float:
    v = to_float(value)
    if v is None or v < 0:
        raise ValueError("Enter a valid cash amount (a number >= 0).")
    save_cash_on_hand(conn, v)
    logger.info("Cash on hand set to %.2f", v)
    return v


def cash_table(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    cash_on_hand: float,
) -> list[CashRow]:
    """Running cash balance: starts at cash on hand, reduced by every expense-debit transaction."""
    types = account_types_by_name(accounts)
    balance = float(cash_on_hand)
    rows: list[CashRow] = []
    for tx in transactions:
        if types.get(tx.debit_account) == "Expense":
            balance -= float(tx.amount)
        rows.append(
            CashRow(
                date=tx.date,
                description=tx.description,
                debit_account=tx.debit_account,
                credit_account=tx.credit_account,
                amount=float(tx.amount),
                balance=balance,
            )
        )
    return rows
