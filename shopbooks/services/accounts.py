from __future__ import annotations

import logging
from typing import Iterable, Optional

from shopbooks.models import ACCOUNT_TYPES, Account
from shopbooks.store import load_accounts, save_accounts

logger = logging.getLogger(__name__)


def _normalize_account_type(account_type: Optional[str]) -> str:
    if not account_type:
        raise ValueError("Account type is required.")
    t = str(account_type).strip().title()
    if t in ACCOUNT_TYPES:
        return t
    raise ValueError(f"Invalid account type. Use one of: {', '.join(ACCOUNT_TYPES)}.")


def list_accounts(conn) -> list[Account]:
    return load_accounts(conn)


def add_account(conn, *, name: str, account_type: str) -> Account:
    name = str(name or "").strip()
    if not name:
        raise ValueError("Account name is required.")
    account_type = _normalize_account_type(account_type)

    accounts = load_accounts(conn)
    if any(a.name == name for a in accounts):
        raise ValueError("Account already exists.")

    acc = Account(name=name, type=account_type)
    accounts.append(acc)
    save_accounts(conn, accounts)
    logger.info("Added account %s (%s)", name, account_type)
    return acc


def clear_accounts(conn) -> int:
    """Removes every account. Transactions are kept and may reference missing accounts."""
    n = len(load_accounts(conn))
    save_accounts(conn, [])
    logger.info("Cleared %d account(s)", n)
    return n


def account_types_by_name(accounts: Iterable[Account]) -> dict[str, str]:
    return {a.name: a.type for a in accounts}


def get_account_type(accounts: Iterable[Account], name: str) -> Optional[str]:
    return account_types_by_name(accounts).get(name)
