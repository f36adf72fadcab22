from __future__ import annotations

import pytest

from shopbooks.db import connect, ensure_schema
from shopbooks.services.accounts import add_account


@pytest.fixture
def conn(tmp_path):
    c = connect(tmp_path / "app.db")
    ensure_schema(c)
    yield c
    c.close()


@pytest.fixture
def chart(conn):
    """A small chart of accounts covering every account type."""
    for name, account_type in [
        ("Cash", "Asset"),
        ("Bank", "Asset"),
        ("Loan", "Liability"),
        ("Capital", "Equity"),
        ("Sales", "Revenue"),
        ("Rent", "Expense"),
    ]:
        add_account(conn, name=name, account_type=account_type)
    return conn
