from __future__ import annotations

from shopbooks.services.demo_data import DEFAULT_ACCOUNTS, load_demo_data, upsert_reference_data, wipe_all
from shopbooks.services.transactions import compute_balances, get_cash_on_hand, set_cash_on_hand
from shopbooks.store import BookState, load_state


def test_reference_data_is_idempotent(conn):
    upsert_reference_data(conn)
    upsert_reference_data(conn)
    assert len(load_state(conn).accounts) == len(DEFAULT_ACCOUNTS)


def test_demo_data_is_consistent(conn):
    load_demo_data(conn)
    state = load_state(conn)
    names = {a.name for a in state.accounts}
    assert state.transactions
    assert all(t.debit_account in names and t.credit_account in names for t in state.transactions)
    assert abs(sum(compute_balances(state.accounts, state.transactions).values())) < 1e-6
    for item in state.stock:
        latest = [h for h in state.stock_history if h.item == item.name][-1]
        assert item.quantity == latest.closing


def test_wipe_all(conn):
    load_demo_data(conn)
    wipe_all(conn)
    assert load_state(conn) == BookState()


def test_demo_data_twice_keeps_ledger_and_cash(conn):
    set_cash_on_hand(conn, 80.0)
    load_demo_data(conn)
    first = load_state(conn)
    load_demo_data(conn)
    second = load_state(conn)
    assert second.transactions == first.transactions
    assert second.stock == first.stock
    assert get_cash_on_hand(conn) == 80.0
