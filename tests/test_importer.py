from __future__ import annotations

from io import BytesIO

import pandas as pd

from shopbooks.models import Transaction
from shopbooks.services.importer import import_transactions, rows_from_frame, template_xlsx
from shopbooks.services.transactions import list_transactions

KNOWN = {"Cash", "Sales", "Rent"}


def _workbook(sheets: dict[str, pd.DataFrame]) -> BytesIO:
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, df in sheets.items():
            df.to_excel(writer, sheet_name=name, index=False)
    buf.seek(0)
    return buf


def test_rows_missing_debit_or_credit_are_skipped():
    df = pd.DataFrame(
        [
            {"Date": "2025-01-01", "Description": "ok", "Debit Account": "Cash", "Credit Account": "Sales", "Amount": 10},
            {"Date": "2025-01-01", "Description": "no debit", "Debit Account": None, "Credit Account": "Sales", "Amount": 5},
            {"Date": "2025-01-01", "Description": "no credit", "Debit Account": "Cash", "Credit Account": "", "Amount": 5},
            {"Date": None, "Description": "no date", "Debit Account": "Cash", "Credit Account": "Sales", "Amount": 5},
        ]
    )
    rows, skipped = rows_from_frame(df, KNOWN)
    assert [r.description for r in rows] == ["ok"]
    assert skipped == 3


def test_unknown_accounts_are_skipped():
    df = pd.DataFrame(
        [{"Date": "2025-01-01", "Description": "x", "Debit Account": "Petty", "Credit Account": "Sales", "Amount": 1}]
    )
    rows, skipped = rows_from_frame(df, KNOWN)
    assert rows == []
    assert skipped == 1


def test_columns_are_case_insensitive_and_amount_defaults_to_zero():
    df = pd.DataFrame(
        [{"date": "2025-01-05", "DESCRIPTION": None, "debit account": "Rent", "Credit  Account": "Cash", "amount": None}]
    )
    rows, skipped = rows_from_frame(df, KNOWN)
    assert skipped == 0
    assert rows == [Transaction("2025-01-05", "", "Rent", "Cash", 0.0)]


def test_import_reads_only_transactions_sheets(chart):
    good = pd.DataFrame(
        [
            {"Date": pd.Timestamp("2025-01-02"), "Description": "Till", "Debit Account": "Cash", "Credit Account": "Sales", "Amount": 99.5},
            {"Date": pd.Timestamp("2025-01-02"), "Description": "Bad", "Debit Account": "Cash", "Credit Account": None, "Amount": 1},
        ]
    )
    other = pd.DataFrame(
        [{"Date": "2025-01-03", "Description": "Ignored", "Debit Account": "Cash", "Credit Account": "Sales", "Amount": 1}]
    )
    result = import_transactions(chart, _workbook({"TRANSACTIONS": good, "Notes": other}))

    assert result.imported == 1
    assert result.skipped == 1
    assert result.sheets == ["TRANSACTIONS"]
    assert list_transactions(chart) == [Transaction("2025-01-02", "Till", "Cash", "Sales", 99.5)]


def test_import_without_transactions_sheet_imports_nothing(chart):
    result = import_transactions(chart, _workbook({"Sheet1": pd.DataFrame([{"a": 1}])}))
    assert result.imported == 0
    assert result.sheets == []
    assert list_transactions(chart) == []


def test_template_round_trips_through_import(chart):
    txs = [Transaction("2025-01-09", "Rent", "Rent", "Cash", 300.0)]
    result = import_transactions(chart, BytesIO(template_xlsx(txs)))
    assert result.imported == 1
    assert list_transactions(chart) == txs


def test_case_variant_headers_are_merged_first_filled_wins():
    df = pd.DataFrame(
        [
            ["2025-01-01", None, "Cash", None, "Sales", 10],
            [None, "2025-01-02", "", "Rent", "Cash", 4],
        ],
        columns=["Date", "date", "Debit Account", "debit account", "Credit Account", "Amount"],
    )
    rows, skipped = rows_from_frame(df, KNOWN)
    assert skipped == 0
    assert [(r.date, r.debit_account, r.credit_account) for r in rows] == [
        ("2025-01-01", "Cash", "Sales"),
        ("2025-01-02", "Rent", "Cash"),
    ]
