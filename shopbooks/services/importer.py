from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import IO, Any, Union

import pandas as pd

from shopbooks.models import Transaction
from shopbooks.store import load_accounts, load_transactions, save_transactions
from shopbooks.utils import is_blank, normalize_date, to_float

logger = logging.getLogger(__name__)

SHEET_NAME = "transactions"

# lower-cased header -> Transaction field
COLUMN_MAP = {
    "date": "date",
    "description": "description",
    "debit account": "debit_account",
    "credit account": "credit_account",
    "amount": "amount",
}


@dataclass
class ImportResult:
    imported: int = 0
    skipped: int = 0
    sheets: list[str] = field(default_factory=list)


def _first_filled(row: pd.Series) -> Any:
    return next((v for v in row if not is_blank(v)), None)


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Map headers onto Transaction fields, ignoring case and spacing. Headers
    that map to the same field ("Date" and "date") are merged, the first
    non-blank value winning.
    """
    names = []
    for col in df.columns:
        key = " ".join(str(col).strip().lower().split())
        names.append(COLUMN_MAP.get(key, col))

    merged = {}
    for name in dict.fromkeys(names):
        positions = [i for i, n in enumerate(names) if n == name]
        if len(positions) == 1 or df.empty:
            merged[name] = df.iloc[:, positions[0]]
        else:
            merged[name] = df.iloc[:, positions].apply(_first_filled, axis=1)
    return pd.DataFrame(merged, index=df.index)


def rows_from_frame(df: pd.DataFrame, known_accounts: set[str]) -> tuple[list[Transaction], int]:
    """
    Turn one sheet into transactions.

    Rows need a date, a debit account and a credit account, and both accounts
    must be known; anything else is logged and dropped. A blank or non-numeric
    amount counts as 0.
    """
    df = _normalize_columns(df)
    out: list[Transaction] = []
    skipped = 0

    for i, r in enumerate(df.to_dict(orient="records"), start=2):
        d = r.get("date")
        dr = r.get("debit_account")
        cr = r.get("credit_account")
        if is_blank(d) or is_blank(dr) or is_blank(cr):
            logger.warning("Skipping row %d: missing date or account: %s", i, r)
            skipped += 1
            continue

        dr = str(dr).strip()
        cr = str(cr).strip()
        if dr not in known_accounts or cr not in known_accounts:
            logger.warning("Skipping row %d; missing account: %s", i, r)
            skipped += 1
            continue

        desc = r.get("description")
        out.append(
            Transaction(
                date=normalize_date(d),
                description="" if is_blank(desc) else str(desc).strip(),
                debit_account=dr,
                credit_account=cr,
                amount=to_float(r.get("amount"), default=0.0),
            )
        )

    return out, skipped


def import_transactions(conn, source: Union[str, Path, IO[bytes]]) -> ImportResult:
    """
    Append transactions from every sheet named "Transactions" (any case) in an
    Excel workbook. Bad rows are skipped; the import itself never fails on them.
    """
    sheets = pd.read_excel(source, sheet_name=None, engine="openpyxl")
    known = {a.name for a in load_accounts(conn)}

    result = ImportResult()
    new_rows: list[Transaction] = []
    for sheet_name, df in sheets.items():
        if str(sheet_name).strip().lower() != SHEET_NAME:
            continue
        rows, skipped = rows_from_frame(df, known)
        new_rows.extend(rows)
        result.skipped += skipped
        result.sheets.append(str(sheet_name))

    if not result.sheets:
        logger.warning("No 'Transactions' sheet found in workbook")

    if new_rows:
        transactions = load_transactions(conn)
        transactions.extend(new_rows)
        save_transactions(conn, transactions)

    result.imported = len(new_rows)
    logger.info("Imported %d transaction(s), skipped %d", result.imported, result.skipped)
    return result


def _row_to_dict(tx: Transaction) -> dict[str, Any]:
    return {
        "Date": tx.date,
        "Description": tx.description,
        "Debit Account": tx.debit_account,
        "Credit Account": tx.credit_account,
        "Amount": tx.amount,
    }


def template_xlsx(transactions: list[Transaction] | None = None) -> bytes:
    """Workbook in the import layout, empty unless transactions are given."""
    rows = [_row_to_dict(t) for t in (transactions or [])]
    df = pd.DataFrame(rows, columns=["Date", "Description", "Debit Account", "Credit Account", "Amount"])
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Transactions", index=False)
    return buf.getvalue()
