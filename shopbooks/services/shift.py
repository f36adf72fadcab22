from __future__ import annotations

import logging
from typing import Any, Optional

from shopbooks.models import ShiftReport
from shopbooks.store import load_shift_report, save_shift_report
from shopbooks.utils import is_blank, normalize_date, to_float

logger = logging.getLogger(__name__)


def _cash(label: str, v: Any) -> float:
    # Blank means nothing was counted for that line.
    if is_blank(v):
        return 0.0
    f = to_float(v)
    if f is None:
        raise ValueError(f"{label} must be a number.")
    if f < 0:
        raise ValueError(f"{label} must be >= 0.")
    return f


def compute_shift(opening_cash: float, sales: float, payments: float, actual_cash: float) -> tuple[float, float]:
    """Returns (expected_cash, variance); a positive variance means cash is short."""
    expected = float(opening_cash) + float(sales) - float(payments)
    return expected, expected - float(actual_cash)


def generate_shift_report(
    conn,
    *,
    date: Any,
    shift: str,
    employee: str,
    opening_cash: Any = None,
    sales: Any = None,
    payments: Any = None,
    actual_cash: Any = None,
) -> ShiftReport:
    if is_blank(date):
        raise ValueError("Shift date is required.")

    oc = _cash("Opening cash", opening_cash)
    s = _cash("Cash sales", sales)
    p = _cash("Cash payments", payments)
    ac = _cash("Actual cash", actual_cash)
    expected, variance = compute_shift(oc, s, p, ac)

    report = ShiftReport(
        date=normalize_date(date),
        shift=str(shift or "").strip(),
        employee=str(employee or "").strip(),
        opening_cash=oc,
        sales=s,
        payments=p,
        actual_cash=ac,
        expected_cash=expected,
        variance=variance,
    )
    save_shift_report(conn, report)
    logger.info("Shift report %s/%s: expected %.2f, variance %.2f", report.date, report.shift, expected, variance)
    return report


def latest_shift_report(conn) -> Optional[ShiftReport]:
    return load_shift_report(conn)


REPORT_LINES = (
    ("Date", "date"),
    ("Shift", "shift"),
    ("Employee", "employee"),
    ("Opening Cash (Float)", "opening_cash"),
    ("Total Cash Receipts/Sales", "sales"),
    ("Total Cash Disbursements/Payments", "payments"),
    ("Expected Cash on Hand", "expected_cash"),
    ("Actual Cash on Hand", "actual_cash"),
    ("Variance", "variance"),
)


def report_lines(report: ShiftReport, currency: str = "K") -> list[tuple[str, str]]:
    """Label/value pairs in display order, money already formatted."""
    out = []
    for label, attr in REPORT_LINES:
        v = getattr(report, attr)
        out.append((label, f"{currency}{v:.2f}" if isinstance(v, float) else str(v)))
    return out
