from __future__ import annotations

import math
from datetime import datetime, date, timezone
from typing import Any, Optional


def iso_today() -> str:
    return date.today().isoformat()


def iso_now() -> str:
    # Use UTC ISO timestamps for consistency.
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def is_blank(v: Any) -> bool:
    if v is None:
        return True
    # NaN and NaT never equal themselves.
    if v != v:
        return True
    return str(v).strip() == ""


def to_float(v: Any, default: Optional[float] = None) -> Optional[float]:
    if is_blank(v):
        return default
    try:
        f = float(v)
    except (TypeError, ValueError):
        return default
    if math.isnan(f):
        return default
    return f


def to_int(v: Any, default: Optional[int] = None) -> Optional[int]:
    f = to_float(v)
    if f is None:
        return default
    return int(f)


def normalize_date(v: Any) -> Optional[str]:
    """
    Coerce date-like values (date, datetime, pandas Timestamp, ISO strings)
    into a YYYY-MM-DD string. Unparseable strings are returned stripped.
    """
    if is_blank(v):
        return None
    if isinstance(v, datetime):
        return v.date().isoformat()
    if isinstance(v, date):
        return v.isoformat()
    s = str(v).strip()
    try:
        return datetime.fromisoformat(s).date().isoformat()
    except ValueError:
        return s


def money(v: float, currency: str = "K") -> str:
    return f"{currency}{float(v):,.2f}"
