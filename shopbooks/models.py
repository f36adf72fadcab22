from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional

ACCOUNT_TYPES = ("Asset", "Liability", "Equity", "Revenue", "Expense")


def _pick(d: dict, *keys: str, default: Any = None) -> Any:
    # Accepts the current snake_case keys and the legacy camelCase/short ones.
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    return default


def _require(d: dict, *keys: str) -> Any:
    v = _pick(d, *keys)
    if v is None or str(v).strip() == "":
        raise KeyError(keys[0])
    return v


@dataclass
class Account:
    name: str
    type: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Account":
        return cls(name=str(d["name"]), type=str(d["type"]))


@dataclass
class Transaction:
    date: str
    description: str
    debit_account: str
    credit_account: str
    amount: float

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Transaction":
        return cls(
            date=str(d["date"]),
            description=str(_pick(d, "description", "desc", default="")),
            debit_account=str(_require(d, "debit_account", "debit")),
            credit_account=str(_require(d, "credit_account", "credit")),
            amount=float(_pick(d, "amount", default=0.0)),
        )


@dataclass
class StockItem:
    name: str
    quantity: int
    unit_price: float
    last_closing: Optional[int] = None

    @property
    def value(self) -> float:
        return self.quantity * self.unit_price

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "StockItem":
        closing = _pick(d, "last_closing", "closing")
        return cls(
            name=str(d["name"]),
            quantity=int(_pick(d, "quantity", "qty", default=0)),
            unit_price=float(_pick(d, "unit_price", "price", default=0.0)),
            last_closing=int(closing) if closing is not None else None,
        )


@dataclass
class StockHistoryEntry:
    date: str
    item: str
    opening: int
    closing: int
    consumed: int
    value_opening: float
    value_closing: float

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "StockHistoryEntry":
        return cls(
            date=str(d["date"]),
            item=str(d["item"]),
            opening=int(d["opening"]),
            closing=int(d["closing"]),
            consumed=int(d["consumed"]),
            value_opening=float(_pick(d, "value_opening", "valueOpening", default=0.0)),
            value_closing=float(_pick(d, "value_closing", "valueClosing", default=0.0)),
        )


@dataclass
class ShiftReport:
    date: str
    shift: str
    employee: str
    opening_cash: float
    sales: float
    payments: float
    actual_cash: float
    expected_cash: float
    variance: float

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "ShiftReport":
        return cls(
            date=str(d["date"]),
            shift=str(_pick(d, "shift", "shiftTime", default="")),
            employee=str(_pick(d, "employee", default="")),
            opening_cash=float(_pick(d, "opening_cash", "openingCash", default=0.0)),
            sales=float(_pick(d, "sales", default=0.0)),
            payments=float(_pick(d, "payments", default=0.0)),
            actual_cash=float(_pick(d, "actual_cash", "actualCash", default=0.0)),
            expected_cash=float(_pick(d, "expected_cash", "expectedCash", default=0.0)),
            variance=float(_pick(d, "variance", default=0.0)),
        )


@dataclass
class ShiftProduct:
    """One row of the end-of-shift sales sheet."""

    name: str
    opening_stock: int
    quantity_sold: int
    price: float

    @property
    def closing_stock(self) -> int:
        return self.opening_stock - self.quantity_sold

    @property
    def revenue(self) -> float:
        return self.quantity_sold * self.price

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "ShiftProduct":
        return cls(
            name=str(_pick(d, "name", "productName", default="")),
            opening_stock=int(_pick(d, "opening_stock", "openingStock", default=0)),
            quantity_sold=int(_pick(d, "quantity_sold", "quantitySold", default=0)),
            price=float(_pick(d, "price", default=0.0)),
        )


@dataclass
class CashRow:
    date: str
    description: str
    debit_account: str
    credit_account: str
    amount: float
    balance: float
