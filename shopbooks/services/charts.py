from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Iterable, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from shopbooks.models import Account, Transaction
from shopbooks.services.accounts import account_types_by_name
from shopbooks.services.transactions import compute_balances, group_by_date

TYPE_PALETTE = {
    "Expense": ["#ff6b6b", "#ef5350", "#e53935"],
    "Liability": ["#ff8a80", "#ff5252"],
    "Revenue": ["#4caf50", "#66bb6a"],
    "Asset": ["#42a5f5", "#29b6f6"],
    "Equity": ["#ab47bc", "#ba68c8"],
}
FALLBACK_COLOR = "#90a4ae"
UNKNOWN_TYPE_COLOR = "#b0bec5"


@dataclass
class PieData:
    title: str
    labels: list[str] = field(default_factory=list)
    values: list[float] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(self.values)

    def percentages(self) -> list[float]:
        t = self.total
        return [(v / t * 100.0) if t else 0.0 for v in self.values]


def slice_color(tx: Transaction, types: dict[str, str]) -> str:
    dt = types.get(tx.debit_account)
    ct = types.get(tx.credit_account)
    if dt == "Expense":
        return "#ef5350"
    if ct == "Revenue":
        return "#43a047"
    if dt == "Asset":
        return "#42a5f5"
    if ct == "Liability":
        return "#e53935"
    if ct == "Equity":
        return "#8e24aa"
    return FALLBACK_COLOR


def daily_pies(accounts: Iterable[Account], transactions: Iterable[Transaction]) -> list[PieData]:
    """One pie per transaction date (oldest first); one slice per transaction."""
    types = account_types_by_name(accounts)
    pies = []
    for d, day_tx in group_by_date(transactions).items():
        pies.append(
            PieData(
                title=f"Transactions Pie - {d}",
                labels=[t.description for t in day_tx],
                values=[abs(float(t.amount)) for t in day_tx],
                colors=[slice_color(t, types) for t in day_tx],
            )
        )
    return pies


def all_time_pie(accounts: Iterable[Account], transactions: Iterable[Transaction]) -> Optional[PieData]:
    """
    One slice per registered account with a non-zero balance, sized by the
    absolute balance. Colours cycle through the palette of the account's type.
    Returns None when every balance is zero.
    """
    accounts = list(accounts)
    balances = compute_balances(accounts, transactions)
    pie = PieData(title="All-time Account Balances")
    color_index: dict[str, int] = {}
    for acc in accounts:
        bal = balances.get(acc.name, 0.0)
        if bal == 0:
            continue
        palette = TYPE_PALETTE.get(acc.type, [UNKNOWN_TYPE_COLOR])
        i = color_index.get(acc.type, 0) % len(palette)
        pie.labels.append(f"{acc.name} ({acc.type})")
        pie.values.append(abs(bal))
        pie.colors.append(palette[i])
        color_index[acc.type] = i + 1
    return pie if pie.labels else None


def _to_png(fig) -> bytes:
    fig.tight_layout()
    buf = io.BytesIO()
    fig.savefig(buf, format="png", bbox_inches="tight")
    plt.close(fig)
    return buf.getvalue()


def render_pie_png(pie: PieData, currency: str = "K", width: int = 640, height: int = 520) -> bytes:
    fig, ax = plt.subplots(figsize=(width / 100.0, height / 100.0), dpi=100)

    if pie.total <= 0:
        ax.text(0.5, 0.5, "No amounts to chart", ha="center", va="center")
        ax.set_title(pie.title)
        ax.axis("off")
        return _to_png(fig)

    def _autopct(pct: float) -> str:
        return f"{pct:.1f}%" if pct > 0 else ""

    wedges, _texts, autotexts = ax.pie(
        pie.values,
        colors=pie.colors,
        autopct=_autopct,
        startangle=90,
        counterclock=False,
        wedgeprops={"edgecolor": "white", "linewidth": 1},
    )
    for t in autotexts:
        t.set_color("white")
        t.set_fontweight("bold")
        t.set_fontsize(10)

    legend_labels = [f"{label}: {currency}{v:,.2f}" for label, v in zip(pie.labels, pie.values)]
    ax.legend(wedges, legend_labels, loc="upper center", bbox_to_anchor=(0.5, -0.02), ncol=2, fontsize=8, frameon=False)
    ax.set_title(pie.title)
    ax.axis("equal")

    return _to_png(fig)


def render_all_pngs(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    currency: str = "K",
) -> list[tuple[str, bytes]]:
    """(filename, png) for every daily pie plus the all-time pie."""
    accounts = list(accounts)
    transactions = list(transactions)
    out = []
    for i, pie in enumerate(daily_pies(accounts, transactions), start=1):
        out.append((f"Chart-{i}.png", render_pie_png(pie, currency)))
    overall = all_time_pie(accounts, transactions)
    if overall is not None:
        out.append(("AllTimeChart.png", render_pie_png(overall, currency)))
    return out
