"""
File exports: Excel workbooks (pandas + openpyxl), PDF reports (reportlab)
and the shift report as a Word-compatible HTML document.

Every function returns the file content as bytes (or str for HTML) so pages
can hand it straight to st.download_button.
"""
from __future__ import annotations

import html
from io import BytesIO
from typing import Iterable, Optional

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Image, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from shopbooks.models import Account, ShiftProduct, ShiftReport, StockHistoryEntry, StockItem, Transaction
from shopbooks.services.shift import report_lines
from shopbooks.services.shift_sales import sheet_totals

GRID_STYLE = [
    ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
    ("BACKGROUND", (0, 0), (-1, 0), colors.whitesmoke),
    ("FONTSIZE", (0, 0), (-1, -1), 9),
]


# -------------------------
# Frames
# -------------------------

def accounts_frame(accounts: Iterable[Account]) -> pd.DataFrame:
    return pd.DataFrame([a.to_dict() for a in accounts], columns=["name", "type"])


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    return pd.DataFrame(
        [t.to_dict() for t in transactions],
        columns=["date", "description", "debit_account", "credit_account", "amount"],
    )


def stock_frame(items: Iterable[StockItem]) -> pd.DataFrame:
    rows = [
        {"name": s.name, "opening_qty": s.quantity, "unit_price": s.unit_price, "last_closing": s.last_closing}
        for s in items
    ]
    return pd.DataFrame(rows, columns=["name", "opening_qty", "unit_price", "last_closing"])


def history_frame(history: Iterable[StockHistoryEntry]) -> pd.DataFrame:
    return pd.DataFrame(
        [h.to_dict() for h in history],
        columns=["date", "item", "opening", "closing", "consumed", "value_opening", "value_closing"],
    )


def _workbook(sheets: dict[str, pd.DataFrame]) -> bytes:
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, df in sheets.items():
            df.to_excel(writer, sheet_name=name, index=False)
    return buf.getvalue()


def all_records_xlsx(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    items: Iterable[StockItem],
    history: Iterable[StockHistoryEntry],
) -> bytes:
    return _workbook(
        {
            "Accounts": accounts_frame(accounts),
            "Transactions": transactions_frame(transactions),
            "Stock": stock_frame(items),
            "StockHistory": history_frame(history),
        }
    )


def stock_xlsx(items: Iterable[StockItem], history: Iterable[StockHistoryEntry]) -> bytes:
    return _workbook({"Stock": stock_frame(items), "StockHistory": history_frame(history)})


# -------------------------
# PDF
# -------------------------

def _doc(buf: BytesIO) -> SimpleDocTemplate:
    return SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
    )


def _table(rows: list[list], col_widths: Optional[list[float]] = None, right_from: int = 1) -> Table:
    t = Table(rows, colWidths=col_widths, repeatRows=1)
    style = list(GRID_STYLE)
    if len(rows) > 1:
        style.append(("ALIGN", (right_from, 1), (-1, -1), "RIGHT"))
    t.setStyle(TableStyle(style))
    return t


def stock_pdf(items: Iterable[StockItem], history: Iterable[StockHistoryEntry], currency: str = "K") -> bytes:
    items = list(items)
    history = list(history)
    styles = getSampleStyleSheet()

    buf = BytesIO()
    doc = _doc(buf)
    story = [Paragraph("Stock Report", styles["Title"]), Spacer(1, 6)]

    rows = [["Item", "Opening", f"Unit ({currency})", "Last Closing", f"Value ({currency})"]]
    for s in items:
        rows.append(
            [
                s.name,
                str(s.quantity),
                f"{s.unit_price:.2f}",
                "N/A" if s.last_closing is None else str(s.last_closing),
                f"{s.value:.2f}",
            ]
        )
    story.append(_table(rows, [60 * mm, 25 * mm, 30 * mm, 30 * mm, 35 * mm]))
    story.append(Spacer(1, 10))

    story.append(Paragraph("Stock History (latest first)", styles["Heading2"]))
    if not history:
        story.append(Paragraph("No closing stock records yet.", styles["Normal"]))
    else:
        rows = [["Date", "Item", "Opening", "Closing", "Consumed", f"Value open ({currency})", f"Value close ({currency})"]]
        for h in reversed(history):
            rows.append(
                [
                    h.date,
                    h.item,
                    str(h.opening),
                    str(h.closing),
                    str(h.consumed),
                    f"{h.value_opening:.2f}",
                    f"{h.value_closing:.2f}",
                ]
            )
        story.append(_table(rows, [22 * mm, 40 * mm, 18 * mm, 18 * mm, 20 * mm, 31 * mm, 31 * mm], right_from=2))

    doc.build(story)
    return buf.getvalue()


def shift_pdf(report: ShiftReport, currency: str = "K") -> bytes:
    styles = getSampleStyleSheet()
    buf = BytesIO()
    doc = _doc(buf)
    story = [Paragraph("End-of-Shift Cash Reconciliation", styles["Title"]), Spacer(1, 6)]

    rows = [["Line", "Value"]] + [[label, value] for label, value in report_lines(report, currency)]
    story.append(_table(rows, [90 * mm, 50 * mm]))
    story.append(Spacer(1, 12))
    story.append(Paragraph("Notes/Comments: ____________________________", styles["Normal"]))

    doc.build(story)
    return buf.getvalue()


def shift_sales_pdf(products: Iterable[ShiftProduct], currency: str = "K") -> bytes:
    products = list(products)
    styles = getSampleStyleSheet()
    buf = BytesIO()
    doc = _doc(buf)
    story = [Paragraph("End of Shift Sales Report", styles["Title"]), Spacer(1, 6)]

    rows = [["Product Name", "Opening Stock", "Quantity Sold", "Closing Stock", "Price", "Revenue"]]
    for p in products:
        rows.append(
            [p.name, str(p.opening_stock), str(p.quantity_sold), str(p.closing_stock), f"{p.price:.2f}", f"{p.revenue:.2f}"]
        )
    t = _table(rows, [50 * mm, 26 * mm, 26 * mm, 26 * mm, 22 * mm, 30 * mm])
    t.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1a237e")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ]
        )
    )
    story.append(t)
    story.append(Spacer(1, 10))

    totals = sheet_totals(products)
    story.append(Paragraph("Summary", styles["Heading2"]))
    for line in (
        f"Total Opening Stock: {totals.opening_stock}",
        f"Total Quantity Sold: {totals.quantity_sold}",
        f"Total Closing Stock: {totals.closing_stock}",
        f"Total Revenue: {currency}{totals.revenue:.2f}",
    ):
        story.append(Paragraph(line, styles["Normal"]))

    doc.build(story)
    return buf.getvalue()


def charts_pdf(pngs: Iterable[tuple[str, bytes]]) -> bytes:
    """Stack chart images on A4 pages, scaled to the page width."""
    pngs = list(pngs)
    if not pngs:
        raise ValueError("No charts to export.")

    buf = BytesIO()
    doc = _doc(buf)
    max_w = doc.width
    max_h = doc.height - 10 * mm
    story = []
    used_h = 0.0
    for _name, png in pngs:
        iw, ih = ImageReader(BytesIO(png)).getSize()
        w = max_w
        h = ih * w / iw
        if h > max_h:
            h = max_h
            w = iw * h / ih
        if story and used_h + h > doc.height:
            story.append(PageBreak())
            used_h = 0.0
        story.append(Image(BytesIO(png), width=w, height=h))
        story.append(Spacer(1, 8))
        used_h += h + 8
    doc.build(story)
    return buf.getvalue()


# -------------------------
# Word-compatible HTML
# -------------------------

def shift_word_html(report: ShiftReport, currency: str = "K") -> str:
    lines = "".join(
        f"<strong>{html.escape(label)}:</strong> {html.escape(value)}<br>"
        for label, value in report_lines(report, currency)
    )
    return (
        '<html><head><meta charset="utf-8"><title>Shift Report</title></head><body>'
        "<h2>End-of-Shift Cash Reconciliation</h2>"
        f"{lines}"
        "<strong>Notes/Comments:</strong> ____________________________<br>"
        "</body></html>"
    )


def shift_filename(report: ShiftReport, ext: str) -> str:
    return f"Shift-{report.date}.{ext}"
