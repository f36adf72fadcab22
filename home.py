from __future__ import annotations

import streamlit as st

from shopbooks.db import bootstrap
from shopbooks.services.stock import stock_summary
from shopbooks.services.transactions import get_cash_on_hand
from shopbooks.store import load_state
from shopbooks.utils import money

st.set_page_config(page_title="Shop Books", page_icon="📒", layout="wide")

st.title("📒 Shop Books")
st.caption("Chart of accounts, double-entry transactions, stock take with daily roll-over, and end-of-shift cash reconciliation.")

settings, conn = bootstrap()
state = load_state(conn)

with st.sidebar:
    st.subheader("Environment")
    st.write(f"**Data directory:** `{settings.data_dir}`")
    st.write(f"**Database:** `{settings.db_path.name}`")

c1, c2, c3, c4 = st.columns(4)
c1.metric("Accounts", f"{len(state.accounts)}")
c2.metric("Transactions", f"{len(state.transactions)}")
c3.metric("Stock value", money(stock_summary(state.stock).total_value, settings.currency))
c4.metric("Cash on hand", money(get_cash_on_hand(conn), settings.currency))

st.info(
    "Use the left sidebar navigation. Start with **📒 Accounts** (or load demo data in **🧪 Data Management**), then post **Transactions** and record **Stock Take** closings.",
    icon="ℹ️",
)
