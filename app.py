from __future__ import annotations

import streamlit as st

st.set_page_config(page_title="Shop Books", page_icon="📒", layout="wide")

pages = [
    st.Page("home.py", title="Home", icon="🏠"),
    st.Page("pages/1_📒_Accounts.py", title="Accounts", icon="📒"),
    st.Page("pages/2_💸_Transactions.py", title="Transactions", icon="💸"),
    st.Page("pages/3_📊_Charts.py", title="Charts", icon="📊"),
    st.Page("pages/4_📦_Stock_Take.py", title="Stock Take", icon="📦"),
    st.Page("pages/5_🧾_Shift_Report.py", title="Shift Report", icon="🧾"),
    st.Page("pages/6_🛒_Shift_Sales.py", title="Shift Sales", icon="🛒"),
    st.Page("pages/7_🧪_Data_Management.py", title="Data Management", icon="🧪"),
]

st.navigation(pages).run()
