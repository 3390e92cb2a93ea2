from __future__ import annotations

import streamlit as st

from ledger.config import configure_logging

configure_logging()

st.set_page_config(page_title="Batch Ledger", page_icon="📒", layout="wide")

pages = [
    st.Page("home.py", title="Home", icon="🏠"),
    st.Page("pages/1_📥_Purchases.py", title="Purchases", icon="📥"),
    st.Page("pages/2_🛒_Sales.py", title="Sales", icon="🛒"),
    st.Page("pages/3_🧾_Expenses.py", title="Expenses", icon="🧾"),
    st.Page("pages/4_💵_Payments.py", title="Payments", icon="💵"),
    st.Page("pages/5_🧪_Data_Management.py", title="Data Management", icon="🧪"),
    st.Page("pages/6_📊_Reports.py", title="Reports", icon="📊"),
]

st.navigation(pages).run()
