from __future__ import annotations

import streamlit as st

from ledger.config import get_settings
from ledger.db import get_conn, ensure_schema
from ledger.services import store

st.title("📒 Batch Ledger")
st.caption("Batch costing: purchases, sales, expenses and customer payments, with stock, COGS, profit and debts per batch.")

settings = get_settings()
conn = get_conn(settings.db_path)
ensure_schema(conn)

with st.sidebar:
    st.subheader("Environment")
    st.write(f"**Data directory:** `{settings.data_dir}`")
    st.write(f"**Database:** `{settings.db_path.name}`")
    st.write(f"**Currency:** {settings.currency}")

counts = store.count_rows(conn)
c1, c2, c3, c4 = st.columns(4)
c1.metric("Purchases (batches)", counts["purchases"])
c2.metric("Sales", counts["sales"])
c3.metric("Expenses", counts["expenses"])
c4.metric("Payments", counts["payments"])

st.info(
    "Use the left sidebar navigation. Start with **🧪 Data Management** to load demo data or import a backup, "
    "then record **Purchases**, **Sales**, **Expenses** and **Payments** and check **Reports**.",
    icon="ℹ️",
)
