from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import pandas as pd

from ledger.models import (
    NONAME,
    BatchStat,
    CustomerDebt,
    Purchase,
    Report,
    Snapshot,
    Totals,
)
from ledger.services.naming import batch_name_of

logger = logging.getLogger(__name__)


@dataclass
class _BatchAcc:
    batch: Purchase
    purchased_qty: float
    unit_cost: float
    sold_qty: float = 0.0
    sales_revenue: float = 0.0
    expenses_total: float = 0.0


@dataclass
class _CustomerAcc:
    invoiced: float = 0.0
    paid: float = 0.0


def customer_key(customer: Optional[str]) -> str:
    """Blank and whitespace-only names both group under (noname)."""
    # Case-sensitive: "Acme" and "acme" are different customers.
    if customer and customer.strip():
        return customer
    return NONAME


def batch_stats(snapshot: Snapshot) -> list[BatchStat]:
    """
    One entry per purchase, including batches with no sales or expenses.

    Sales and expenses whose batch_id matches no purchase are skipped here.
    Expenses are charged in full to their batch (no proration to sold units).
    """
    acc: dict[Any, _BatchAcc] = {}
    for p in snapshot.purchases:
        acc[p.id] = _BatchAcc(batch=p, purchased_qty=p.quantity, unit_cost=p.unit_price)

    dangling_sales = 0
    for s in snapshot.sales:
        a = acc.get(s.batch_id) if s.batch_id is not None else None
        if a is None:
            dangling_sales += 1
            continue
        a.sold_qty += s.quantity
        a.sales_revenue += s.invoiced

    dangling_expenses = 0
    for e in snapshot.expenses:
        a = acc.get(e.batch_id) if e.batch_id is not None else None
        if a is None:
            dangling_expenses += 1
            continue
        a.expenses_total += e.amount

    if dangling_sales or dangling_expenses:
        logger.debug(
            "Skipped %d dangling sale(s) and %d dangling expense(s) in batch aggregation",
            dangling_sales,
            dangling_expenses,
        )

    out: list[BatchStat] = []
    for batch_id, a in acc.items():
        purchased = a.purchased_qty
        sold = a.sold_qty
        stock = max(0.0, purchased - sold)
        revenue = a.sales_revenue
        cogs = a.unit_cost * sold
        out.append(
            BatchStat(
                batch_id=batch_id,
                batch=a.batch,
                purchased_qty=purchased,
                sold_qty=sold,
                stock=stock,
                stock_cost=stock * a.unit_cost,
                unit_cost=a.unit_cost,
                expenses_total=a.expenses_total,
                revenue=revenue,
                cogs=cogs,
                profit=revenue - cogs - a.expenses_total,
                over_sold=sold > purchased,
            )
        )
    return out


def customer_debts(snapshot: Snapshot) -> list[CustomerDebt]:
    """
    Invoiced vs paid per customer. Dangling sales still count here:
    invoicing follows the customer, not the batch.
    """
    acc: dict[str, _CustomerAcc] = {}
    for s in snapshot.sales:
        acc.setdefault(customer_key(s.customer), _CustomerAcc()).invoiced += s.invoiced
    for p in snapshot.payments:
        acc.setdefault(customer_key(p.customer), _CustomerAcc()).paid += p.amount

    return [
        CustomerDebt(customer=c, invoiced=a.invoiced, paid=a.paid, balance=a.invoiced - a.paid)
        for c, a in acc.items()
    ]


def totals_of(per_batch: list[BatchStat], debts: list[CustomerDebt]) -> Totals:
    # Only positive balances are unpaid; customers in credit don't offset them.
    return Totals(
        revenue=sum(b.revenue for b in per_batch),
        cogs=sum(b.cogs for b in per_batch),
        expenses_full=sum(b.expenses_total for b in per_batch),
        profit=sum(b.profit for b in per_batch),
        paid_total=sum(c.paid for c in debts),
        unpaid_total=sum(max(0.0, c.balance) for c in debts),
        stock_qty=sum(b.stock for b in per_batch),
        stock_cost=sum(b.stock_cost for b in per_batch),
    )


def compute_report(snapshot: Any) -> Report:
    """
    Pure report over a full snapshot: per-batch stats, customer debts, totals.

    Accepts a Snapshot or any mapping with purchases/sales/expenses/payments;
    missing or non-list collections are treated as empty. Never mutates its
    input and never raises for record-shaped input.
    """
    snap = Snapshot.from_dict(snapshot)
    per_batch = batch_stats(snap)
    debts = customer_debts(snap)
    totals = totals_of(per_batch, debts)
    logger.debug(
        "Report computed: %d batch(es), %d customer(s), profit=%.2f",
        len(per_batch),
        len(debts),
        totals.profit,
    )
    return Report(per_batch=per_batch, customer_debts=debts, totals=totals)


def known_customers(snapshot: Any) -> list[str]:
    snap = Snapshot.from_dict(snapshot)
    names = {s.customer for s in snap.sales if s.customer and s.customer.strip()}
    names |= {p.customer for p in snap.payments if p.customer and p.customer.strip()}
    return sorted(names)


# -------------------------
# Tabular views for display
# -------------------------

STOCK_COLUMNS = ["batch", "date", "purchased", "sold", "stock", "unit_cost", "over_sold"]
PNL_COLUMNS = ["batch", "revenue", "cogs", "expenses_total", "stock_cost", "profit"]
DEBT_COLUMNS = ["customer", "invoiced", "paid", "balance"]


def report_frames(report: Report) -> dict[str, pd.DataFrame]:
    """
    DataFrames for the Reports page: stock by batch, P&L by batch, customer debts.
    Rows are sorted by batch date/name and customer name for stable display.
    """
    batch_rows = [
        {
            "batch": batch_name_of(b.batch),
            "date": b.batch.date or "-",
            "purchased": b.purchased_qty,
            "sold": b.sold_qty,
            "stock": b.stock,
            "unit_cost": b.unit_cost,
            "over_sold": b.over_sold,
            "revenue": b.revenue,
            "cogs": b.cogs,
            "expenses_total": b.expenses_total,
            "stock_cost": b.stock_cost,
            "profit": b.profit,
        }
        for b in report.per_batch
    ]
    batches = pd.DataFrame(batch_rows, columns=sorted(set(STOCK_COLUMNS + PNL_COLUMNS)))
    if not batches.empty:
        batches = batches.sort_values(["date", "batch"], ignore_index=True)

    debts = pd.DataFrame(
        [
            {"customer": c.customer, "invoiced": c.invoiced, "paid": c.paid, "balance": c.balance}
            for c in report.customer_debts
        ],
        columns=DEBT_COLUMNS,
    )
    if not debts.empty:
        debts = debts.sort_values("customer", ignore_index=True)

    return {
        "stock": batches[STOCK_COLUMNS],
        "pnl": batches[PNL_COLUMNS],
        "debts": debts,
    }
