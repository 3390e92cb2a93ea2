from __future__ import annotations

from typing import Any, Optional

from ledger.models import Sale
from ledger.services import store
from ledger.utils import parse_num, reconcile_price_amount


def _normalize_customer(customer: Optional[str]) -> Optional[str]:
    if customer is None:
        return None
    s = str(customer).strip()
    return s if s else None


def _require_batch(conn, batch_id: Any) -> str:
    batch_id = str(batch_id or "").strip()
    if not batch_id:
        raise ValueError("Batch is required.")
    if store.get_row(conn, "purchases", batch_id) is None:
        raise ValueError("Batch not found.")
    return batch_id


def list_sales(conn) -> list[Sale]:
    return [Sale.from_dict(r) for r in store.load_rows(conn, "sales")]


def get_sale(conn, sale_id: str) -> Optional[Sale]:
    row = store.get_row(conn, "sales", sale_id)
    return Sale.from_dict(row) if row else None


def _sale_fields(
    conn,
    sale_date: Any,
    batch_id: Any,
    customer: Optional[str],
    quantity: Any,
    unit_price: Any,
    amount: Any,
) -> dict[str, Any]:
    sale_date = str(sale_date or "").strip()
    if not sale_date:
        raise ValueError("Sale date is required.")

    cust = _normalize_customer(customer)
    if cust is None:
        raise ValueError("Customer is required.")

    qty = parse_num(quantity)
    if qty <= 0:
        raise ValueError("Quantity sold must be > 0.")
    if parse_num(unit_price) < 0 or parse_num(amount) < 0:
        raise ValueError("Unit price and amount cannot be negative.")

    up, _ = reconcile_price_amount(qty, unit_price, amount)
    if up <= 0:
        raise ValueError("Unit price (or total amount) is required.")

    return {
        "date": sale_date,
        "batch_id": _require_batch(conn, batch_id),
        "customer": cust,
        "quantity": qty,
        "unit_price": up,
        "amount": qty * up,
    }


def create_sale(
    conn,
    *,
    sale_date: str,
    batch_id: str,
    customer: Optional[str],
    quantity: Any,
    unit_price: Any = None,
    amount: Any = None,
) -> str:
    """
    Posts a sale against one batch. Selling more than the batch holds is allowed;
    the report flags the batch as over-sold instead.
    """
    fields = _sale_fields(conn, sale_date, batch_id, customer, quantity, unit_price, amount)
    return store.add_row(conn, "sales", fields)


def update_sale(
    conn,
    sale_id: str,
    *,
    sale_date: str,
    batch_id: str,
    customer: Optional[str],
    quantity: Any,
    unit_price: Any = None,
    amount: Any = None,
) -> None:
    if get_sale(conn, sale_id) is None:
        raise ValueError("Sale not found.")
    fields = _sale_fields(conn, sale_date, batch_id, customer, quantity, unit_price, amount)
    store.update_row(conn, "sales", sale_id, fields)


def delete_sale(conn, sale_id: str) -> None:
    store.delete_row(conn, "sales", sale_id)
