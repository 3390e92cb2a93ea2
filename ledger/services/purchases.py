from __future__ import annotations

from typing import Any, Optional

from ledger.models import Purchase
from ledger.services import store
from ledger.services.naming import format_batch_name, format_sequence, next_seq_for_date
from ledger.utils import parse_num, reconcile_price_amount


def list_purchases(conn) -> list[Purchase]:
    return [Purchase.from_dict(r) for r in store.load_rows(conn, "purchases")]


def get_purchase(conn, purchase_id: str) -> Optional[Purchase]:
    row = store.get_row(conn, "purchases", purchase_id)
    return Purchase.from_dict(row) if row else None


def _next_sequence(conn, purchase_date: str, exclude_id: Optional[str] = None) -> str:
    # The record being edited is not one of the "existing" purchases of its day.
    others = [p for p in list_purchases(conn) if p.id != exclude_id]
    return next_seq_for_date(others, purchase_date)


def _validated(purchase_date: Any, quantity: Any, unit_price: Any, amount: Any) -> tuple[str, float, float, float]:
    purchase_date = str(purchase_date or "").strip()
    if not purchase_date:
        raise ValueError("Purchase date is required.")

    qty = parse_num(quantity)
    if qty <= 0:
        raise ValueError("Quantity must be > 0.")
    if parse_num(unit_price) < 0 or parse_num(amount) < 0:
        raise ValueError("Unit price and amount cannot be negative.")

    up, _ = reconcile_price_amount(qty, unit_price, amount)
    if up <= 0:
        raise ValueError("Unit price (or total amount) is required.")
    return purchase_date, qty, up, qty * up


def create_purchase(
    conn,
    *,
    purchase_date: str,
    quantity: Any,
    unit_price: Any = None,
    amount: Any = None,
) -> str:
    """
    Creates ONE purchase, which is ONE batch.

    The batch name is fixed here from the date and the intra-day sequence:
      P - {DDMMYYYY}-{SS}
    and never recomputed on read.
    """
    purchase_date, qty, up, amt = _validated(purchase_date, quantity, unit_price, amount)
    seq = _next_sequence(conn, purchase_date)

    return store.add_row(
        conn,
        "purchases",
        {
            "date": purchase_date,
            "quantity": qty,
            "unit_price": up,
            "amount": amt,
            "batch_sequence": seq,
            "batch_name": format_batch_name(purchase_date, seq),
        },
    )


def update_purchase(
    conn,
    purchase_id: str,
    *,
    purchase_date: str,
    quantity: Any,
    unit_price: Any = None,
    amount: Any = None,
    regenerate_name: bool = False,
) -> None:
    """Edits keep the stored batch name unless ``regenerate_name`` is set."""
    current = get_purchase(conn, purchase_id)
    if current is None:
        raise ValueError("Purchase not found.")

    purchase_date, qty, up, amt = _validated(purchase_date, quantity, unit_price, amount)
    patch: dict[str, Any] = {"date": purchase_date, "quantity": qty, "unit_price": up, "amount": amt}

    if regenerate_name:
        if purchase_date == current.date and current.batch_sequence:
            seq = format_sequence(current.batch_sequence)
        else:
            seq = _next_sequence(conn, purchase_date, exclude_id=purchase_id)
        patch["batch_sequence"] = seq
        patch["batch_name"] = format_batch_name(purchase_date, seq)

    store.update_row(conn, "purchases", purchase_id, patch)


def delete_purchase(conn, purchase_id: str) -> None:
    store.delete_row(conn, "purchases", purchase_id)
