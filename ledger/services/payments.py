from __future__ import annotations

from typing import Any, Optional

from ledger.models import Payment
from ledger.services import store
from ledger.utils import parse_num


def list_payments(conn) -> list[Payment]:
    return [Payment.from_dict(r) for r in store.load_rows(conn, "payments")]


def get_payment(conn, payment_id: str) -> Optional[Payment]:
    row = store.get_row(conn, "payments", payment_id)
    return Payment.from_dict(row) if row else None


def _payment_fields(payment_date: Any, customer: Optional[str], amount: Any) -> dict[str, Any]:
    payment_date = str(payment_date or "").strip()
    if not payment_date:
        raise ValueError("Payment date is required.")

    cust = str(customer or "").strip()
    if not cust:
        raise ValueError("Customer is required.")

    amt = parse_num(amount)
    if amt < 0:
        raise ValueError("Payment amount cannot be negative.")
    if amt == 0:
        raise ValueError("Payment amount must be > 0.")

    return {"date": payment_date, "customer": cust, "amount": amt}


def create_payment(conn, *, payment_date: str, customer: Optional[str], amount: Any) -> str:
    # Payments are matched to sales only by the customer name (case-sensitive).
    return store.add_row(conn, "payments", _payment_fields(payment_date, customer, amount))


def update_payment(conn, payment_id: str, *, payment_date: str, customer: Optional[str], amount: Any) -> None:
    if get_payment(conn, payment_id) is None:
        raise ValueError("Payment not found.")
    store.update_row(conn, "payments", payment_id, _payment_fields(payment_date, customer, amount))


def delete_payment(conn, payment_id: str) -> None:
    store.delete_row(conn, "payments", payment_id)
