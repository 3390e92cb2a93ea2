from __future__ import annotations

from typing import Any, Optional

from ledger.models import Expense
from ledger.services import store
from ledger.utils import parse_num


def list_expenses(conn) -> list[Expense]:
    return [Expense.from_dict(r) for r in store.load_rows(conn, "expenses")]


def get_expense(conn, expense_id: str) -> Optional[Expense]:
    row = store.get_row(conn, "expenses", expense_id)
    return Expense.from_dict(row) if row else None


def _expense_fields(conn, expense_date: Any, batch_id: Any, name: Any, amount: Any) -> dict[str, Any]:
    expense_date = str(expense_date or "").strip()
    if not expense_date:
        raise ValueError("Expense date is required.")

    name = str(name or "").strip()
    if not name:
        raise ValueError("Expense name is required.")

    amt = parse_num(amount)
    if amt < 0:
        raise ValueError("Expense amount cannot be negative.")
    if amt == 0:
        raise ValueError("Expense amount must be > 0.")

    batch_id = str(batch_id or "").strip()
    if not batch_id:
        raise ValueError("Batch is required.")
    if store.get_row(conn, "purchases", batch_id) is None:
        raise ValueError("Batch not found.")

    return {"date": expense_date, "batch_id": batch_id, "name": name, "amount": amt}


def create_expense(conn, *, expense_date: str, batch_id: str, name: str, amount: Any) -> str:
    """The full amount is charged to the batch; it is not spread over sold units."""
    return store.add_row(conn, "expenses", _expense_fields(conn, expense_date, batch_id, name, amount))


def update_expense(conn, expense_id: str, *, expense_date: str, batch_id: str, name: str, amount: Any) -> None:
    if get_expense(conn, expense_id) is None:
        raise ValueError("Expense not found.")
    store.update_row(conn, "expenses", expense_id, _expense_fields(conn, expense_date, batch_id, name, amount))


def delete_expense(conn, expense_id: str) -> None:
    store.delete_row(conn, "expenses", expense_id)
