import pytest

from ledger.db import ensure_schema, q
from ledger.models import Purchase
from ledger.services import store


def test_add_assigns_unique_ids_and_ignores_given_id(conn):
    a = store.add_row(conn, "payments", {"id": "mine", "date": "2024-01-01", "customer": "A", "amount": 1})
    b = store.add_row(conn, "payments", {"date": "2024-01-01", "customer": "A", "amount": 2})
    assert a != b
    assert a != "mine"
    assert store.get_row(conn, "payments", "mine") is None


def test_add_accepts_exchange_field_names(conn):
    pid = store.add_row(
        conn,
        "purchases",
        {"date": "2024-01-01", "quantity": 2, "unitPrice": 3, "amount": 6, "batchSeq": "01", "batchName": "P - 01012024-01"},
    )
    row = store.get_row(conn, "purchases", pid)
    assert row["unit_price"] == 3
    assert row["batch_sequence"] == "01"
    assert row["batch_name"] == "P - 01012024-01"


def test_unknown_bucket_or_field_is_rejected(conn):
    with pytest.raises(ValueError, match="Unknown bucket"):
        store.add_row(conn, "invoices", {})
    with pytest.raises(ValueError, match="Unknown field"):
        store.add_row(conn, "payments", {"date": "2024-01-01", "customer": "A", "amount": 1, "color": "red"})


def test_update_and_delete(conn):
    rid = store.add_row(conn, "payments", {"date": "2024-01-01", "customer": "A", "amount": 1})
    store.update_row(conn, "payments", rid, {"amount": 5})
    assert store.get_row(conn, "payments", rid)["amount"] == 5

    store.delete_row(conn, "payments", rid)
    assert store.get_row(conn, "payments", rid) is None


def test_update_or_delete_missing_record_raises(conn):
    with pytest.raises(ValueError, match="No payments record"):
        store.update_row(conn, "payments", "nope", {"amount": 1})
    with pytest.raises(ValueError, match="No payments record"):
        store.delete_row(conn, "payments", "nope")


def test_deleting_a_purchase_does_not_cascade(conn):
    pid = store.add_row(conn, "purchases", {"date": "2024-01-01", "quantity": 1, "unit_price": 1})
    store.add_row(conn, "sales", {"date": "2024-01-02", "batch_id": pid, "customer": "A", "quantity": 1, "unit_price": 2})
    store.delete_row(conn, "purchases", pid)

    snap = store.load_snapshot(conn)
    assert snap.purchases == ()
    assert len(snap.sales) == 1
    assert snap.sales[0].batch_id == pid


def test_load_snapshot_builds_records(conn):
    store.add_row(conn, "purchases", {"date": "2024-01-01", "quantity": 2, "unit_price": 3})
    snap = store.load_snapshot(conn)
    (p,) = snap.purchases
    assert isinstance(p, Purchase)
    assert p.quantity == 2
    assert p.unit_price == 3


def test_count_and_clear_all(conn):
    store.add_row(conn, "payments", {"date": "2024-01-01", "customer": "A", "amount": 1})
    store.add_row(conn, "expenses", {"date": "2024-01-01", "batch_id": "x", "name": "n", "amount": 1})
    assert store.count_rows(conn) == {"purchases": 0, "sales": 0, "expenses": 1, "payments": 1}

    store.clear_all(conn)
    assert store.count_rows(conn) == {"purchases": 0, "sales": 0, "expenses": 0, "payments": 0}


def test_ensure_schema_is_idempotent(conn):
    ensure_schema(conn)
    ensure_schema(conn)
    tables = {r["name"] for r in q(conn, "SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"purchases", "sales", "expenses", "payments"} <= tables


def test_ensure_schema_migrates_old_purchases_table():
    from ledger.db import connect

    c = connect(":memory:")
    c.execute(
        "CREATE TABLE purchases (id TEXT PRIMARY KEY, date TEXT NOT NULL, quantity REAL NOT NULL, "
        "unit_price REAL NOT NULL, created_at TEXT NOT NULL)"
    )
    c.execute("INSERT INTO purchases VALUES ('b1', '2024-01-01', 3, 4, '2024-01-01T00:00:00+00:00')")
    c.commit()

    ensure_schema(c)

    row = store.get_row(c, "purchases", "b1")
    assert row["amount"] == 12
    assert row["batch_name"] is None
    c.close()
