import json
from datetime import datetime

import pytest

from ledger.db import connect, ensure_schema
from ledger.services import store
from ledger.services.exchange import (
    backup_filename,
    dumps,
    export_snapshot,
    import_snapshot,
    parse_snapshot_json,
)
from ledger.services.expenses import create_expense
from ledger.services.payments import create_payment
from ledger.services.purchases import create_purchase
from ledger.services.reports import compute_report
from ledger.services.sales import create_sale


def _fresh_conn():
    c = connect(":memory:")
    ensure_schema(c)
    return c


def _seed(conn):
    b1 = create_purchase(conn, purchase_date="2025-09-01", quantity=10, unit_price=5)
    b2 = create_purchase(conn, purchase_date="2025-09-01", quantity=3, unit_price="2,5")
    create_sale(conn, sale_date="2025-09-02", batch_id=b1, customer="Ali", quantity=4, unit_price=8)
    create_sale(conn, sale_date="2025-09-02", batch_id=b2, customer="Leyla", quantity=5, unit_price=4)
    create_expense(conn, expense_date="2025-09-02", batch_id=b1, name="cargo", amount=20)
    create_payment(conn, payment_date="2025-09-03", customer="Ali", amount=10)
    return b1, b2


def test_export_has_exactly_four_arrays(conn):
    _seed(conn)
    data = export_snapshot(conn)
    assert set(data) == {"purchases", "sales", "expenses", "payments"}
    assert len(data["purchases"]) == 2
    assert {"id", "date", "quantity", "unitPrice", "batchName", "batchSequence"} <= set(data["purchases"][0])
    assert "batchId" in data["sales"][0]


def test_round_trip_reproduces_report(conn):
    _seed(conn)
    before = compute_report(store.load_snapshot(conn))
    text = dumps(export_snapshot(conn))

    other = _fresh_conn()
    counts = import_snapshot(other, parse_snapshot_json(text))
    after = compute_report(store.load_snapshot(other))

    assert counts == {"purchases": 2, "sales": 2, "expenses": 1, "payments": 1}
    assert after.totals == before.totals

    def _stats(report):
        return sorted(
            (b.batch.batch_name, b.sold_qty, b.revenue, b.cogs, b.expenses_total, b.profit, b.stock)
            for b in report.per_batch
        )

    assert _stats(after) == _stats(before)
    assert {b.batch_id for b in after.per_batch}.isdisjoint({b.batch_id for b in before.per_batch})
    other.close()


def test_import_strips_ids_and_remaps_batches(conn):
    data = {
        "purchases": [{"id": "old-1", "date": "2024-01-01", "qty": 10, "unitPrice": 5, "batchSeq": "01"}],
        "sales": [
            {"id": "s1", "date": "2024-01-03", "batchId": "old-1", "customer": "Ali", "qty": 4, "unitPrice": 8},
            {"id": "s2", "date": "2024-01-03", "batchId": "ghost", "customer": "Ali", "qty": 1, "unitPrice": 1},
        ],
        "expenses": [{"id": "e1", "batchId": "old-1", "name": "cargo", "amount": 20, "date": "2024-01-02"}],
    }
    import_snapshot(conn, data)
    snap = store.load_snapshot(conn)

    (p,) = snap.purchases
    assert p.id != "old-1"
    assert p.batch_sequence == "01"
    assert {s.batch_id for s in snap.sales} == {p.id, "ghost"}
    assert snap.expenses[0].batch_id == p.id
    assert store.get_row(conn, "sales", "s1") is None

    r = compute_report(snap)
    assert r.totals.revenue == 32
    assert r.customer_debts[0].invoiced == 33


def test_import_keeps_stored_batch_name(conn):
    import_snapshot(conn, {"purchases": [{"date": "2025-10-05", "quantity": 1, "unitPrice": 1, "batchName": "P - 01092025-07"}]})
    assert store.load_snapshot(conn).purchases[0].batch_name == "P - 01092025-07"


def test_parse_missing_and_bad_buckets():
    data = parse_snapshot_json('{"purchases": [{"id": 1}, 5, null], "sales": "oops"}')
    assert data == {"purchases": [{"id": 1}], "sales": [], "expenses": [], "payments": []}


def test_parse_bytes_with_bom():
    raw = "\ufeff" + json.dumps({"payments": [{"customer": "A", "amount": "1,5"}]})
    assert parse_snapshot_json(raw.encode("utf-8"))["payments"] == [{"customer": "A", "amount": "1,5"}]


@pytest.mark.parametrize("text", ["{not json", "[1, 2]", "42"])
def test_parse_rejects_malformed_documents(text):
    with pytest.raises(ValueError):
        parse_snapshot_json(text)


def test_backup_filename():
    assert backup_filename(datetime(2025, 9, 1, 8, 5, 3)) == "ledger-backup-2025-09-01T08-05-03.json"
