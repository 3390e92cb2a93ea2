from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Optional

from ledger.models import BUCKETS, Snapshot
from ledger.services import store

logger = logging.getLogger(__name__)


def export_snapshot(conn) -> dict:
    """The exchange document: exactly the four record arrays."""
    return store.load_snapshot(conn).to_dict()


def dumps(data: dict) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def backup_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"ledger-backup-{now:%Y-%m-%dT%H-%M-%S}.json"


def parse_snapshot_json(text: str | bytes) -> dict:
    """
    Parse an exchange file. Missing or non-list buckets become empty lists and
    non-object entries are dropped; malformed JSON raises ValueError.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8-sig")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON file: {e.msg} (line {e.lineno}).") from e
    if not isinstance(raw, dict):
        raise ValueError("Invalid backup file: expected a JSON object with purchases, sales, expenses, payments.")

    out: dict[str, list] = {}
    for b in BUCKETS:
        items = raw.get(b)
        if not isinstance(items, list):
            if items is not None:
                logger.warning("Import: '%s' is not a list, treating it as empty", b)
            items = []
        out[b] = [r for r in items if isinstance(r, dict)]
        dropped = len(items) - len(out[b])
        if dropped:
            logger.warning("Import: dropped %d non-object entr(ies) in '%s'", dropped, b)
    return out


def import_snapshot(conn, data: Any) -> dict[str, int]:
    """
    Insert every record of an exchange document as a new record.

    Ids in the file are discarded (the store assigns its own). Purchases go in
    first so that sales/expenses can be pointed at the new batch ids; a
    batchId that matches no purchase in the file is kept as-is and stays dangling.
    """
    snap = Snapshot.from_dict(data)
    id_map: dict[str, str] = {}
    counts = {b: 0 for b in BUCKETS}

    for p in snap.purchases:
        new = store.add_row(
            conn,
            "purchases",
            {
                "date": p.date,
                "quantity": p.quantity,
                "unit_price": p.unit_price,
                "amount": p.amount,
                "batch_sequence": p.batch_sequence,
                "batch_name": p.batch_name,
            },
        )
        if p.id is not None:
            id_map[p.id] = new
        counts["purchases"] += 1

    def _remap(batch_id: Optional[str]) -> Optional[str]:
        if batch_id is None:
            return None
        return id_map.get(batch_id, batch_id)

    for s in snap.sales:
        store.add_row(
            conn,
            "sales",
            {
                "date": s.date,
                "batch_id": _remap(s.batch_id),
                "customer": s.customer,
                "quantity": s.quantity,
                "unit_price": s.unit_price,
                "amount": s.amount,
            },
        )
        counts["sales"] += 1

    for e in snap.expenses:
        store.add_row(
            conn,
            "expenses",
            {"date": e.date, "batch_id": _remap(e.batch_id), "name": e.name, "amount": e.amount},
        )
        counts["expenses"] += 1

    for pay in snap.payments:
        store.add_row(conn, "payments", {"date": pay.date, "customer": pay.customer, "amount": pay.amount})
        counts["payments"] += 1

    logger.info("Imported %s", ", ".join(f"{n} {b}" for b, n in counts.items()))
    return counts
