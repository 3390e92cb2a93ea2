from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ledger.db import q, x
from ledger.models import BUCKETS, RECORD_TYPES, Snapshot
from ledger.utils import iso_now, new_id

logger = logging.getLogger(__name__)

# Writable columns per bucket (id and created_at are managed here).
COLUMNS: dict[str, tuple[str, ...]] = {
    "purchases": ("date", "quantity", "unit_price", "amount", "batch_sequence", "batch_name"),
    "sales": ("date", "batch_id", "customer", "quantity", "unit_price", "amount"),
    "expenses": ("date", "batch_id", "name", "amount"),
    "payments": ("date", "customer", "amount"),
}

# Exchange (camelCase) / legacy names accepted on input.
ALIASES = {
    "unitPrice": "unit_price",
    "batchId": "batch_id",
    "batchSequence": "batch_sequence",
    "batchSeq": "batch_sequence",
    "batchName": "batch_name",
    "qty": "quantity",
}


def _check_bucket(bucket: str) -> str:
    if bucket not in BUCKETS:
        raise ValueError(f"Unknown bucket '{bucket}'. Use one of: {', '.join(BUCKETS)}.")
    return bucket


def _columns_for(bucket: str, record: Mapping[str, Any]) -> dict[str, Any]:
    allowed = COLUMNS[bucket]
    out: dict[str, Any] = {}
    for k, v in record.items():
        col = ALIASES.get(k, k)
        if col in ("id", "created_at"):
            continue
        if col not in allowed:
            raise ValueError(f"Unknown field '{k}' for {bucket}.")
        out[col] = v
    return out


def add_row(conn, bucket: str, record: Mapping[str, Any]) -> str:
    """Insert a record and return its new id. Any id on the record is ignored."""
    _check_bucket(bucket)
    cols = _columns_for(bucket, record)
    rid = new_id()

    names = ["id", "created_at", *cols.keys()]
    placeholders = ", ".join("?" for _ in names)
    x(
        conn,
        f"INSERT INTO {bucket} ({', '.join(names)}) VALUES ({placeholders})",
        (rid, iso_now(), *cols.values()),
    )
    logger.info("Added %s record %s", bucket, rid)
    return rid


def update_row(conn, bucket: str, record_id: str, patch: Mapping[str, Any]) -> None:
    _check_bucket(bucket)
    cols = _columns_for(bucket, patch)
    if not cols:
        return
    assignments = ", ".join(f"{c}=?" for c in cols)
    n = x(conn, f"UPDATE {bucket} SET {assignments} WHERE id=?", (*cols.values(), str(record_id)))
    if n == 0:
        raise ValueError(f"No {bucket} record with id '{record_id}'.")
    logger.info("Updated %s record %s", bucket, record_id)


def delete_row(conn, bucket: str, record_id: str) -> None:
    # Deleting a purchase does not cascade: its sales/expenses become dangling.
    _check_bucket(bucket)
    n = x(conn, f"DELETE FROM {bucket} WHERE id=?", (str(record_id),))
    if n == 0:
        raise ValueError(f"No {bucket} record with id '{record_id}'.")
    logger.info("Deleted %s record %s", bucket, record_id)


def get_row(conn, bucket: str, record_id: str) -> Optional[dict]:
    _check_bucket(bucket)
    rows = q(conn, f"SELECT * FROM {bucket} WHERE id=?", (str(record_id),))
    return dict(rows[0]) if rows else None


def load_rows(conn, bucket: str) -> list[dict]:
    _check_bucket(bucket)
    rows = q(conn, f"SELECT * FROM {bucket} ORDER BY date, created_at, rowid")
    return [dict(r) for r in rows]


def load_snapshot(conn) -> Snapshot:
    return Snapshot(
        **{b: tuple(RECORD_TYPES[b].from_dict(r) for r in load_rows(conn, b)) for b in BUCKETS}
    )


def count_rows(conn) -> dict[str, int]:
    return {b: int(q(conn, f"SELECT COUNT(*) AS n FROM {b}")[0]["n"]) for b in BUCKETS}


def clear_all(conn) -> None:
    for b in BUCKETS:
        conn.execute(f"DELETE FROM {b};")
    conn.commit()
    logger.info("Cleared all records")
