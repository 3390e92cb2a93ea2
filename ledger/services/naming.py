from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

from ledger.models import Purchase

UNKNOWN_BATCH_NAME = "P - ?"


def format_batch_name(date_value: Union[str, date, None], sequence: Any = None) -> str:
    """
    Display label of a batch:
      P - {DD}{MM}{YYYY}[-{SS}]

    Example:
      format_batch_name("2025-09-01")       -> "P - 01092025"
      format_batch_name("2025-09-01", "02") -> "P - 01092025-02"

    The suffix is only added when a sequence is given. A missing or
    unparseable date gives "P - ?" (no suffix).
    """
    base = _format_date_part(date_value)
    if base is None:
        return UNKNOWN_BATCH_NAME
    seq = format_sequence(sequence)
    return f"{base}-{seq}" if seq else base


def format_sequence(sequence: Any) -> Optional[str]:
    if sequence is None or sequence == "" or sequence == 0:
        return None
    return str(sequence).strip().zfill(2)


def _format_date_part(date_value: Union[str, date, None]) -> Optional[str]:
    if not date_value:
        return None
    if isinstance(date_value, (date, datetime)):
        return f"P - {date_value:%d%m%Y}"

    s = str(date_value).strip()
    parts = s.split("-")
    # Plain YYYY-MM-DD strings are re-ordered as-is.
    if len(parts) == 3 and all(p.isdigit() for p in parts):
        y, m, d = parts
        return f"P - {d}{m}{y}"

    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    return f"P - {dt:%d%m%Y}"


def next_seq_for_date(purchases: Iterable[Any], date_str: str) -> str:
    """One plus the number of purchases already dated ``date_str``, two digits."""
    count = 0
    for p in purchases or ():
        p_date = p.date if isinstance(p, Purchase) else (p or {}).get("date")
        if p_date == date_str:
            count += 1
    return f"{count + 1:02d}"


def batch_name_of(purchase: Optional[Purchase]) -> str:
    """
    Stored name wins; otherwise rebuild it from date + sequence.
    A stored name is never recomputed, so later deletions don't renumber batches.
    """
    if purchase is None:
        return UNKNOWN_BATCH_NAME
    if purchase.batch_name:
        return purchase.batch_name
    return format_batch_name(purchase.date, purchase.batch_sequence)
