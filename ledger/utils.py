from __future__ import annotations

import math
import uuid
from datetime import datetime, date, timezone
from typing import Any, Optional


def iso_now() -> str:
    # Use UTC ISO timestamps for consistency.
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def new_id() -> str:
    return uuid.uuid4().hex


def safe_div(n: float, d: float) -> float:
    return float(n) / float(d) if d else 0.0


def parse_num(value: Any) -> float:
    """
    Normalize localized numeric input to a float.

    Every comma becomes a period ("1,5" -> 1.5). Empty, non-numeric and
    non-finite input gives 0.0; this never raises.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        f = float(value)
        return f if math.isfinite(f) else 0.0

    s = str(value).replace(",", ".").strip()
    if not s or "_" in s:
        return 0.0
    try:
        f = float(s)
    except ValueError:
        return 0.0
    return f if math.isfinite(f) else 0.0


def reconcile_price_amount(
    quantity: Any,
    unit_price: Any,
    amount: Any,
) -> tuple[float, float]:
    """
    Fill in whichever of unit price / amount is missing.

    Returns (unit_price, amount). Once quantity and unit price are known the
    amount is always quantity * unit_price; an explicit unit price wins over
    a disagreeing amount.
    """
    q = parse_num(quantity)
    up = parse_num(unit_price)
    amt = parse_num(amount)

    if not up and q and amt:
        up = safe_div(amt, q)
    if q and up:
        amt = q * up
    return up, amt


def fmt_num(n: Any) -> str:
    try:
        f = float(n)
    except (TypeError, ValueError):
        return "-"
    if not math.isfinite(f):
        return "-"
    return f"{f:,.2f}".rstrip("0").rstrip(".")


def to_date(value: Any, default: Optional[date] = None) -> date:
    """ISO date text to a date; anything unparseable falls back to ``default`` (today)."""
    try:
        return date.fromisoformat(str(value)[:10])
    except (TypeError, ValueError):
        return default or date.today()
