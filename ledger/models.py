"""
Record and report types.

Records are built from loosely-shaped mappings (SQLite rows, imported JSON,
form input) through ``from_dict``, which is where numeric text is normalized
and missing fields get their defaults. Everything downstream can rely on
floats and plain strings.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ledger.utils import parse_num

BUCKETS = ("purchases", "sales", "expenses", "payments")
NONAME = "(noname)"


def _pick(d: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    return None


def _opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v)
    return s if s.strip() else None


def _str(v: Any) -> str:
    return "" if v is None else str(v)


@dataclass(frozen=True)
class Purchase:
    id: Optional[str]
    date: str
    quantity: float
    unit_price: float
    amount: float = 0.0
    batch_sequence: Optional[str] = None
    batch_name: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Purchase":
        quantity = parse_num(_pick(d, "quantity", "qty"))
        unit_price = parse_num(_pick(d, "unit_price", "unitPrice"))
        amount = _pick(d, "amount")
        return cls(
            id=_opt_str(_pick(d, "id")),
            date=_str(_pick(d, "date")),
            quantity=quantity,
            unit_price=unit_price,
            amount=parse_num(amount) if amount is not None else quantity * unit_price,
            batch_sequence=_opt_str(_pick(d, "batch_sequence", "batchSequence", "batchSeq")),
            batch_name=_opt_str(_pick(d, "batch_name", "batchName")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "amount": self.amount,
            "batchSequence": self.batch_sequence,
            "batchName": self.batch_name,
        }


@dataclass(frozen=True)
class Sale:
    id: Optional[str]
    date: str
    batch_id: Optional[str]
    customer: str
    quantity: float
    unit_price: float
    amount: float = 0.0

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Sale":
        quantity = parse_num(_pick(d, "quantity", "qty"))
        unit_price = parse_num(_pick(d, "unit_price", "unitPrice"))
        amount = _pick(d, "amount")
        return cls(
            id=_opt_str(_pick(d, "id")),
            date=_str(_pick(d, "date")),
            batch_id=_opt_str(_pick(d, "batch_id", "batchId")),
            customer=_str(_pick(d, "customer")),
            quantity=quantity,
            unit_price=unit_price,
            amount=parse_num(amount) if amount is not None else quantity * unit_price,
        )

    @property
    def invoiced(self) -> float:
        return self.quantity * self.unit_price

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "batchId": self.batch_id,
            "customer": self.customer,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class Expense:
    id: Optional[str]
    date: str
    batch_id: Optional[str]
    name: str
    amount: float

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Expense":
        return cls(
            id=_opt_str(_pick(d, "id")),
            date=_str(_pick(d, "date")),
            batch_id=_opt_str(_pick(d, "batch_id", "batchId")),
            name=_str(_pick(d, "name")),
            amount=parse_num(_pick(d, "amount")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "batchId": self.batch_id,
            "name": self.name,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class Payment:
    id: Optional[str]
    date: str
    customer: str
    amount: float

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Payment":
        return cls(
            id=_opt_str(_pick(d, "id")),
            date=_str(_pick(d, "date")),
            customer=_str(_pick(d, "customer")),
            amount=parse_num(_pick(d, "amount")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "customer": self.customer,
            "amount": self.amount,
        }


RECORD_TYPES = {
    "purchases": Purchase,
    "sales": Sale,
    "expenses": Expense,
    "payments": Payment,
}


def _records(value: Any, record_type) -> tuple:
    if not isinstance(value, (list, tuple)):
        return ()
    out = []
    for item in value:
        if isinstance(item, record_type):
            out.append(item)
        elif isinstance(item, Mapping):
            out.append(record_type.from_dict(item))
        # anything else (None, numbers, strings) is not a record
    return tuple(out)


@dataclass(frozen=True)
class Snapshot:
    purchases: tuple = ()
    sales: tuple = ()
    expenses: tuple = ()
    payments: tuple = ()

    @classmethod
    def from_dict(cls, data: Any) -> "Snapshot":
        """Missing or non-list collections become empty."""
        if isinstance(data, Snapshot):
            return data
        if not isinstance(data, Mapping):
            return cls()
        return cls(**{b: _records(data.get(b), RECORD_TYPES[b]) for b in BUCKETS})

    def to_dict(self) -> dict:
        return {b: [r.to_dict() for r in getattr(self, b)] for b in BUCKETS}


@dataclass(frozen=True)
class BatchStat:
    batch_id: Optional[str]
    batch: Purchase
    purchased_qty: float
    sold_qty: float
    stock: float
    stock_cost: float
    unit_cost: float
    expenses_total: float
    revenue: float
    cogs: float
    profit: float
    over_sold: bool


@dataclass(frozen=True)
class CustomerDebt:
    customer: str
    invoiced: float
    paid: float
    balance: float


@dataclass(frozen=True)
class Totals:
    revenue: float = 0.0
    cogs: float = 0.0
    expenses_full: float = 0.0
    profit: float = 0.0
    paid_total: float = 0.0
    unpaid_total: float = 0.0
    stock_qty: float = 0.0
    stock_cost: float = 0.0


@dataclass(frozen=True)
class Report:
    per_batch: list = field(default_factory=list)
    customer_debts: list = field(default_factory=list)
    totals: Totals = field(default_factory=Totals)
