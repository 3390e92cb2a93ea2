from __future__ import annotations

import pytest

from ledger.db import connect, ensure_schema


@pytest.fixture
def conn():
    """Fresh in-memory database with the ledger schema."""
    c = connect(":memory:")
    ensure_schema(c)
    yield c
    c.close()


@pytest.fixture
def demo_snapshot() -> dict:
    return {
        "purchases": [{"id": "b1", "date": "2024-01-01", "quantity": 10, "unitPrice": 5}],
        "expenses": [{"id": "e1", "date": "2024-01-02", "batchId": "b1", "name": "cargo", "amount": 20}],
        "sales": [{"id": "s1", "date": "2024-01-03", "batchId": "b1", "customer": "Ali", "quantity": 4, "unitPrice": 8}],
        "payments": [{"id": "p1", "date": "2024-01-04", "customer": "Ali", "amount": 10}],
    }
