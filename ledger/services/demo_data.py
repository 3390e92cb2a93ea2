from __future__ import annotations

import logging
import random
from datetime import date, timedelta

from ledger.db import ensure_schema
from ledger.services import store
from ledger.services.expenses import create_expense
from ledger.services.payments import create_payment
from ledger.services.purchases import create_purchase
from ledger.services.sales import create_sale

logger = logging.getLogger(__name__)

DEMO_CUSTOMERS = ["Ali", "Leyla", "Murad", "Nigar"]
DEMO_EXPENSES = ["Transport", "Customs", "Storage"]


def wipe_all(conn) -> None:
    # Keep schema, delete data.
    store.clear_all(conn)


def load_demo_data(conn, *, seed: int = 7) -> None:
    rnd = random.Random(seed)
    ensure_schema(conn)

    # 5 demo purchases over 3 days (so some days get -01 and -02 batch names)
    base_date = date.today() - timedelta(days=4)
    batch_ids: list[str] = []
    for i in range(5):
        purchase_date = (base_date + timedelta(days=i % 3)).isoformat()
        batch_ids.append(
            create_purchase(
                conn,
                purchase_date=purchase_date,
                quantity=rnd.randint(50, 200),
                unit_price=round(rnd.uniform(4.0, 12.0), 2),
            )
        )

    # A couple of sales per batch, some batches left untouched
    for batch_id in batch_ids[:4]:
        for _ in range(rnd.randint(1, 3)):
            create_sale(
                conn,
                sale_date=(base_date + timedelta(days=3)).isoformat(),
                batch_id=batch_id,
                customer=rnd.choice(DEMO_CUSTOMERS),
                quantity=rnd.randint(5, 40),
                unit_price=round(rnd.uniform(9.0, 18.0), 2),
            )

    for batch_id in batch_ids[:3]:
        create_expense(
            conn,
            expense_date=(base_date + timedelta(days=1)).isoformat(),
            batch_id=batch_id,
            name=rnd.choice(DEMO_EXPENSES),
            amount=round(rnd.uniform(10.0, 80.0), 2),
        )

    for customer in DEMO_CUSTOMERS[:3]:
        create_payment(
            conn,
            payment_date=(base_date + timedelta(days=4)).isoformat(),
            customer=customer,
            amount=round(rnd.uniform(20.0, 200.0), 2),
        )

    logger.info("Loaded demo data (seed=%d)", seed)
