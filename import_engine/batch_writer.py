"""
import_engine.batch_writer - Single batch INSERT of validated donations.

No validation happens here; every pair handed in is assumed valid.
The statement is executed once with the full list of bindings, so the
batch is submitted as one operation (executemany) or not at all.
"""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import Date, Integer, Numeric, String, Text, bindparam, text
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

INSERT_COLUMNS = (
    "campaign_id", "donor_id", "amount", "donation_date", "message", "payment_method",
)

INSERT_DONATION_SQL = text(
    "INSERT INTO donations (campaign_id, donor_id, amount, donation_date, message, payment_method) "
    "VALUES (:campaign_id, :donor_id, :amount, :donation_date, :message, :payment_method)"
).bindparams(
    bindparam("campaign_id", type_=Integer),
    bindparam("donor_id", type_=Integer),
    bindparam("amount", type_=Numeric(10, 2)),
    bindparam("donation_date", type_=Date),
    bindparam("message", type_=Text),
    bindparam("payment_method", type_=String(20)),
)


def build_bindings(pairs: Sequence[tuple]) -> list[dict]:
    """One positional tuple per (candidate, donor) pair, keyed by INSERT_COLUMNS."""
    rows = []
    for candidate, donor in pairs:
        values = (
            candidate.campaign_id,
            donor.id,
            candidate.amount,
            candidate.donation_date,
            candidate.message,
            candidate.payment_method.value,
        )
        rows.append(dict(zip(INSERT_COLUMNS, values)))
    return rows


def insert_donations(session: Session, pairs: Sequence[tuple]) -> int:
    """Insert all donations in one statement.  Returns the number submitted."""
    if not pairs:
        return 0
    bindings = build_bindings(pairs)
    session.execute(INSERT_DONATION_SQL, bindings)
    logger.info("Batch inserted %d donations", len(bindings))
    return len(bindings)
