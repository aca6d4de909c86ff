"""
import_engine.aggregator - Roll imported amounts up into campaign totals.

Runs inside the importer's transaction, after the batch insert.  Each
campaign is re-read with a row lock before its raised amount is bumped,
so the read-modify-write is safe against concurrent imports wherever the
backend honours SELECT ... FOR UPDATE.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session

from services.campaign_service import CampaignService

logger = logging.getLogger(__name__)


class AggregationError(Exception):
    """Raised when a campaign disappears between parsing and rollup."""
    pass


def sum_by_campaign(candidates: Iterable) -> dict[int, Decimal]:
    """campaign_id → total amount, in first-seen order."""
    totals: dict[int, Decimal] = {}
    for c in candidates:
        totals[c.campaign_id] = totals.get(c.campaign_id, Decimal("0")) + c.amount
    return totals


def update_campaign_totals(session: Session, candidates: Iterable) -> dict[int, Decimal]:
    """
    Add each campaign's imported sum to its raised amount and complete
    campaigns that reach their goal.  Returns campaign_id → new raised amount.
    """
    updated: dict[int, Decimal] = {}
    for campaign_id, total in sum_by_campaign(candidates).items():
        campaign = CampaignService.get_for_update(session, campaign_id)
        if campaign is None:
            raise AggregationError(f"Campaign not found during aggregation: {campaign_id}")

        new_raised = CampaignService.apply_raised_amount(campaign, total)
        CampaignService.save(session, campaign)
        updated[campaign_id] = new_raised
        logger.info("Updated campaign %s raised amount to %s", campaign_id, new_raised)
    return updated
