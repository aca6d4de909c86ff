"""
services.campaign_service - CRUD operations on Campaign records.

All session management is the caller's responsibility (open before,
close/commit after).  The bulk importer relies on this so that its
lookups, donor inserts and raised-amount updates share one transaction.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models import Campaign, CampaignStatus

logger = logging.getLogger(__name__)


class CampaignValidationError(ValueError):
    """Raised when campaign input data is inconsistent."""


def _to_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _to_date(value) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


class CampaignService:

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def get(session: Session, campaign_id: int) -> Campaign | None:
        return session.get(Campaign, campaign_id)

    @staticmethod
    def get_for_update(session: Session, campaign_id: int) -> Campaign | None:
        """
        Reload a campaign from the database and lock its row until the
        surrounding transaction ends.  SQLite ignores FOR UPDATE; there the
        database-wide write lock serialises concurrent writers instead.
        """
        stmt = (
            select(Campaign)
            .where(Campaign.id == campaign_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def list_all(
        session: Session,
        status: CampaignStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Campaign], int]:
        stmt = select(Campaign)
        if status is not None:
            stmt = stmt.where(Campaign.status == status)
        rows = session.execute(stmt.order_by(Campaign.id)).scalars().all()
        return list(rows[offset:offset + limit]), len(rows)

    # ── Create / save ──────────────────────────────────────────────────

    @staticmethod
    def create(session: Session, data: dict) -> Campaign:
        """
        Create a campaign from a dict (camelCase keys as sent by the API).
        Required: name, goalAmount, startDate.  raisedAmount always starts at 0.
        """
        name = str(data.get("name") or "").strip()
        if not name:
            raise CampaignValidationError("Campaign name is required")

        if data.get("goalAmount") in (None, ""):
            raise CampaignValidationError("Goal amount is required")
        try:
            goal = _to_decimal(data["goalAmount"])
        except InvalidOperation:
            goal = None
        if goal is None or not goal.is_finite():
            raise CampaignValidationError(f"Invalid goal amount: {data['goalAmount']}")
        if goal <= 0:
            raise CampaignValidationError("Goal amount must be greater than zero")

        try:
            start = _to_date(data.get("startDate"))
            end = _to_date(data.get("endDate"))
        except ValueError as exc:
            raise CampaignValidationError(f"Invalid date: {exc}") from exc
        if start is None:
            raise CampaignValidationError("Start date is required")
        if end is not None and end < start:
            raise CampaignValidationError("End date cannot be before start date")

        status_raw = str(data.get("status") or CampaignStatus.PENDING.value).strip().upper()
        try:
            status = CampaignStatus(status_raw)
        except ValueError as exc:
            raise CampaignValidationError(f"Invalid status: {status_raw}") from exc

        campaign = Campaign(
            name=name,
            description=str(data.get("description") or "").strip(),
            goal_amount=goal,
            raised_amount=Decimal("0"),
            start_date=start,
            end_date=end,
            status=status,
        )
        session.add(campaign)
        session.flush()
        return campaign

    @staticmethod
    def save(session: Session, campaign: Campaign) -> Campaign:
        session.add(campaign)
        session.flush()
        return campaign

    # ── Raised-amount rollup ───────────────────────────────────────────

    @staticmethod
    def apply_raised_amount(campaign: Campaign, amount: Decimal) -> Decimal:
        """
        Add amount to the campaign's raised total (NULL counts as zero) and
        complete an ACTIVE campaign once the goal is reached.
        Returns the new raised amount.
        """
        current = _to_decimal(campaign.raised_amount) if campaign.raised_amount is not None else Decimal("0")
        new_raised = current + _to_decimal(amount)
        campaign.raised_amount = new_raised

        if new_raised >= _to_decimal(campaign.goal_amount) and campaign.status == CampaignStatus.ACTIVE:
            campaign.status = CampaignStatus.COMPLETED
            logger.info("Campaign %s reached its goal and is now COMPLETED", campaign.id)
        return new_raised

    @classmethod
    def update_raised_amount(cls, session: Session, campaign_id: int, amount) -> Campaign:
        """Single-donation rollup.  Raises LookupError for an unknown campaign."""
        campaign = cls.get_for_update(session, campaign_id)
        if campaign is None:
            raise LookupError(f"Campaign not found: {campaign_id}")
        cls.apply_raised_amount(campaign, _to_decimal(amount))
        return cls.save(session, campaign)
