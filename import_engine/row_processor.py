"""
import_engine.row_processor - Validate and transform one CSV record into
a DonationCandidate.

Single-responsibility: given a record dict and a session, either return
a DonationCandidate or raise RowError.  Rules are checked in column order
and the first violation wins; the campaign must resolve before anything
else in the row is looked at.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from sqlalchemy.orm import Session

import config
from db.models import CampaignStatus, PaymentMethod
from import_engine.field_map import (
    AMOUNT_LIMIT, AMOUNT_PLACES, ANONYMOUS_MARKERS, ANONYMOUS_FIRST_NAME,
    ANONYMOUS_LAST_NAME, MAX_CAMPAIGN_ID,
    DEFAULT_FIRST_NAME, DEFAULT_LAST_NAME, DEFAULT_PAYMENT_METHOD,
)
from services.campaign_service import CampaignService


class RowError(Exception):
    """Raised when a row cannot be imported."""
    pass


@dataclass(frozen=True)
class DonationCandidate:
    campaign_id: int
    amount: Decimal
    donor_email: str
    donor_first_name: str
    donor_last_name: str
    payment_method: PaymentMethod
    message: Optional[str]
    donation_date: date


class RowProcessor:
    """
    Parses records for one import run.  All candidates it produces carry
    the same donation_date: the day the import was processed.
    """

    def __init__(self, today: date, anonymous_email: str | None = None):
        self.today = today
        self.anonymous_email = (anonymous_email or config.ANONYMOUS_EMAIL).strip().lower()

    def process(self, session: Session, row: dict) -> DonationCandidate:
        """Validate one record.  Raises RowError on the first problem found."""
        campaign_id = self._campaign_id(session, row.get("campaignId", ""))
        amount = self._amount(row.get("amount", ""))
        email, first_name, last_name = self._donor(row)
        payment_method = self._payment_method(row.get("paymentMethod", ""))

        message = (row.get("message") or "").strip() or None

        return DonationCandidate(
            campaign_id=campaign_id,
            amount=amount,
            donor_email=email,
            donor_first_name=first_name,
            donor_last_name=last_name,
            payment_method=payment_method,
            message=message,
            donation_date=self.today,
        )

    # ── Private helpers ────────────────────────────────────────────────

    @staticmethod
    def _campaign_id(session: Session, raw: str) -> int:
        raw = (raw or "").strip()
        if not raw:
            raise RowError("Campaign ID is required")
        try:
            campaign_id = int(raw)
        except ValueError:
            raise RowError(f"Invalid campaign ID: {raw}") from None
        if not 0 < campaign_id <= MAX_CAMPAIGN_ID:
            raise RowError(f"Invalid campaign ID: {raw}")

        campaign = CampaignService.get(session, campaign_id)
        if campaign is None:
            raise RowError(f"Campaign not found: {campaign_id}")
        if campaign.status != CampaignStatus.ACTIVE:
            raise RowError(f"Campaign is not active: {campaign_id}")
        return campaign_id

    @staticmethod
    def _amount(raw: str) -> Decimal:
        raw = (raw or "").strip()
        if not raw:
            raise RowError("Amount is required")
        try:
            amount = Decimal(raw)
        except InvalidOperation:
            raise RowError(f"Invalid amount: {raw}") from None
        if not amount.is_finite():
            raise RowError(f"Invalid amount: {raw}")
        if amount <= 0:
            raise RowError("Amount must be greater than zero")
        # Must fit donations.amount exactly; a rounded insert would drift from the campaign total.
        if amount >= AMOUNT_LIMIT or amount != round(amount, AMOUNT_PLACES):
            raise RowError(f"Invalid amount: {raw}")
        return amount

    def _donor(self, row: dict) -> tuple[str, str, str]:
        """Return (email, first_name, last_name); anonymous rows ignore names."""
        email = (row.get("donorEmail") or "").strip()
        if email.lower() in ANONYMOUS_MARKERS:
            return self.anonymous_email, ANONYMOUS_FIRST_NAME, ANONYMOUS_LAST_NAME

        first_name = (row.get("donorFirstName") or "").strip() or DEFAULT_FIRST_NAME
        last_name = (row.get("donorLastName") or "").strip() or DEFAULT_LAST_NAME
        return email.lower(), first_name, last_name

    @staticmethod
    def _payment_method(raw: str) -> PaymentMethod:
        raw = (raw or "").strip()
        if not raw:
            return DEFAULT_PAYMENT_METHOD
        try:
            return PaymentMethod(raw.upper())
        except ValueError:
            raise RowError(f"Invalid payment method: {raw}") from None
