"""
services.donation_service - Single donation creation.

A donation made outside the bulk importer is inserted and rolled into its
campaign's raised amount in the caller's transaction.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from db.models import CampaignStatus, Donation, Donor, PaymentMethod
from services.campaign_service import CampaignService

logger = logging.getLogger(__name__)

_MAX_ID = 2**63 - 1
_AMOUNT_LIMIT = Decimal(10) ** 8   # donations.amount is Numeric(10, 2)


class DonationValidationError(ValueError):
    """Raised when donation input data is rejected."""


def _required_id(data: dict, key: str, label: str) -> int:
    value = data.get(key)
    if value in (None, ""):
        raise DonationValidationError(f"{label} is required")
    try:
        ident = int(value)
    except (TypeError, ValueError):
        ident = 0
    if not 0 < ident <= _MAX_ID:
        raise DonationValidationError(f"Invalid {label}: {value}")
    return ident


def _amount(value) -> Decimal:
    if value in (None, ""):
        raise DonationValidationError("Amount is required")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise DonationValidationError(f"Invalid amount: {value}") from None
    if not amount.is_finite():
        raise DonationValidationError(f"Invalid amount: {value}")
    if amount <= 0:
        raise DonationValidationError("Amount must be greater than zero")
    if amount >= _AMOUNT_LIMIT or amount != round(amount, 2):
        raise DonationValidationError(f"Invalid amount: {value}")
    return amount


class DonationService:

    @staticmethod
    def create(session: Session, data: dict, today: date | None = None) -> Donation:
        """
        Create a donation from a dict (camelCase keys as sent by the API):
        campaignId, donorId, amount, paymentMethod, optional message.

        Raises DonationValidationError for bad input or a campaign that does
        not accept donations, LookupError for an unknown campaign or donor.
        """
        amount = _amount(data.get("amount"))
        campaign_id = _required_id(data, "campaignId", "Campaign ID")
        donor_id = _required_id(data, "donorId", "Donor ID")

        method_raw = str(data.get("paymentMethod") or "").strip().upper()
        if not method_raw:
            raise DonationValidationError("Payment method is required")
        try:
            payment_method = PaymentMethod(method_raw)
        except ValueError:
            raise DonationValidationError(f"Invalid payment method: {method_raw}") from None

        campaign = CampaignService.get(session, campaign_id)
        if campaign is None:
            raise LookupError(f"Campaign not found: {campaign_id}")
        if session.get(Donor, donor_id) is None:
            raise LookupError(f"Donor not found: {donor_id}")
        if campaign.status == CampaignStatus.COMPLETED:
            raise DonationValidationError(f"Campaign is already completed: {campaign_id}")
        if campaign.status != CampaignStatus.ACTIVE:
            raise DonationValidationError(f"Campaign is not active: {campaign_id}")

        donation = Donation(
            campaign_id=campaign_id,
            donor_id=donor_id,
            amount=amount,
            donation_date=today or date.today(),
            message=str(data.get("message") or "").strip() or None,
            payment_method=payment_method,
        )
        session.add(donation)
        session.flush()

        CampaignService.update_raised_amount(session, campaign_id, amount)
        logger.info("Donation %s of %s recorded for campaign %s", donation.id, amount, campaign_id)
        return donation
