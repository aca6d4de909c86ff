"""
services - Business-logic layer (framework-agnostic).

Public API:
    CampaignService - campaign CRUD and raised-amount rollup
    DonationService - single donation creation with campaign rollup
    DonorService    - donor lookup-by-email and creation
"""

from services.campaign_service import CampaignService, CampaignValidationError  # noqa: F401
from services.donation_service import DonationService, DonationValidationError  # noqa: F401
from services.donor_service import DonorService, normalize_email                  # noqa: F401
