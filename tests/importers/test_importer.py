import logging
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from db.models import Campaign, CampaignStatus, Donation, Donor
from import_engine import run_import
from tests.factories import CampaignFactory, DonorFactory

TODAY = date(2024, 5, 1)
ANON = "anonymous@donfundy.com"


def _count(s, model, *where):
    return s.execute(select(func.count(model.id)).where(*where)).scalar_one()


@pytest.fixture
def campaign(session):
    return CampaignFactory(goal_amount=Decimal("10000"), raised_amount=Decimal("0"))


def test_two_valid_rows(session, fresh_session, make_csv, campaign):
    csv = make_csv(
        f"{campaign.id},100.50,john@example.com,John,Doe,CARD,Thank you",
        f"{campaign.id},50.00,anonymous,,,BANK_TRANSFER,",
    )

    result = run_import(csv, today=TODAY)

    assert result.to_dict() == {
        "totalRows": 2, "successCount": 2, "failureCount": 0, "errors": [],
    }
    s = fresh_session()
    c = s.get(Campaign, campaign.id)
    assert c.raised_amount == Decimal("150.50")
    assert c.status is CampaignStatus.ACTIVE
    donations = s.execute(select(Donation)).scalars().all()
    assert len(donations) == 2
    assert {d.donation_date for d in donations} == {TODAY}


def test_unknown_campaign_does_not_block_other_rows(session, fresh_session, make_csv, campaign):
    csv = make_csv(
        "999999,10.00,a@example.com,A,B,CARD,",
        f"{campaign.id},25.00,b@example.com,B,C,CARD,",
    )

    result = run_import(csv, today=TODAY)

    assert result.total_rows == 2
    assert result.success_count == 1
    assert result.failure_count == 1
    assert result.errors == ["Row 2: Campaign not found: 999999"]
    assert fresh_session().get(Campaign, campaign.id).raised_amount == Decimal("25.00")


def test_negative_amount_creates_nothing(session, fresh_session, make_csv, campaign):
    csv = make_csv(f"{campaign.id},-50.00,neg@example.com,N,E,CARD,")

    result = run_import(csv, today=TODAY)

    assert result.success_count == 0
    assert result.failure_count == 1
    assert result.errors == ["Row 2: Amount must be greater than zero"]
    s = fresh_session()
    assert _count(s, Donation) == 0
    assert _count(s, Donor) == 0


def test_invalid_payment_method(session, make_csv, campaign):
    csv = make_csv(f"{campaign.id},10,x@example.com,X,Y,INVALID_METHOD,")
    result = run_import(csv, today=TODAY)
    assert result.errors == ["Row 2: Invalid payment method: INVALID_METHOD"]


def test_reaching_goal_completes_campaign(session, fresh_session, make_csv):
    campaign = CampaignFactory(goal_amount=Decimal("200"), raised_amount=Decimal("0"))
    csv = make_csv(
        f"{campaign.id},150.00,a@example.com,A,A,CARD,",
        f"{campaign.id},100.00,b@example.com,B,B,PAYPAL,",
    )

    result = run_import(csv, today=TODAY)

    assert result.success_count == 2
    c = fresh_session().get(Campaign, campaign.id)
    assert c.raised_amount == Decimal("250.0")
    assert c.status is CampaignStatus.COMPLETED


def test_header_only_file_does_nothing(session, make_csv, campaign):
    with patch("import_engine.importer.insert_donations") as writer, \
         patch("import_engine.importer.update_campaign_totals") as aggregator:
        result = run_import(make_csv(), today=TODAY)

    assert result.to_dict() == {
        "totalRows": 0, "successCount": 0, "failureCount": 0, "errors": [],
    }
    writer.assert_not_called()
    aggregator.assert_not_called()


def test_all_rows_invalid_skips_persistence(session, make_csv):
    with patch("import_engine.importer.insert_donations") as writer:
        result = run_import(make_csv("999,10,,,,,", "998,10,,,,,"), today=TODAY)
    assert result.total_rows == 2
    assert result.failure_count == 2
    writer.assert_not_called()


def test_row_numbers_follow_file_order(session, make_csv, campaign):
    csv = make_csv(
        f"{campaign.id},10,,,,,",
        "abc,10,,,,,",
        f"{campaign.id},0,,,,,",
        f"{campaign.id},10,,,,CHEQUE,",
    )
    result = run_import(csv, today=TODAY)
    assert result.errors == [
        "Row 3: Invalid campaign ID: abc",
        "Row 4: Amount must be greater than zero",
        "Row 5: Invalid payment method: CHEQUE",
    ]
    assert result.success_count + result.failure_count == result.total_rows


def test_repeated_email_creates_one_donor(session, fresh_session, make_csv, campaign):
    csv = make_csv(
        f"{campaign.id},10,Same@Example.com,First,Name,CARD,",
        f"{campaign.id},20,same@example.com,Second,Name,CARD,",
    )
    result = run_import(csv, today=TODAY)

    assert result.success_count == 2
    s = fresh_session()
    donors = s.execute(select(Donor)).scalars().all()
    assert [(d.email, d.first_name) for d in donors] == [("same@example.com", "First")]
    assert _count(s, Donation, Donation.donor_id == donors[0].id) == 2


def test_anonymous_rows_share_one_donor(session, fresh_session, make_csv, campaign):
    csv = make_csv(
        f"{campaign.id},10,,Ignored,Names,CARD,",
        f"{campaign.id},20,anonymous,,,CARD,",
        f"{campaign.id},30,ANONYMOUS,,,CARD,",
    )
    result = run_import(csv, today=TODAY)

    assert result.success_count == 3
    s = fresh_session()
    anon = s.execute(select(Donor).where(Donor.email == ANON)).scalar_one()
    assert (anon.first_name, anon.last_name) == ("Anonymous", "Donor")
    assert _count(s, Donor) == 1


def test_existing_anonymous_donor_is_reused(session, fresh_session, make_csv, campaign):
    existing = DonorFactory(email=ANON, first_name="Anonymous", last_name="Donor")
    result = run_import(make_csv(f"{campaign.id},10,,,,,"), today=TODAY)

    assert result.success_count == 1
    s = fresh_session()
    assert _count(s, Donor) == 1
    assert s.execute(select(Donation)).scalar_one().donor_id == existing.id


def test_existing_donor_names_are_not_updated(session, fresh_session, make_csv, campaign):
    DonorFactory(email="kept@example.com", first_name="Original", last_name="Name")
    run_import(make_csv(f"{campaign.id},10,kept@example.com,Changed,Person,CARD,"), today=TODAY)

    donor = fresh_session().execute(
        select(Donor).where(Donor.email == "kept@example.com")
    ).scalar_one()
    assert (donor.first_name, donor.last_name) == ("Original", "Name")


def test_failure_after_parsing_rolls_everything_back(session, fresh_session, make_csv, campaign):
    csv = make_csv(
        f"{campaign.id},10,new@example.com,N,E,CARD,",
        "999999,10,,,,,",
    )
    with patch("import_engine.importer.update_campaign_totals",
               side_effect=RuntimeError("database unavailable")):
        result = run_import(csv, today=TODAY)

    assert result.total_rows == 2
    assert result.success_count == 0
    assert result.failure_count == 2
    assert result.errors == [
        "Row 3: Campaign not found: 999999",
        "Row 0: Failed to process file: database unavailable",
    ]
    s = fresh_session()
    assert _count(s, Donation) == 0
    assert _count(s, Donor) == 0
    assert s.get(Campaign, campaign.id).raised_amount == Decimal("0")


def test_unreadable_file_is_a_single_failure(session):
    result = run_import(b"campaignId,amount\n\xff\xfe,1\n", today=TODAY)
    assert result.total_rows == 0
    assert result.failure_count == 1
    assert result.errors[0].startswith("Row 0: Failed to process file: File is not valid UTF-8")


def test_rows_for_several_campaigns(session, fresh_session, make_csv):
    a = CampaignFactory(raised_amount=Decimal("5"))
    b = CampaignFactory(raised_amount=None)
    untouched = CampaignFactory(raised_amount=Decimal("1"))
    csv = make_csv(
        f"{a.id},10,,,,,",
        f"{b.id},2.5,,,,,",
        f"{a.id},1,,,,,",
    )
    result = run_import(csv, today=TODAY)

    assert result.success_count == 3
    s = fresh_session()
    assert s.get(Campaign, a.id).raised_amount == Decimal("16")
    assert s.get(Campaign, b.id).raised_amount == Decimal("2.5")
    assert s.get(Campaign, untouched.id).raised_amount == Decimal("1")


def test_oversized_campaign_id_is_a_row_error(session, fresh_session, make_csv, campaign):
    csv = make_csv(
        f"{campaign.id},10,a@example.com,A,A,CARD,",
        "99999999999999999999,10,b@example.com,B,B,CARD,",
        f"{campaign.id},20,c@example.com,C,C,CARD,",
    )
    result = run_import(csv, today=TODAY)

    assert result.to_dict() == {
        "totalRows": 3, "successCount": 2, "failureCount": 1,
        "errors": ["Row 3: Invalid campaign ID: 99999999999999999999"],
    }
    assert fresh_session().get(Campaign, campaign.id).raised_amount == Decimal("30")


def test_stored_donations_add_up_to_campaign_total(session, fresh_session, make_csv, campaign):
    csv = make_csv(
        f"{campaign.id},0.005,,,,,",
        f"{campaign.id},0.01,,,,,",
        f"{campaign.id},19.99,,,,,",
    )
    result = run_import(csv, today=TODAY)

    assert result.errors == ["Row 2: Invalid amount: 0.005"]
    s = fresh_session()
    stored = s.execute(select(func.sum(Donation.amount))).scalar_one()
    assert Decimal(str(stored)) == s.get(Campaign, campaign.id).raised_amount == Decimal("20.00")


def test_success_log_reports_new_donors(session, make_csv, campaign, caplog):
    DonorFactory(email="known@example.com")
    csv = make_csv(
        f"{campaign.id},10,known@example.com,K,N,CARD,",
        f"{campaign.id},10,new@example.com,N,E,CARD,",
        f"{campaign.id},10,,,,,",
    )
    with caplog.at_level(logging.INFO, logger="import_engine.importer"):
        run_import(csv, today=TODAY)

    assert "Successfully processed 3 donations (0 rows rejected, 2 new donors)" in caplog.text
