"""
db.models - SQLAlchemy ORM declarations.

Tables
------
campaigns  - fundraising campaigns with a goal and a running raised total.
donors     - donor identities, unique by (normalised) email.
donations  - one row per donation; bulk imports write here with a single
             batch INSERT, so every column that needs a value at insert
             time is either bound explicitly or has a server default.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Date, DateTime, Text, Numeric, ForeignKey,
    Enum, Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class CampaignStatus(str, enum.Enum):
    PENDING   = "PENDING"
    ACTIVE    = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, enum.Enum):
    CARD          = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    PAYPAL        = "PAYPAL"


class Campaign(Base):
    __tablename__ = "campaigns"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    name        = Column(String(200), nullable=False)
    description = Column(Text, default="")

    goal_amount   = Column(Numeric(12, 2), nullable=False)
    raised_amount = Column(Numeric(12, 2), nullable=True, default=0)

    start_date = Column(Date, nullable=False)
    end_date   = Column(Date, nullable=True)

    status = Column(
        Enum(CampaignStatus, native_enum=False, length=20),
        nullable=False, default=CampaignStatus.PENDING, index=True,
    )

    updated = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    donations = relationship("Donation", back_populates="campaign",
                             cascade="all, delete-orphan", lazy="select")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description or "",
            "goalAmount": float(self.goal_amount) if self.goal_amount is not None else None,
            "raisedAmount": float(self.raised_amount or 0),
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "status": self.status.value if self.status else None,
        }


class Donor(Base):
    __tablename__ = "donors"

    id         = Column(Integer, primary_key=True, autoincrement=True)
    email      = Column(String(320), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name  = Column(String(100), nullable=False)
    phone_number = Column(String(50), nullable=True)

    # Linked application user, if the donor registered; accounts live elsewhere
    user_id = Column(Integer, nullable=True)

    updated = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    donations = relationship("Donation", back_populates="donor", lazy="select")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phoneNumber": self.phone_number,
            "userId": self.user_id,
        }


class Donation(Base):
    __tablename__ = "donations"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    campaign_id = Column(Integer,
                         ForeignKey("campaigns.id", ondelete="CASCADE"),
                         nullable=False, index=True)
    donor_id    = Column(Integer, ForeignKey("donors.id"),
                         nullable=False, index=True)

    amount         = Column(Numeric(10, 2), nullable=False)
    donation_date  = Column(Date, nullable=False)
    message        = Column(Text, nullable=True)
    payment_method = Column(
        Enum(PaymentMethod, native_enum=False, length=20),
        nullable=False,
    )

    updated = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    campaign = relationship("Campaign", back_populates="donations")
    donor    = relationship("Donor", back_populates="donations")

    __table_args__ = (
        Index("ix_donation_campaign_date", "campaign_id", "donation_date"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "campaignId": self.campaign_id,
            "donorId": self.donor_id,
            "amount": float(self.amount),
            "donationDate": self.donation_date.isoformat() if self.donation_date else None,
            "message": self.message,
            "paymentMethod": self.payment_method.value if self.payment_method else None,
        }
