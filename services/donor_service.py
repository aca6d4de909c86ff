"""
services.donor_service - Lookup and creation of Donor records.

Emails are the identity key and are stored trimmed and lower-cased.
Session management is the caller's responsibility.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models import Donor


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class DonorService:

    @staticmethod
    def find_by_email(session: Session, email: str) -> Donor | None:
        stmt = select(Donor).where(Donor.email == normalize_email(email))
        return session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def create(
        session: Session,
        email: str,
        first_name: str,
        last_name: str,
        phone_number: str | None = None,
        user_id: int | None = None,
    ) -> Donor:
        """Insert a new donor and flush so its id is available."""
        donor = Donor(
            email=normalize_email(email),
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            user_id=user_id,
        )
        session.add(donor)
        session.flush()
        return donor
