"""
import_engine.donor_resolver - Map normalised donor emails to Donor rows.

The cache is owned by the caller (one dict per import run) so that two
uploads running side by side never share donor state.  Existing donors
are returned as stored: an import never rewrites a donor's name.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from db.models import Donor
from services.donor_service import DonorService

logger = logging.getLogger(__name__)


class DonorResolver:

    def __init__(self, session: Session, cache: dict[str, Donor]):
        self._session = session
        self._cache = cache
        self.created = 0

    def resolve(self, email: str, first_name: str, last_name: str) -> Donor:
        """
        Return the donor for email, creating it on first sight.  At most
        one lookup (and at most one insert) per distinct email per run.
        """
        donor = self._cache.get(email)
        if donor is not None:
            return donor

        donor = DonorService.find_by_email(self._session, email)
        if donor is None:
            donor = DonorService.create(self._session, email, first_name, last_name)
            self.created += 1
            logger.info("Created new donor %s with id %s", email, donor.id)

        self._cache[email] = donor
        return donor

    def resolve_all(self, candidates) -> list[tuple[object, Donor]]:
        """Pair every candidate with its donor, preserving order."""
        return [
            (c, self.resolve(c.donor_email, c.donor_first_name, c.donor_last_name))
            for c in candidates
        ]
