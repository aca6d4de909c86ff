"""
import_engine.importer - Top-level orchestrator.

Coordinates csv_parser → row_processor → donor_resolver → batch_writer
→ aggregator and produces a structured ImportResult.

Row errors are collected during parsing and never stop the run.  Everything
after parsing (donor creation, the batch insert, campaign totals) happens in
one transaction: it commits as a whole, or rolls back and the run is
reported as a single row-0 failure.
"""

from __future__ import annotations

import enum
import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from db.engine import get_session
from db.models import Donor
from import_engine.aggregator import update_campaign_totals
from import_engine.batch_writer import insert_donations
from import_engine.csv_parser import iter_records
from import_engine.donor_resolver import DonorResolver
from import_engine.report import ImportResult
from import_engine.row_processor import DonationCandidate, RowError, RowProcessor

logger = logging.getLogger(__name__)


class ImportStage(str, enum.Enum):
    PARSING     = "parsing"
    RESOLVING   = "resolving donors"
    WRITING     = "writing batch"
    AGGREGATING = "aggregating"


def run_import(
    file_content: str | bytes,
    *,
    today: Optional[date] = None,
    session: Optional[Session] = None,
    anonymous_email: Optional[str] = None,
) -> ImportResult:
    """
    Import a bulk donation CSV blob.

    Parameters
    ----------
    file_content : raw CSV (bytes or str), header row first
    today : donation date stamped on every imported row (default: today)
    session : session to run in; a new one is opened (and closed) if omitted
    anonymous_email : override for config.ANONYMOUS_EMAIL

    Returns
    -------
    ImportResult with per-row error details.  Never raises for bad data
    or persistence failures.
    """
    result = ImportResult()
    processor = RowProcessor(today or date.today(), anonymous_email)

    owns_session = session is None
    if owns_session:
        session = get_session()

    stage = ImportStage.PARSING
    try:
        candidates = _parse(session, file_content, processor, result)

        if not candidates:
            logger.warning("No valid donations found in CSV upload (%d rows)", result.total_rows)
            session.rollback()
            return result

        donor_cache: dict[str, Donor] = {}

        stage = ImportStage.RESOLVING
        resolver = DonorResolver(session, donor_cache)
        pairs = resolver.resolve_all(candidates)

        stage = ImportStage.WRITING
        insert_donations(session, pairs)

        stage = ImportStage.AGGREGATING
        update_campaign_totals(session, candidates)

        session.commit()
        result.success_count = len(candidates)
        logger.info("Successfully processed %d donations (%d rows rejected, %d new donors)",
                    result.success_count, result.failure_count, resolver.created)
    except Exception as exc:
        session.rollback()
        logger.exception("Bulk donation import failed while %s", stage.value)
        result.add_error(0, f"Failed to process file: {exc}")
    finally:
        if owns_session:
            session.close()

    return result


def _parse(
    session: Session,
    file_content: str | bytes,
    processor: RowProcessor,
    result: ImportResult,
) -> list[DonationCandidate]:
    candidates: list[DonationCandidate] = []
    for row_number, record in iter_records(file_content):
        result.total_rows += 1
        try:
            candidates.append(processor.process(session, record))
        except RowError as exc:
            result.add_error(row_number, str(exc))
    return candidates
