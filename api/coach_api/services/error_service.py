"""
Error aggregate service.
"""
import logging
from typing import List, Sequence

from sqlmodel import Session, select

from coach_api.models import ErrorRecord
from coach_api.schemas.conversation import Correction
from coach_api.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


def list_user_errors(session: Session, user_id: int, limit: int = 10) -> List[ErrorRecord]:
    """A user's errors, most frequent first, ties broken by most recent."""
    return list(session.exec(
        select(ErrorRecord)
        .where(ErrorRecord.user_id == user_id)
        .order_by(ErrorRecord.count.desc(), ErrorRecord.last_seen_at.desc(), ErrorRecord.id.desc())  # type: ignore
        .limit(limit)
    ).all())


def list_recurring_errors(session: Session, user_id: int, min_count: int = 2, limit: int = 5) -> List[ErrorRecord]:
    """Errors seen at least `min_count` times, most frequent first."""
    return list(session.exec(
        select(ErrorRecord)
        .where(ErrorRecord.user_id == user_id, ErrorRecord.count >= min_count)
        .order_by(ErrorRecord.count.desc(), ErrorRecord.last_seen_at.desc())  # type: ignore
        .limit(limit)
    ).all())


def record_corrections(session: Session, user_id: int, corrections: Sequence[Correction]) -> int:
    """
    Fold a session's corrections into the user's error aggregates.

    Errors are keyed by (user, example): a known example has its count
    incremented and last_seen_at refreshed, a new one is inserted with count 1.
    Does not commit.

    Returns:
        Number of corrections recorded
    """
    now = utc_now()
    for correction in corrections:
        existing = session.exec(
            select(ErrorRecord).where(
                ErrorRecord.user_id == user_id,
                ErrorRecord.example == correction.example
            )
        ).first()

        if existing:
            existing.count += 1
            existing.last_seen_at = now
            session.add(existing)
        else:
            session.add(ErrorRecord(
                user_id=user_id,
                type=correction.type,
                example=correction.example,
                correction=correction.correction,
                count=1,
                last_seen_at=now,
            ))
        # Make the new row visible to the next lookup in this batch
        session.flush()
    return len(corrections)
