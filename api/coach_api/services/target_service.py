"""
Target phrase service: inserts and status changes for a user's phrase library.

Uniqueness of (user_id, phrase) is enforced by the `uq_targets_user_phrase`
constraint. The existence pre-checks here only avoid needless inserts; a
concurrent duplicate surfaces as an IntegrityError and is resolved to the
existing row.
"""
import logging
from collections import Counter
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from coach_api.core.exceptions import ConflictError
from coach_api.models import Target, TargetStatus, CEFRLevel
from coach_api.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

ACTIVE_TARGET_LIMIT = 3

_STATUS_RANK = {
    TargetStatus.PLANNED.value: 0,
    TargetStatus.ATTEMPTED.value: 1,
    TargetStatus.MASTERED.value: 2,
}


def find_target(session: Session, user_id: int, phrase: str) -> Optional[Target]:
    return session.exec(
        select(Target).where(Target.user_id == user_id, Target.phrase == phrase)
    ).first()


def add_target(
    session: Session,
    user_id: int,
    phrase: str,
    cefr: str,
    strict: bool = False,
) -> Tuple[Target, bool]:
    """
    Add a phrase to a user's library.

    Args:
        session: Database session
        user_id: Owner of the phrase
        phrase: Normalized phrase text
        cefr: CEFR level to store with the phrase
        strict: If True, an existing phrase is a conflict instead of a no-op

    Returns:
        Tuple of (target row, already_exists)

    Raises:
        ConflictError: If strict and the phrase already exists
    """
    existing = find_target(session, user_id, phrase)
    if existing:
        if strict:
            raise ConflictError("Phrase already exists in your library")
        return existing, True

    now = utc_now()
    target = Target(
        user_id=user_id,
        phrase=phrase,
        cefr=cefr,
        status=TargetStatus.PLANNED.value,
        first_seen_at=now,
        last_seen_at=now,
    )
    try:
        session.add(target)
        session.commit()
        session.refresh(target)
    except IntegrityError as e:
        # Lost a race with a concurrent insert of the same phrase
        session.rollback()
        logger.info(f"Concurrent insert of target '{phrase}' for user {user_id}: {str(e.orig)}")
        existing = find_target(session, user_id, phrase)
        if existing is None:
            raise
        if strict:
            raise ConflictError("Phrase already exists in your library") from e
        return existing, True

    logger.info(f"Added target {target.id} '{phrase}' for user {user_id}")
    return target, False


def insert_new_targets(
    session: Session,
    user_id: int,
    targets: Sequence[Tuple[str, Optional[str]]],
) -> int:
    """
    Insert the (phrase, cefr) pairs a user does not already have, as planned targets.

    Duplicate phrases in `targets` collapse to their first occurrence. If the
    batch insert hits the unique constraint (concurrent request), the rows are
    retried one by one and duplicates skipped.

    Returns:
        Number of rows inserted
    """
    wanted = {}
    for phrase, cefr in targets:
        if phrase not in wanted:
            wanted[phrase] = cefr or CEFRLevel.B1.value
    if not wanted:
        return 0

    existing_phrases = set(session.exec(
        select(Target.phrase).where(
            Target.user_id == user_id,
            Target.phrase.in_(list(wanted.keys()))  # type: ignore
        )
    ).all())
    new_items = [(phrase, cefr) for phrase, cefr in wanted.items() if phrase not in existing_phrases]
    if not new_items:
        return 0

    now = utc_now()

    def _row(phrase: str, cefr: str) -> Target:
        return Target(
            user_id=user_id,
            phrase=phrase,
            cefr=cefr,
            status=TargetStatus.PLANNED.value,
            first_seen_at=now,
            last_seen_at=now,
        )

    try:
        session.add_all([_row(phrase, cefr) for phrase, cefr in new_items])
        session.commit()
        return len(new_items)
    except IntegrityError:
        session.rollback()
        logger.warning(f"Batch target insert for user {user_id} hit a duplicate; retrying row by row")

    inserted = 0
    for phrase, cefr in new_items:
        try:
            session.add(_row(phrase, cefr))
            session.commit()
            inserted += 1
        except IntegrityError:
            session.rollback()
    return inserted


def get_active_target_phrases(session: Session, user_id: int, limit: int = ACTIVE_TARGET_LIMIT) -> List[str]:
    """Most recently added planned phrases, newest first."""
    return list(session.exec(
        select(Target.phrase)
        .where(Target.user_id == user_id, Target.status == TargetStatus.PLANNED.value)
        .order_by(Target.first_seen_at.desc(), Target.id.desc())  # type: ignore
        .limit(limit)
    ).all())


def get_incomplete_targets(session: Session, user_id: int, limit: int = 10) -> List[Target]:
    """Planned or attempted targets, least recently seen first."""
    return list(session.exec(
        select(Target)
        .where(
            Target.user_id == user_id,
            Target.status.in_([TargetStatus.PLANNED.value, TargetStatus.ATTEMPTED.value])  # type: ignore
        )
        .order_by(Target.last_seen_at.asc(), Target.id.asc())  # type: ignore
        .limit(limit)
    ).all())


def record_target_usage(session: Session, user_id: int, used_phrases: Iterable[str]) -> int:
    """
    Advance the status of targets the learner used in a session.

    A phrase reported used twice or more becomes mastered, once becomes
    attempted. Status never moves backwards. Phrases the user has no target
    for are ignored. Does not commit.

    Returns:
        Number of targets touched
    """
    usage = Counter(used_phrases)
    if not usage:
        return 0

    rows = session.exec(
        select(Target).where(
            Target.user_id == user_id,
            Target.phrase.in_(list(usage.keys()))  # type: ignore
        )
    ).all()

    now = utc_now()
    for target in rows:
        new_status = TargetStatus.MASTERED.value if usage[target.phrase] >= 2 else TargetStatus.ATTEMPTED.value
        if _STATUS_RANK[new_status] > _STATUS_RANK.get(target.status, 0):
            target.status = new_status
        target.last_seen_at = now
        session.add(target)
    return len(rows)
