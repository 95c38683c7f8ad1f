"""
Practice session service: creating sessions, saving live conversations and
applying end-of-session summaries.
"""
import logging
from typing import Dict, Any, Optional, Sequence

from sqlmodel import Session, select

from coach_api.core.exceptions import NotFoundError
from coach_api.models import (
    PracticeSession,
    ConversationSession,
    FluencySnapshot,
)
from coach_api.schemas.conversation import TranscriptTurn
from coach_api.schemas.session import SessionSummaryIn, TargetInput
from coach_api.services.error_service import record_corrections
from coach_api.services.target_service import insert_new_targets, record_target_usage
from coach_api.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


def create_practice_session(
    session: Session,
    user_id: int,
    targets: Sequence[TargetInput],
) -> PracticeSession:
    """
    Create a session row, then insert the user's new target phrases.

    The two writes are independent: if inserting targets fails, the session
    row is kept and the failure is only logged.

    Args:
        session: Database session
        user_id: Owner of the session (already authorized)
        targets: Phrases to practice

    Returns:
        The created PracticeSession
    """
    practice_session = PracticeSession(
        user_id=user_id,
        started_at=utc_now(),
        student_turns=0,
        tutor_turns=0,
        speaking_ms=0,
        adoption_score=0,
        summary={},
    )
    session.add(practice_session)
    session.commit()
    session.refresh(practice_session)
    logger.info(f"Created session {practice_session.id} for user {user_id}")

    if targets:
        try:
            inserted = insert_new_targets(
                session,
                user_id,
                [(t.phrase, t.cefr.value if t.cefr else None) for t in targets],
            )
            logger.info(f"Inserted {inserted} new target(s) for session {practice_session.id}")
        except Exception as e:
            session.rollback()
            logger.error(
                f"Failed to insert targets for session {practice_session.id}: {str(e)}",
                exc_info=True
            )

    return practice_session


def save_conversation(
    session: Session,
    user_id: int,
    week_id: int,
    focus_areas: Sequence[str],
    transcript: Sequence[TranscriptTurn],
    feedback: str,
) -> ConversationSession:
    """Persist a finished live conversation together with its feedback."""
    conversation = ConversationSession(
        user_id=user_id,
        week_id=week_id,
        focus_areas=list(focus_areas),
        transcript=[turn.model_dump(exclude_none=True) for turn in transcript],
        feedback=feedback,
    )
    session.add(conversation)
    session.commit()
    session.refresh(conversation)
    logger.info(f"Saved conversation session {conversation.id} for user {user_id}")
    return conversation


def get_owned_session(session: Session, user_id: int, session_id: int) -> PracticeSession:
    """
    Fetch a practice session owned by `user_id`.

    Raises:
        NotFoundError: If the session does not exist or belongs to someone else
    """
    practice_session = session.exec(
        select(PracticeSession).where(
            PracticeSession.id == session_id,
            PracticeSession.user_id == user_id
        )
    ).first()
    if not practice_session:
        raise NotFoundError("Session not found")
    return practice_session


def compute_adoption_score(used_targets: Sequence[str], missed_targets: Sequence[str]) -> float:
    """Share of distinct offered phrases the learner actually used (0..1)."""
    used = set(used_targets)
    offered = used | set(missed_targets)
    if not offered:
        return 0.0
    return round(len(used) / len(offered), 2)


def apply_session_summary(session: Session, user_id: int, summary: SessionSummaryIn) -> Dict[str, Any]:
    """
    Close a session and fold its outcome into the learner's history.

    Stores the summary blob and end time on the session, advances used
    targets, upserts error aggregates and records a fluency snapshot when
    at least one metric was sent.

    Raises:
        NotFoundError: If the session is not owned by the user

    Returns:
        Dict with 'targets_updated' and 'errors_recorded' counts
    """
    practice_session = get_owned_session(session, user_id, summary.session_id)
    transcript = summary.transcript or []

    practice_session.ended_at = utc_now()
    practice_session.summary = {
        "usedTargets": list(summary.used_targets),
        "missedTargets": list(summary.missed_targets),
        "corrections": [c.model_dump() for c in summary.corrections],
        "transcript": [turn.model_dump(exclude_none=True) for turn in transcript],
    }
    practice_session.adoption_score = compute_adoption_score(summary.used_targets, summary.missed_targets)
    if transcript:
        practice_session.student_turns = sum(1 for turn in transcript if turn.role == "user")
        practice_session.tutor_turns = len(transcript) - practice_session.student_turns
        speaking_ms = _speaking_ms(transcript)
        if speaking_ms is not None:
            practice_session.speaking_ms = speaking_ms
    session.add(practice_session)

    targets_updated = record_target_usage(session, user_id, summary.used_targets)
    errors_recorded = record_corrections(session, user_id, summary.corrections)

    metrics = summary.metrics
    if metrics and any(v is not None for v in (metrics.wpm, metrics.filler_rate, metrics.avg_pause_ms)):
        session.add(FluencySnapshot(
            user_id=user_id,
            session_id=practice_session.id,
            wpm=metrics.wpm,
            filler_rate=metrics.filler_rate,
            avg_pause_ms=metrics.avg_pause_ms,
        ))

    session.commit()
    logger.info(
        f"Summarized session {practice_session.id} for user {user_id}: "
        f"{targets_updated} targets updated, {errors_recorded} corrections recorded"
    )
    return {"targets_updated": targets_updated, "errors_recorded": errors_recorded}


def _speaking_ms(transcript: Sequence[TranscriptTurn]) -> Optional[int]:
    # Span between the first and last timestamped turn
    stamps = [turn.timestamp for turn in transcript if turn.timestamp is not None]
    if len(stamps) < 2:
        return None
    return int(max(stamps) - min(stamps))
