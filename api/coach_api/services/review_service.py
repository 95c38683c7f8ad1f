"""
Read-only views over finished sessions: history list and transcript review.
"""
import logging
from typing import Any, Dict, List, Sequence

from sqlmodel import Session, select

from coach_api.models import PracticeSession
from coach_api.schemas.review import (
    ReviewTurn,
    SessionHistoryItem,
    SessionReviewResponse,
)
from coach_api.services.session_service import get_owned_session
from coach_api.utils.text_utils import contains_ignore_case

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20


def find_corrections_for_turn(turn: Dict[str, Any], corrections: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Corrections whose example appears in a user turn (case-insensitive).

    Tutor turns never carry corrections. A correction can match several turns.
    """
    if turn.get("role") != "user":
        return []
    text = turn.get("text") or ""
    return [c for c in corrections if contains_ignore_case(text, c.get("example") or "")]


def user_turn_ratio(transcript: Sequence[Dict[str, Any]]) -> int:
    """Percentage of turns spoken by the learner, rounded to an integer."""
    if not transcript:
        return 0
    user_turns = sum(1 for turn in transcript if turn.get("role") == "user")
    return round(user_turns * 100 / len(transcript))


def list_session_history(session: Session, user_id: int, limit: int = HISTORY_LIMIT) -> List[SessionHistoryItem]:
    """The user's most recent sessions with used targets and error counts."""
    rows = session.exec(
        select(PracticeSession)
        .where(PracticeSession.user_id == user_id)
        .order_by(PracticeSession.started_at.desc(), PracticeSession.id.desc())  # type: ignore
        .limit(limit)
    ).all()

    items = []
    for row in rows:
        summary = row.summary or {}
        items.append(SessionHistoryItem(
            id=row.id,
            started_at=row.started_at,
            ended_at=row.ended_at,
            speaking_ms=row.speaking_ms,
            student_turns=row.student_turns,
            tutor_turns=row.tutor_turns,
            adoption_score=row.adoption_score,
            targets_used=list(summary.get("usedTargets") or []),
            error_count=len(summary.get("corrections") or []),
        ))
    return items


def review_session(session: Session, user_id: int, session_id: int) -> SessionReviewResponse:
    """
    Build the transcript review for one session.

    Raises:
        NotFoundError: If the session is not owned by the user
    """
    practice_session = get_owned_session(session, user_id, session_id)
    summary = practice_session.summary or {}
    transcript = summary.get("transcript") or []
    corrections = summary.get("corrections") or []

    turns = [
        ReviewTurn(
            role=turn.get("role", ""),
            text=turn.get("text", ""),
            timestamp=turn.get("timestamp"),
            corrections=find_corrections_for_turn(turn, corrections),
        )
        for turn in transcript
    ]
    logger.info(f"Built review for session {session_id} ({len(turns)} turns)")
    return SessionReviewResponse(
        session_id=practice_session.id,
        started_at=practice_session.started_at,
        ended_at=practice_session.ended_at,
        transcript=turns,
        corrections=corrections,
        user_turn_ratio=user_turn_ratio(transcript),
    )
