"""
Practice session endpoints: create, save live conversations, summarize and review.
"""
import logging

from fastapi import APIRouter, Depends
from sqlmodel import Session

from coach_api.core.database import get_session
from coach_api.core.security import ensure_owner, get_current_profile
from coach_api.models import User
from coach_api.schemas.review import SessionHistoryResponse, SessionReviewResponse
from coach_api.schemas.session import (
    CreateSessionRequest,
    CreateSessionResponse,
    SaveConversationRequest,
    SaveConversationResponse,
    SessionSummaryIn,
    SessionSummaryResponse,
)
from coach_api.services.completion_service import CompletionGateway, get_completion_gateway
from coach_api.services.conversation_service import generate_feedback
from coach_api.services.review_service import list_session_history, review_session
from coach_api.services.session_service import (
    apply_session_summary,
    create_practice_session,
    save_conversation,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions"])


@router.post("/session/create", response_model=CreateSessionResponse)
async def create_session(
    request: CreateSessionRequest,
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session)
):
    """
    Start a practice session and add any new target phrases to the user's library.

    Phrases the user already has are skipped; a failure while inserting
    targets does not undo the session.
    """
    ensure_owner(profile, request.user_id)
    practice_session = create_practice_session(session, profile.id, request.targets)
    return CreateSessionResponse(session_id=practice_session.id)


@router.post("/session/live", response_model=SaveConversationResponse)
def save_live_session(
    request: SaveConversationRequest,
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session),
    gateway: CompletionGateway = Depends(get_completion_gateway)
):
    """Generate feedback for a finished live conversation and store it with the transcript."""
    feedback = generate_feedback(
        gateway,
        request.focus_areas,
        request.transcript,
        request.insight_summary,
    )
    conversation = save_conversation(
        session,
        profile.id,
        request.week_id,
        request.focus_areas,
        request.transcript,
        feedback,
    )
    return SaveConversationResponse(session_id=conversation.id, feedback=feedback)


@router.post("/summarize", response_model=SessionSummaryResponse)
async def summarize_session(
    request: SessionSummaryIn,
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session)
):
    """Close a session and update target status, error history and fluency metrics."""
    result = apply_session_summary(session, profile.id, request)
    return SessionSummaryResponse(
        success=True,
        targets_updated=result["targets_updated"],
        errors_recorded=result["errors_recorded"],
    )


@router.get("/sessions", response_model=SessionHistoryResponse)
async def get_session_history(
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session)
):
    """The caller's 20 most recent sessions."""
    return SessionHistoryResponse(sessions=list_session_history(session, profile.id))


@router.get("/sessions/{session_id}/review", response_model=SessionReviewResponse)
async def get_session_review(
    session_id: int,
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session)
):
    """Transcript of one session with corrections attached to the turns they came from."""
    return review_session(session, profile.id, session_id)
