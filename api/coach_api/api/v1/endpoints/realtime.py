"""
Realtime conversation endpoints.
"""
import logging

from fastapi import APIRouter, Depends
from sqlmodel import Session

from coach_api.core.database import get_session
from coach_api.core.security import get_current_profile
from coach_api.models import User
from coach_api.schemas.realtime import (
    RealtimeMessageRequest,
    RealtimeMessageResponse,
    RealtimeSessionConfig,
)
from coach_api.services.completion_service import CompletionGateway, get_completion_gateway
from coach_api.services.conversation_service import generate_reply
from coach_api.services.realtime_service import build_session_config
from coach_api.services.target_service import get_active_target_phrases

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.post("/realtime-session", response_model=RealtimeSessionConfig)
async def create_realtime_session(
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session)
):
    """Session config for the realtime voice agent: instructions, tools and the learner's active targets."""
    active_targets = get_active_target_phrases(session, profile.id)
    logger.info(f"Realtime session config for user {profile.id} with {len(active_targets)} active target(s)")
    return build_session_config(profile.cefr_level, active_targets)


@router.post("/realtime", response_model=RealtimeMessageResponse)
def realtime_message(
    request: RealtimeMessageRequest,
    profile: User = Depends(get_current_profile),
    gateway: CompletionGateway = Depends(get_completion_gateway)
):
    """Reply to one learner utterance in a text conversation."""
    reply = generate_reply(
        gateway,
        request.input,
        request.focus_areas,
        request.level.value,
        request.messages,
    )
    return RealtimeMessageResponse(reply=reply)
