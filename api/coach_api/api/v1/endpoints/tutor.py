"""
Structured tutor turn and micro-pack planner endpoints.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from coach_api.core.database import get_session
from coach_api.core.security import get_current_profile
from coach_api.models import User
from coach_api.schemas.planner import MicroPack, PlannerInput
from coach_api.schemas.tutor import TutorTurnIn, TutorTurnOut
from coach_api.services.completion_service import CompletionGateway, get_completion_gateway
from coach_api.services.conversation_service import run_tutor_turn
from coach_api.services.planner_service import plan_micro_pack

router = APIRouter(tags=["tutor"])


@router.post("/tutor", response_model=TutorTurnOut)
def tutor_turn(
    request: TutorTurnIn,
    profile: User = Depends(get_current_profile),
    gateway: CompletionGateway = Depends(get_completion_gateway)
):
    """One tutor reply with corrections, following the requested correction mode."""
    return run_tutor_turn(gateway, request)


@router.post("/planner", response_model=MicroPack)
async def plan_next_session(
    request: PlannerInput,
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session)
):
    """Three phrases plus a grammar and pronunciation point, personalized from the user's history."""
    return plan_micro_pack(session, profile.id, request.cefr)
