"""
Recommended practice action endpoints.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from coach_api.core.database import get_session
from coach_api.core.security import get_current_profile
from coach_api.models import User
from coach_api.schemas.recommendation import (
    ClearRecommendationsResponse,
    CompleteRecommendationRequest,
    CompleteRecommendationResponse,
    GenerateRecommendationsRequest,
    RecommendationsResponse,
    RecommendedActionResponse,
)
from coach_api.services.completion_service import CompletionGateway, get_completion_gateway
from coach_api.services.recommendation_service import (
    clear_actions,
    complete_action,
    generate_actions,
    list_open_actions,
)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get("", response_model=RecommendationsResponse)
async def get_recommendations(
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session)
):
    """Up to three open actions, newest week first."""
    actions = list_open_actions(session, profile.id)
    return RecommendationsResponse(
        actions=[RecommendedActionResponse.model_validate(a) for a in actions]
    )


@router.post("", response_model=RecommendationsResponse)
def create_recommendations(
    request: GenerateRecommendationsRequest,
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session),
    gateway: CompletionGateway = Depends(get_completion_gateway)
):
    """Generate this week's actions from an insight text. Existing actions for the week are returned as-is."""
    actions = generate_actions(session, gateway, profile, request.insight_text, request.week_start)
    return RecommendationsResponse(
        actions=[RecommendedActionResponse.model_validate(a) for a in actions],
        message=f"{len(actions)} action(s) for week {request.week_start.isoformat()}"
    )


@router.post("/complete", response_model=CompleteRecommendationResponse)
async def complete_recommendation(
    request: CompleteRecommendationRequest,
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session)
):
    """Mark one of the caller's actions as completed."""
    action = complete_action(session, profile.id, request.id)
    return CompleteRecommendationResponse(
        success=True,
        action=RecommendedActionResponse.model_validate(action)
    )


@router.delete("/clear", response_model=ClearRecommendationsResponse)
async def clear_recommendations(
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session)
):
    """Delete all of the caller's actions."""
    deleted_count = clear_actions(session, profile.id)
    return ClearRecommendationsResponse(
        success=True,
        deleted_count=deleted_count,
        message=f"Deleted {deleted_count} recommended action(s)"
    )
