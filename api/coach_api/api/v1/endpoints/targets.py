"""
Target phrase endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from coach_api.core.database import get_session
from coach_api.core.security import ensure_owner, get_current_profile
from coach_api.models import CEFRLevel, User
from coach_api.schemas.target import AddTargetRequest, AddTargetResponse
from coach_api.services.target_service import add_target

router = APIRouter(prefix="/targets", tags=["targets"])


@router.post("/add", response_model=AddTargetResponse)
async def add_target_phrase(
    request: AddTargetRequest,
    strict: bool = Query(False, description="Reject phrases already in the library with 409"),
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session)
):
    """Add a phrase to the user's library, or return the existing entry."""
    ensure_owner(profile, request.user_id)
    cefr = request.cefr.value if request.cefr else (profile.cefr_level or CEFRLevel.B1.value)
    target, already_exists = add_target(session, profile.id, request.phrase, cefr, strict=strict)
    return AddTargetResponse(
        target_id=target.id,
        phrase=target.phrase,
        status=target.status,
        already_exists=already_exists,
    )
