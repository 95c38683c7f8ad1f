"""
User error history endpoint.
"""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from coach_api.core.database import get_session
from coach_api.core.security import get_current_profile
from coach_api.models import User
from coach_api.schemas.user_error import UserErrorResponse, UserErrorsResponse
from coach_api.services.error_service import list_user_errors

router = APIRouter(tags=["errors"])


@router.get("/user-errors", response_model=UserErrorsResponse)
async def get_user_errors(
    limit: int = Query(10, ge=1, le=100),
    profile: User = Depends(get_current_profile),
    session: Session = Depends(get_session)
):
    """The caller's most frequent errors."""
    errors = list_user_errors(session, profile.id, limit)
    return UserErrorsResponse(
        errors=[UserErrorResponse.model_validate(e) for e in errors],
        count=len(errors)
    )
