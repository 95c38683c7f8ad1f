"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from coach_api.api.v1.endpoints import (
    realtime, sessions, targets, user_errors, recommendations, tutor
)

api_router = APIRouter()

# Each router already defines its own prefix
api_router.include_router(realtime.router)
api_router.include_router(sessions.router)
api_router.include_router(targets.router)
api_router.include_router(user_errors.router)
api_router.include_router(recommendations.router)
api_router.include_router(tutor.router)
