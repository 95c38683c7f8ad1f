"""
Recommended action schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime


class RecommendedActionResponse(BaseModel):
    id: int
    user_id: int
    week_start: date
    category: str
    action_text: str
    completed: bool
    created_at: datetime

    class Config:
        from_attributes = True


class RecommendationsResponse(BaseModel):
    actions: List[RecommendedActionResponse]
    message: Optional[str] = None


class GenerateRecommendationsRequest(BaseModel):
    """Weekly insight to turn into short practice actions."""
    insight_text: str = Field(..., alias="insightText", min_length=1, max_length=4000)
    week_start: date = Field(..., alias="weekStart")

    class Config:
        populate_by_name = True


class CompleteRecommendationRequest(BaseModel):
    id: int


class CompleteRecommendationResponse(BaseModel):
    success: bool
    action: RecommendedActionResponse


class ClearRecommendationsResponse(BaseModel):
    success: bool
    deleted_count: int
    message: str
