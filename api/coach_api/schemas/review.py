"""
Session history and transcript review schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from coach_api.schemas.conversation import Correction


class SessionHistoryItem(BaseModel):
    id: int
    started_at: datetime
    ended_at: Optional[datetime] = None
    speaking_ms: int
    student_turns: int
    tutor_turns: int
    adoption_score: float
    targets_used: List[str] = Field(default_factory=list, alias="targetsUsed")
    error_count: int = Field(0, alias="errorCount")

    class Config:
        populate_by_name = True


class SessionHistoryResponse(BaseModel):
    sessions: List[SessionHistoryItem]


class ReviewTurn(BaseModel):
    role: str
    text: str
    timestamp: Optional[float] = None
    corrections: List[Correction] = Field(default_factory=list)


class SessionReviewResponse(BaseModel):
    session_id: int = Field(..., alias="sessionId")
    started_at: datetime = Field(..., alias="startedAt")
    ended_at: Optional[datetime] = Field(None, alias="endedAt")
    transcript: List[ReviewTurn]
    corrections: List[Correction]
    user_turn_ratio: int = Field(0, alias="userTurnRatio", description="Percentage of turns spoken by the learner")

    class Config:
        populate_by_name = True
