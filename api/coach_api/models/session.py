"""
Practice session model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional, Dict, Any
from datetime import datetime
from sqlalchemy import Column, DateTime, JSON
from coach_api.utils.time_utils import utc_now


class PracticeSession(SQLModel, table=True):
    """Sessions table - one practice conversation with its counters and summary."""
    __tablename__ = "sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    started_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
    ended_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    speaking_ms: int = Field(default=0)
    student_turns: int = Field(default=0)
    tutor_turns: int = Field(default=0)
    adoption_score: float = Field(default=0)
    # Free-form blob: usedTargets, missedTargets, corrections, transcript
    summary: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
