"""
Conversation session model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from sqlalchemy import Column, DateTime, JSON
from coach_api.utils.time_utils import utc_now


class ConversationSession(SQLModel, table=True):
    """Conversation sessions table - saved transcript plus generated feedback. Written once."""
    __tablename__ = "conversation_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    week_id: int
    focus_areas: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    transcript: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    feedback: str
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
