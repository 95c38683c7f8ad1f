"""
Recommended action model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, date
from sqlalchemy import DateTime
from coach_api.utils.time_utils import utc_now


class RecommendedAction(SQLModel, table=True):
    """Recommended actions table - short follow-up tasks for a week."""
    __tablename__ = "recommended_actions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    week_start: date
    category: str  # Grammar / Pronunciation / Vocabulary / Fluency
    action_text: str
    completed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
