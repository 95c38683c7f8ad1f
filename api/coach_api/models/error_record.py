"""
Error aggregate model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from sqlalchemy import DateTime
from coach_api.utils.time_utils import utc_now


class ErrorRecord(SQLModel, table=True):
    """Errors table - a recurring mistake with how often it was seen."""
    __tablename__ = "errors"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    type: str  # grammar / vocab / pron
    example: Optional[str] = None  # What the learner said
    correction: Optional[str] = None
    count: int = Field(default=1)
    last_seen_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
