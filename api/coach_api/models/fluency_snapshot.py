"""
Fluency snapshot model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from sqlalchemy import DateTime
from coach_api.utils.time_utils import utc_now


class FluencySnapshot(SQLModel, table=True):
    """Fluency snapshots table - speaking metrics captured at the end of a session."""
    __tablename__ = "fluency_snapshots"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    session_id: int = Field(foreign_key="sessions.id")
    wpm: Optional[float] = None
    filler_rate: Optional[float] = None
    avg_pause_ms: Optional[float] = None
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
