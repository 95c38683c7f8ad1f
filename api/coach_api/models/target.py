"""
Target phrase model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from sqlalchemy import DateTime, UniqueConstraint
from coach_api.utils.time_utils import utc_now
from coach_api.models.enums import TargetStatus


class Target(SQLModel, table=True):
    """Targets table - phrases a user is practicing."""
    __tablename__ = "targets"
    # At most one row per (user, phrase)
    __table_args__ = (UniqueConstraint("user_id", "phrase", name="uq_targets_user_phrase"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    phrase: str
    cefr: Optional[str] = Field(default=None, max_length=2)
    status: str = Field(default=TargetStatus.PLANNED.value)  # planned / attempted / mastered
    first_seen_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
    last_seen_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
