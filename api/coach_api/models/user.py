"""
User model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from sqlalchemy import DateTime
from coach_api.utils.time_utils import utc_now
from coach_api.models.enums import CEFRLevel, CorrectionMode


class User(SQLModel, table=True):
    """User table - learner profile linked to an auth provider identity."""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    auth_user_id: str = Field(unique=True, index=True)  # Stable id issued by the auth provider
    display_name: Optional[str] = Field(default=None)
    native_language: str = Field(default="ja")
    cefr_level: str = Field(default=CEFRLevel.B1.value, max_length=2)
    correction_mode: str = Field(default=CorrectionMode.BALANCED.value)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
