"""
User error schemas.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class UserErrorResponse(BaseModel):
    id: int
    user_id: int
    type: str
    example: Optional[str] = None
    correction: Optional[str] = None
    count: int
    last_seen_at: datetime

    class Config:
        from_attributes = True


class UserErrorsResponse(BaseModel):
    errors: List[UserErrorResponse]
    count: int
