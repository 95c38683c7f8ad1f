"""
Target phrase schemas.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from coach_api.models.enums import CEFRLevel
from coach_api.utils.text_utils import normalize_phrase


class AddTargetRequest(BaseModel):
    """Request to add a phrase to the user's library."""
    user_id: int = Field(..., alias="userId")
    phrase: str = Field(..., max_length=200)
    cefr: Optional[CEFRLevel] = None

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {"userId": 1, "phrase": "From my perspective...", "cefr": "B2"}
        }

    @field_validator('phrase')
    @classmethod
    def phrase_not_blank(cls, v: str) -> str:
        v = normalize_phrase(v)
        if not v:
            raise ValueError('phrase cannot be empty')
        return v


class AddTargetResponse(BaseModel):
    target_id: int = Field(..., alias="targetId")
    phrase: str
    status: str
    already_exists: bool = Field(..., alias="alreadyExists")

    class Config:
        populate_by_name = True
