"""
Shared conversation schemas: transcript turns and corrections.
"""
from pydantic import BaseModel, Field
from typing import Literal, Optional
from coach_api.models.enums import ErrorType


class TranscriptTurn(BaseModel):
    """One role-tagged utterance in a saved transcript."""
    role: Literal["user", "tutor", "assistant"]
    text: str = Field(..., max_length=5000)
    timestamp: Optional[float] = Field(None, description="Milliseconds since epoch")


class Correction(BaseModel):
    """A learner mistake and its corrected form."""
    type: ErrorType
    example: str = Field(..., min_length=1, max_length=1000, description="What the learner said")
    correction: str = Field(..., max_length=1000, description="The corrected version")

    class Config:
        use_enum_values = True
        json_schema_extra = {
            "example": {
                "type": "grammar",
                "example": "Yesterday I go to the store",
                "correction": "Yesterday I went to the store"
            }
        }
