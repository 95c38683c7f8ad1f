"""
Planner schemas.
"""
from pydantic import BaseModel, Field
from typing import Annotated, List, Optional


class PlannerInput(BaseModel):
    cefr: str = Field(..., max_length=10)
    last_errors: Optional[List[Annotated[str, Field(max_length=500)]]] = Field(None, alias="lastErrors", max_length=20)
    interests: Optional[List[Annotated[str, Field(max_length=100)]]] = Field(None, max_length=10)

    class Config:
        populate_by_name = True


class PlannedTarget(BaseModel):
    phrase: str
    cefr: str


class MicroPack(BaseModel):
    """Three phrases plus one grammar and one pronunciation point for the next session."""
    targets: List[PlannedTarget]
    grammar: str
    pron: str
