"""
Tutor turn schemas: the request sent by the client and the JSON contract the model must meet.
"""
from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Optional
from coach_api.models.enums import ErrorType

ShortText = Annotated[str, Field(max_length=200)]


class TutorTurnIn(BaseModel):
    user_text: str = Field(..., alias="userText", min_length=1, max_length=5000)
    cefr: str = Field(..., max_length=10)
    active_targets: List[ShortText] = Field(default_factory=list, alias="activeTargets", max_length=10)
    mode: Literal["gentle", "turn", "post"]

    class Config:
        populate_by_name = True


class TutorCorrection(BaseModel):
    type: ErrorType
    example: str
    correction: str
    note: Optional[str] = None

    class Config:
        use_enum_values = True


class TutorEnforce(BaseModel):
    must_use_next: Optional[str] = None


class TutorMetrics(BaseModel):
    fillers: Optional[float] = None
    pause_ms: Optional[float] = None


class TutorTurnOut(BaseModel):
    reply: str
    corrections: List[TutorCorrection] = Field(default_factory=list)
    enforce: Optional[TutorEnforce] = None
    metrics: Optional[TutorMetrics] = None
    used_targets: List[str] = Field(default_factory=list, alias="usedTargets")
    missed_targets: List[str] = Field(default_factory=list, alias="missedTargets")

    class Config:
        populate_by_name = True
