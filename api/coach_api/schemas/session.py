"""
Practice session schemas.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Annotated, List, Optional
from coach_api.models.enums import CEFRLevel
from coach_api.schemas.conversation import Correction, TranscriptTurn
from coach_api.utils.text_utils import normalize_phrase

ShortText = Annotated[str, Field(max_length=200)]
FocusArea = Annotated[str, Field(min_length=1, max_length=100)]


class TargetInput(BaseModel):
    """A phrase to practice in a new session."""
    phrase: str = Field(..., max_length=200)
    cefr: Optional[CEFRLevel] = None

    @field_validator('phrase')
    @classmethod
    def phrase_not_blank(cls, v: str) -> str:
        v = normalize_phrase(v)
        if not v:
            raise ValueError('phrase cannot be empty')
        return v


class CreateSessionRequest(BaseModel):
    """Request to start a practice session with target phrases."""
    user_id: int = Field(..., alias="userId")
    targets: List[TargetInput] = Field(..., max_length=50)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "userId": 1,
                "targets": [{"phrase": "I was wondering if...", "cefr": "B1"}]
            }
        }


class CreateSessionResponse(BaseModel):
    session_id: int = Field(..., alias="sessionId")

    class Config:
        populate_by_name = True


class SaveConversationRequest(BaseModel):
    """Transcript of a finished live conversation."""
    week_id: int = Field(..., alias="weekId", ge=1)
    focus_areas: List[FocusArea] = Field(..., alias="focusAreas", min_length=1, max_length=10)
    transcript: List[TranscriptTurn] = Field(..., max_length=500)
    insight_summary: Optional[str] = Field(None, alias="insightSummary", max_length=2000)

    class Config:
        populate_by_name = True

    @field_validator('transcript')
    @classmethod
    def transcript_not_empty(cls, v: List[TranscriptTurn]) -> List[TranscriptTurn]:
        if not v:
            raise ValueError('Transcript cannot be empty')
        return v


class SaveConversationResponse(BaseModel):
    session_id: int = Field(..., alias="sessionId")
    feedback: str

    class Config:
        populate_by_name = True


class SessionMetrics(BaseModel):
    wpm: Optional[float] = None
    filler_rate: Optional[float] = None
    avg_pause_ms: Optional[float] = None


class SessionSummaryIn(BaseModel):
    """End-of-session report used to update targets, errors and fluency history."""
    session_id: int = Field(..., alias="sessionId")
    used_targets: List[ShortText] = Field(default_factory=list, alias="usedTargets", max_length=50)
    missed_targets: List[ShortText] = Field(default_factory=list, alias="missedTargets", max_length=50)
    corrections: List[Correction] = Field(default_factory=list, max_length=100)
    transcript: Optional[List[TranscriptTurn]] = Field(None, max_length=500)
    metrics: Optional[SessionMetrics] = None

    class Config:
        populate_by_name = True

    @field_validator('used_targets', 'missed_targets')
    @classmethod
    def normalize_target_phrases(cls, v: List[str]) -> List[str]:
        # Match the stored form of target phrases
        return [p for p in (normalize_phrase(phrase) for phrase in v) if p]


class SessionSummaryResponse(BaseModel):
    success: bool
    targets_updated: int = Field(0, alias="targetsUpdated")
    errors_recorded: int = Field(0, alias="errorsRecorded")

    class Config:
        populate_by_name = True
