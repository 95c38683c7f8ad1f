"""
Realtime conversation schemas.
"""
from pydantic import BaseModel, Field
from typing import Annotated, Any, Dict, List, Literal
from coach_api.models.enums import CEFRLevel

FocusArea = Annotated[str, Field(min_length=1, max_length=100)]


class RealtimeFunction(BaseModel):
    """Tool definition handed to the realtime agent."""
    name: str
    description: str
    parameters: Dict[str, Any]


class RealtimeSessionConfig(BaseModel):
    model: str
    voice: str
    instructions: str
    functions: List[RealtimeFunction]
    active_targets: List[str] = Field(..., alias="activeTargets")

    class Config:
        populate_by_name = True


class ConversationMessage(BaseModel):
    role: Literal["user", "tutor", "assistant"]
    text: str = Field(..., max_length=5000)


class RealtimeMessageRequest(BaseModel):
    """One learner utterance plus the conversation so far."""
    input: str = Field(..., min_length=1, max_length=5000)
    focus_areas: List[FocusArea] = Field(..., alias="focusAreas", min_length=1, max_length=10)
    level: CEFRLevel
    messages: List[ConversationMessage] = Field(default_factory=list, max_length=500)

    class Config:
        populate_by_name = True


class RealtimeMessageResponse(BaseModel):
    reply: str
