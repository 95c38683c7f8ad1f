"""
Realtime voice session configuration.
"""
from typing import List, Sequence

from coach_api.core.config import settings
from coach_api.schemas.realtime import RealtimeFunction, RealtimeSessionConfig
from coach_api.services.prompt_service import generate_realtime_instructions

NAVIGATION_DESTINATIONS = ["/home", "/profile", "/free_conversation"]

REALTIME_FUNCTIONS: List[RealtimeFunction] = [
    RealtimeFunction(
        name="mark_target_used",
        description="Mark a target phrase as used by the student",
        parameters={
            "type": "object",
            "properties": {
                "phrase": {"type": "string", "description": "The target phrase that was used"},
            },
            "required": ["phrase"],
        },
    ),
    RealtimeFunction(
        name="add_correction",
        description="Add a correction for student error",
        parameters={
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": ["grammar", "vocab", "pron"]},
                "example": {"type": "string", "description": "What the student said"},
                "correction": {"type": "string", "description": "Corrected version"},
            },
            "required": ["type", "example", "correction"],
        },
    ),
    RealtimeFunction(
        name="end_session",
        description="End the practice session",
        parameters={"type": "object", "properties": {}},
    ),
    RealtimeFunction(
        name="navigate",
        description="Navigate the user to another page of the app",
        parameters={
            "type": "object",
            "properties": {
                "destination": {"type": "string", "enum": NAVIGATION_DESTINATIONS},
            },
            "required": ["destination"],
        },
    ),
]


def build_session_config(cefr_level: str, active_targets: Sequence[str]) -> RealtimeSessionConfig:
    """Instructions, tools and voice settings for a new realtime session."""
    return RealtimeSessionConfig(
        model=settings.openai_realtime_model,
        voice=settings.openai_realtime_voice,
        instructions=generate_realtime_instructions(cefr_level, active_targets),
        functions=REALTIME_FUNCTIONS,
        active_targets=list(active_targets),
    )
