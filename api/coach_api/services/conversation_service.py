"""
LLM-backed conversation operations: text replies, end-of-session feedback
and structured tutor turns.
"""
import logging
from typing import Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from coach_api.core.exceptions import ExternalServiceError
from coach_api.schemas.conversation import TranscriptTurn
from coach_api.schemas.realtime import ConversationMessage
from coach_api.schemas.tutor import TutorTurnIn, TutorTurnOut
from coach_api.services.completion_service import (
    CompletionGateway,
    FEEDBACK_FALLBACK,
    REPLY_FALLBACK,
    build_messages,
)
from coach_api.services.prompt_service import (
    FEEDBACK_SYSTEM_PROMPT,
    generate_conversation_prompt,
    generate_feedback_prompt,
    generate_tutor_system_prompt,
    generate_tutor_user_prompt,
)

logger = logging.getLogger(__name__)


def generate_reply(
    gateway: CompletionGateway,
    user_input: str,
    focus_areas: Sequence[str],
    level: str,
    history: Sequence[ConversationMessage],
) -> str:
    """Coach reply to one learner utterance, given the conversation so far."""
    messages = build_messages(generate_conversation_prompt(focus_areas, level), history, user_input)
    reply = gateway.complete(messages, temperature=0.8, max_tokens=200)
    if not reply:
        logger.warning("Empty reply from model, using fallback")
        return REPLY_FALLBACK
    return reply


def generate_feedback(
    gateway: CompletionGateway,
    focus_areas: Sequence[str],
    transcript: Sequence[TranscriptTurn],
    insight_summary: Optional[str] = None,
) -> str:
    """Two or three sentences of motivational feedback on a finished conversation."""
    messages = [
        {"role": "system", "content": FEEDBACK_SYSTEM_PROMPT},
        {"role": "user", "content": generate_feedback_prompt(focus_areas, transcript, insight_summary)},
    ]
    feedback = gateway.complete(messages, temperature=0.7, max_tokens=200)
    if not feedback:
        logger.warning("Empty feedback from model, using fallback")
        return FEEDBACK_FALLBACK
    return feedback


def run_tutor_turn(gateway: CompletionGateway, turn: TutorTurnIn) -> TutorTurnOut:
    """
    One structured tutor turn.

    Raises:
        ExternalServiceError: If the model output does not match the tutor contract
    """
    messages = [
        {"role": "system", "content": generate_tutor_system_prompt(turn.mode, turn.active_targets)},
        {"role": "user", "content": generate_tutor_user_prompt(turn.cefr, turn.user_text)},
    ]
    parsed = gateway.complete_json(messages, temperature=0.7)

    # Models sometimes send null for the list fields
    for key in ("corrections", "usedTargets", "missedTargets"):
        if parsed.get(key) is None:
            parsed[key] = []

    try:
        result = TutorTurnOut.model_validate(parsed)
    except PydanticValidationError as e:
        logger.error(f"Tutor output failed validation: {str(e)}")
        raise ExternalServiceError("Tutor response did not match the expected format", details=str(e)) from e

    logger.info(
        f"Tutor turn ({turn.mode}): {len(result.corrections)} corrections, "
        f"{len(result.used_targets)} targets used"
    )
    return result
