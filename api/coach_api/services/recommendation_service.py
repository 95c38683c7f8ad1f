"""
Recommended action service.
"""
import logging
from datetime import date
from typing import List

from sqlmodel import Session, select

from coach_api.core.exceptions import ExternalServiceError, NotFoundError
from coach_api.models import RecommendedAction, User
from coach_api.services.completion_service import CompletionGateway
from coach_api.services.prompt_service import (
    RECOMMENDATION_SYSTEM_PROMPT,
    generate_recommendation_prompt,
)
from coach_api.utils.text_utils import truncate

logger = logging.getLogger(__name__)

MAX_ACTIONS = 3
MAX_ACTION_LENGTH = 100


def list_open_actions(session: Session, user_id: int, limit: int = MAX_ACTIONS) -> List[RecommendedAction]:
    """Latest incomplete actions, newest week first."""
    return list(session.exec(
        select(RecommendedAction)
        .where(RecommendedAction.user_id == user_id, RecommendedAction.completed == False)  # noqa: E712
        .order_by(RecommendedAction.week_start.desc(), RecommendedAction.created_at.desc())  # type: ignore
        .limit(limit)
    ).all())


def list_week_actions(session: Session, user_id: int, week_start: date) -> List[RecommendedAction]:
    return list(session.exec(
        select(RecommendedAction)
        .where(RecommendedAction.user_id == user_id, RecommendedAction.week_start == week_start)
        .order_by(RecommendedAction.created_at.desc(), RecommendedAction.id.desc())  # type: ignore
    ).all())


def complete_action(session: Session, user_id: int, action_id: int) -> RecommendedAction:
    """
    Mark an action as completed.

    The owner is part of the lookup filter, so another user's action is
    indistinguishable from a missing one.

    Raises:
        NotFoundError: If no action with this id belongs to the user
    """
    action = session.exec(
        select(RecommendedAction).where(
            RecommendedAction.id == action_id,
            RecommendedAction.user_id == user_id
        )
    ).first()
    if not action:
        raise NotFoundError("Action not found or does not belong to user")

    action.completed = True
    session.add(action)
    session.commit()
    session.refresh(action)
    logger.info(f"Action {action_id} completed by user {user_id}")
    return action


def clear_actions(session: Session, user_id: int) -> int:
    """Delete all of a user's actions and return how many were removed."""
    actions = session.exec(
        select(RecommendedAction).where(RecommendedAction.user_id == user_id)
    ).all()
    deleted_count = len(actions)
    for action in actions:
        session.delete(action)
    session.commit()
    logger.info(f"Deleted {deleted_count} recommended action(s) for user {user_id}")
    return deleted_count


def generate_actions(
    session: Session,
    gateway: CompletionGateway,
    profile: User,
    insight_text: str,
    week_start: date,
) -> List[RecommendedAction]:
    """
    Generate 2-3 practice actions for a week from an insight text.

    Returns the existing actions untouched if the week already has some.

    Raises:
        ExternalServiceError: If the model fails or returns no usable action
    """
    existing = list_week_actions(session, profile.id, week_start)
    if existing:
        logger.info(f"Actions already exist for user {profile.id}, week {week_start}")
        return existing

    messages = [
        {"role": "system", "content": RECOMMENDATION_SYSTEM_PROMPT},
        {"role": "user", "content": generate_recommendation_prompt(profile.cefr_level, insight_text)},
    ]
    parsed = gateway.complete_json(messages, max_tokens=1000)

    raw_actions = parsed.get("actions") or []
    if not isinstance(raw_actions, list):
        raise ExternalServiceError("Invalid response format from model", details="'actions' is not a list")

    actions = []
    for item in raw_actions:
        if not isinstance(item, dict) or not item.get("category") or not item.get("action"):
            logger.warning(f"Filtering out invalid action: {item}")
            continue
        actions.append(RecommendedAction(
            user_id=profile.id,
            week_start=week_start,
            category=str(item["category"]),
            action_text=truncate(str(item["action"]), MAX_ACTION_LENGTH),
        ))
        if len(actions) == MAX_ACTIONS:
            break

    if not actions:
        raise ExternalServiceError("Model failed to generate valid actions. Please try again.")

    session.add_all(actions)
    session.commit()
    logger.info(f"Generated {len(actions)} action(s) for user {profile.id}, week {week_start}")
    return list_week_actions(session, profile.id, week_start)
