"""
Micro-pack planner: picks three phrases plus a grammar and pronunciation
point for the learner's next session, based on their history.
"""
import logging
import random
from typing import Dict, List, Optional, Sequence

from sqlmodel import Session

from coach_api.models import ErrorRecord, Target
from coach_api.models.enums import next_cefr_level
from coach_api.schemas.planner import MicroPack, PlannedTarget
from coach_api.services.error_service import list_recurring_errors
from coach_api.services.target_service import get_incomplete_targets
from coach_api.utils.phrase_library import PHRASE_LIBRARY, mixed_phrases

logger = logging.getLogger(__name__)

PACK_SIZE = 3

ERROR_CATEGORIES: Dict[str, List[str]] = {
    "grammar": ["request", "courtesy", "discussion", "clarification"],
    "vocab": ["opinion", "discussion", "consideration", "analysis"],
    "pron": ["greeting", "introduction", "daily", "restaurant"],
}

TENSE_GRAMMAR: Dict[str, str] = {
    "A1": "Present simple tense",
    "A2": "Past simple tense",
    "B1": "Present perfect tense",
    "B2": "Past perfect tense",
    "C1": "Mixed tenses in context",
    "C2": "Advanced tense usage",
}

GRAMMAR_POINTS: Dict[str, List[str]] = {
    "A1": ["Present simple", "Basic questions", "Personal pronouns"],
    "A2": ["Past simple", 'Future with "going to"', "Comparative adjectives"],
    "B1": ["Present perfect", "Conditional sentences", "Modal verbs"],
    "B2": ["Past perfect", "Passive voice", "Reported speech"],
    "C1": ["Mixed conditionals", "Inversion", "Cleft sentences"],
    "C2": ["Subjunctive mood", "Advanced modals", "Complex relative clauses"],
}

PRON_POINTS: Dict[str, List[str]] = {
    "A1": ["th sounds", "Basic vowels", "Word stress"],
    "A2": ["r vs l", "Long vs short vowels", "Sentence stress"],
    "B1": ["Linking sounds", "Weak forms", "Intonation patterns"],
    "B2": ["Consonant clusters", "Schwa sound", "Rhythm and timing"],
    "C1": ["Advanced intonation", "Accent reduction", "Natural speech flow"],
    "C2": ["Native-like rhythm", "Subtle sound distinctions", "Register variation"],
}


def select_phrase_for_error(error: ErrorRecord, cefr: str, rng: random.Random) -> Optional[PlannedTarget]:
    """A library phrase from a category that exercises the given error type."""
    categories = ERROR_CATEGORIES.get(error.type, ["discussion"])
    levels = {cefr, next_cefr_level(cefr)}
    candidates = [p for p in PHRASE_LIBRARY if p.category in categories and p.cefr in levels]
    if not candidates:
        return None
    chosen = rng.choice(candidates)
    return PlannedTarget(phrase=chosen.phrase, cefr=chosen.cefr)


def grammar_point(errors: Sequence[ErrorRecord], cefr: str, rng: random.Random) -> str:
    grammar_errors = [e for e in errors if e.type == "grammar" and e.correction]
    if grammar_errors:
        correction = grammar_errors[0].correction.lower()
        if "tense" in correction:
            return TENSE_GRAMMAR.get(cefr, TENSE_GRAMMAR["B1"])
        if "modal" in correction:
            return "Modal verbs (can, should, must)"
        if "article" in correction:
            return "Article usage (a, an, the)"
        if "preposition" in correction:
            return "Preposition patterns"
    return rng.choice(GRAMMAR_POINTS.get(cefr, GRAMMAR_POINTS["B1"]))


def pronunciation_point(cefr: str, rng: random.Random) -> str:
    return rng.choice(PRON_POINTS.get(cefr, PRON_POINTS["B1"]))


def build_micro_pack(
    cefr: str,
    recurring_errors: Sequence[ErrorRecord],
    incomplete_targets: Sequence[Target],
    rng: Optional[random.Random] = None,
) -> MicroPack:
    """
    Assemble a micro-pack of exactly three distinct phrases.

    Slot order: one retry of the oldest incomplete target, one phrase aimed
    at the most frequent recurring error, then new library phrases at the
    learner's level and the next one up.

    Args:
        cefr: Current CEFR level
        recurring_errors: Errors seen at least twice, most frequent first
        incomplete_targets: Planned/attempted targets, oldest first
        rng: Random source (tests pass a seeded one)

    Returns:
        MicroPack
    """
    rng = rng or random.Random()
    selected: List[PlannedTarget] = []
    taken = set()

    def _take(item: PlannedTarget) -> None:
        if item.phrase not in taken and len(selected) < PACK_SIZE:
            selected.append(item)
            taken.add(item.phrase)

    if incomplete_targets:
        retry = incomplete_targets[0]
        _take(PlannedTarget(phrase=retry.phrase, cefr=retry.cefr or cefr))

    if recurring_errors:
        error_phrase = select_phrase_for_error(recurring_errors[0], cefr, rng)
        if error_phrase:
            _take(error_phrase)

    known = taken | {t.phrase for t in incomplete_targets}
    for item in mixed_phrases(cefr, len(PHRASE_LIBRARY), rng):
        if len(selected) == PACK_SIZE:
            break
        if item.phrase not in known:
            _take(PlannedTarget(phrase=item.phrase, cefr=item.cefr))

    # Level pool exhausted: fall back to the whole library
    if len(selected) < PACK_SIZE:
        for item in rng.sample(PHRASE_LIBRARY, len(PHRASE_LIBRARY)):
            if len(selected) == PACK_SIZE:
                break
            if item.phrase not in known:
                _take(PlannedTarget(phrase=item.phrase, cefr=item.cefr))

    return MicroPack(
        targets=selected,
        grammar=grammar_point(recurring_errors, cefr, rng),
        pron=pronunciation_point(cefr, rng),
    )


def plan_micro_pack(session: Session, user_id: int, cefr: str, rng: Optional[random.Random] = None) -> MicroPack:
    """Load the learner's history and build their next micro-pack."""
    recurring_errors = list_recurring_errors(session, user_id)
    incomplete_targets = get_incomplete_targets(session, user_id)
    logger.info(
        f"Planning micro-pack for user {user_id} ({cefr}): "
        f"{len(recurring_errors)} recurring errors, {len(incomplete_targets)} incomplete targets"
    )
    return build_micro_pack(cefr, recurring_errors, incomplete_targets, rng)
