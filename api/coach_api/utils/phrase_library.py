"""
Fixed phrase library, organized by CEFR level (A1-C2).
Practical, everyday conversation phrases.
"""
import random
from dataclasses import dataclass
from typing import List, Optional

from coach_api.models.enums import next_cefr_level


@dataclass(frozen=True)
class PhraseItem:
    phrase: str
    cefr: str
    category: str


PHRASE_LIBRARY: List[PhraseItem] = [
    # A1 - Beginner
    PhraseItem("Hello, how are you?", "A1", "greeting"),
    PhraseItem("Nice to meet you", "A1", "greeting"),
    PhraseItem("What's your name?", "A1", "introduction"),
    PhraseItem("Where are you from?", "A1", "introduction"),
    PhraseItem("Thank you very much", "A1", "courtesy"),
    PhraseItem("Excuse me", "A1", "courtesy"),
    PhraseItem("Can you help me?", "A1", "request"),
    PhraseItem("I don't understand", "A1", "learning"),
    PhraseItem("How much is this?", "A1", "shopping"),
    PhraseItem("Where is the bathroom?", "A1", "navigation"),

    # A2 - Elementary
    PhraseItem("I'd like to...", "A2", "request"),
    PhraseItem("Could you repeat that?", "A2", "learning"),
    PhraseItem("What time is it?", "A2", "daily"),
    PhraseItem("I'm looking for...", "A2", "shopping"),
    PhraseItem("How do I get to...?", "A2", "navigation"),
    PhraseItem("Can I have the bill, please?", "A2", "restaurant"),
    PhraseItem("What do you recommend?", "A2", "restaurant"),
    PhraseItem("I need some help with...", "A2", "request"),
    PhraseItem("That sounds good", "A2", "agreement"),
    PhraseItem("I'm not sure about that", "A2", "uncertainty"),

    # B1 - Intermediate
    PhraseItem("I was wondering if...", "B1", "request"),
    PhraseItem("Would you mind if I...?", "B1", "courtesy"),
    PhraseItem("I'm afraid I can't...", "B1", "refusal"),
    PhraseItem("That's a good point", "B1", "discussion"),
    PhraseItem("What I mean is...", "B1", "clarification"),
    PhraseItem("As far as I know...", "B1", "opinion"),
    PhraseItem("It depends on...", "B1", "consideration"),
    PhraseItem("I'd rather...", "B1", "preference"),
    PhraseItem("Let me think about it", "B1", "decision"),
    PhraseItem("Could you give me some advice?", "B1", "request"),

    # B2 - Upper Intermediate
    PhraseItem("From my perspective...", "B2", "opinion"),
    PhraseItem("I couldn't agree more", "B2", "agreement"),
    PhraseItem("On the other hand...", "B2", "contrast"),
    PhraseItem("It's worth considering that...", "B2", "discussion"),
    PhraseItem("What concerns me is...", "B2", "concern"),
    PhraseItem("I tend to think that...", "B2", "opinion"),
    PhraseItem("That's beside the point", "B2", "discussion"),
    PhraseItem("To be honest with you...", "B2", "honesty"),
    PhraseItem("I'm inclined to believe...", "B2", "opinion"),
    PhraseItem("There's no denying that...", "B2", "agreement"),

    # C1 - Advanced
    PhraseItem("It goes without saying that...", "C1", "emphasis"),
    PhraseItem("That's not necessarily the case", "C1", "disagreement"),
    PhraseItem("I beg to differ", "C1", "disagreement"),
    PhraseItem("All things considered...", "C1", "conclusion"),
    PhraseItem("By and large...", "C1", "generalization"),
    PhraseItem("In light of recent events...", "C1", "context"),
    PhraseItem("That's a fair assessment", "C1", "agreement"),
    PhraseItem("I'd be remiss if I didn't mention...", "C1", "addition"),
    PhraseItem("That's a contentious issue", "C1", "discussion"),
    PhraseItem("For what it's worth...", "C1", "opinion"),

    # C2 - Proficient
    PhraseItem("That's a nuanced perspective", "C2", "discussion"),
    PhraseItem("I'm rather skeptical about...", "C2", "doubt"),
    PhraseItem("That epitomizes the problem", "C2", "analysis"),
    PhraseItem("It's somewhat paradoxical that...", "C2", "complexity"),
    PhraseItem("That's inherently problematic", "C2", "criticism"),
    PhraseItem("To put it succinctly...", "C2", "summary"),
    PhraseItem("That's a gross oversimplification", "C2", "disagreement"),
    PhraseItem("I'm ambivalent about that", "C2", "uncertainty"),
    PhraseItem("That's tantamount to saying...", "C2", "comparison"),
    PhraseItem("I'm predisposed to think...", "C2", "tendency"),
]


def mixed_phrases(cefr: str, count: int = 3, rng: Optional[random.Random] = None) -> List[PhraseItem]:
    """Random phrases from the given level and the one above it."""
    rng = rng or random.Random()
    levels = {cefr, next_cefr_level(cefr)}
    pool = [p for p in PHRASE_LIBRARY if p.cefr in levels]
    if not pool:
        # Unknown level: draw from the intermediate band
        pool = [p for p in PHRASE_LIBRARY if p.cefr in ("B1", "B2")]
    return rng.sample(pool, min(count, len(pool)))
