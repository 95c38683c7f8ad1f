"""
Text utility functions.
"""
import re


def normalize_phrase(phrase: str) -> str:
    """
    Normalize a target phrase by trimming it and collapsing inner whitespace.
    Punctuation is preserved: library phrases such as "I'd like to..." keep their dots.

    Args:
        phrase: The phrase to normalize

    Returns:
        Normalized phrase
    """
    if not phrase:
        return phrase
    return re.sub(r"\s+", " ", phrase.strip())


def strip_code_fences(text: str) -> str:
    """
    Remove a surrounding markdown code block (``` or ```json) from LLM output.

    Args:
        text: Raw model output

    Returns:
        The text inside the fences, or the stripped input when there are none
    """
    text = text.strip()
    if text.startswith('```'):
        lines = text.split('\n')
        text = '\n'.join(lines[1:])
        if text.rstrip().endswith('```'):
            text = text.rstrip()[:-3]
    return text.strip()


def contains_ignore_case(haystack: str, needle: str) -> bool:
    """Case-insensitive substring test; an empty needle never matches."""
    if not needle or not haystack:
        return False
    return needle.lower() in haystack.lower()


def truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit]
