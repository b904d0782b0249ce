"""
Input quality heuristics — decide whether free text is meaningful or
keyboard noise. Pure functions, no question context.
"""

import re
from typing import Optional

GIBBERISH_MESSAGE = "Please provide a meaningful response. Your input appears to be random characters."

_VOWELS = re.compile(r"[aeiou]")
_REPEATED_UNIT = re.compile(r"(.{2,})\1{2,}")
_KEYBOARD_ROW = re.compile(r"[asdfghjkl]+|[qwertyuiop]+|[zxcvbnm]+", re.IGNORECASE)
_SINGLE_CHAR_RUN = re.compile(r"(.)\1+", re.DOTALL)
_CONSONANT_CLUSTER = re.compile(r"[bcdfghjklmnpqrstvwxyz]{4,}", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s")

MIN_LENGTH = 3
SHORT_TEXT_LENGTH = 10
SHORT_TEXT_MIN_VOWEL_RATIO = 0.10
LONG_TEXT_MIN_VOWEL_RATIO = 0.08
CLUSTER_WORD_LENGTH = 4


def vowel_ratio(text: str) -> float:
    """Share of a/e/i/o/u (any case) in the trimmed text."""
    trimmed = text.strip()
    if not trimmed:
        return 0.0
    return len(_VOWELS.findall(trimmed.lower())) / len(trimmed)


def is_gibberish_input(text: str) -> bool:
    """True if the text looks like random characters rather than a real answer."""
    if not text or len(text.strip()) < MIN_LENGTH:
        return True

    trimmed = text.strip()
    ratio = vowel_ratio(trimmed)

    if len(trimmed) < SHORT_TEXT_LENGTH and ratio < SHORT_TEXT_MIN_VOWEL_RATIO:
        return True
    # Longer text gets a little slack for acronyms
    if len(trimmed) >= SHORT_TEXT_LENGTH and ratio < LONG_TEXT_MIN_VOWEL_RATIO:
        return True

    # "hahaha", "abcabcabc"
    if _REPEATED_UNIT.search(trimmed.lower()):
        return True

    compact = _WHITESPACE.sub("", trimmed)
    if _KEYBOARD_ROW.fullmatch(compact):
        return True
    if _SINGLE_CHAR_RUN.fullmatch(compact):
        return True

    words = trimmed.split()
    longer_words = [w for w in words if len(w) >= CLUSTER_WORD_LENGTH]
    if longer_words:
        clustered = [w for w in longer_words if _CONSONANT_CLUSTER.search(w)]
        if len(clustered) / len(longer_words) > 0.5:
            return True

    return False


def validate_meaningful_input(text: str) -> Optional[str]:
    """Error message if the text is gibberish, else None."""
    if is_gibberish_input(text):
        return GIBBERISH_MESSAGE
    return None
