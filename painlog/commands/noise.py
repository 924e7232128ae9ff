"""Noise guard: reject fillers and fragments before any skill sees them.

A lone number 0-10 is not noise but is ambiguous: it probably is a pain
level, so the planner asks instead of guessing.
"""

import re
from dataclasses import dataclass

from painlog.entry.normalize import fold

STOPWORDS = {
    # fillers
    "äh", "ah", "aeh", "ähm", "aehm", "öhm", "uhm", "hm", "hmm", "äää",
    # confirmations without context
    "ok", "okay", "ja", "jo", "jap", "jep", "jup", "nein", "ne", "nö", "noe",
    # greetings
    "hallo", "hi", "hey", "tschüss", "tschuess", "bye",
    # fragments
    "also", "und", "oder", "aber", "dann", "so", "eben", "halt",
}

# Words that mean nothing on their own
AMBIGUOUS_ALONE = {"test", "bitte", "danke", "moment", "warte", "stop", "stopp"}

_FOLDED_STOPWORDS = {fold(w) for w in STOPWORDS}


@dataclass
class NoiseCheck:
    is_noise: bool = False
    ambiguous_number: int | None = None
    reason: str = ""
    question: str | None = None


def _is_stopword(word):
    return word in STOPWORDS or fold(word) in _FOLDED_STOPWORDS


def check(text):
    """Classify an utterance as noise, an ambiguous bare number, or neither."""
    t = (text or "").strip().lower()
    t = re.sub(r"[.,!?;:]+$", "", t)

    if len(t) < 2:
        if t.isdigit():
            return NoiseCheck(ambiguous_number=int(t), reason="number without context",
                              question=f"Meinst du Schmerzstärke {t}?")
        return NoiseCheck(is_noise=True, reason="input too short")

    words = t.split()
    if len(words) == 1 and words[0] in AMBIGUOUS_ALONE:
        return NoiseCheck(is_noise=True, reason="ambiguous single word")

    m = re.fullmatch(r"\d{1,2}", t)
    if m and int(t) <= 10:
        return NoiseCheck(ambiguous_number=int(t), reason="number without context",
                          question=f"Meinst du Schmerzstärke {int(t)}?")

    if all(_is_stopword(w) for w in words):
        return NoiseCheck(is_noise=True, reason="only filler words")
    return NoiseCheck()
