"""Rate command: record how well a medication worked.

Handles:
    "bewerte ibuprofen mit 7"
    "sumatriptan hat gut geholfen"
    "wirkung von triptan war sehr gut"
    "naproxen hat gar nicht gewirkt"
    "wirkung bewerten"                    medication and rating missing
"""

import re

from painlog.commands.parse import Parse
from painlog.commands.slots import find_medication
from painlog.entry.normalize import TokenView, tokenize

_RATE_OPERATOR_RE = re.compile(r"\b(?:bewerte|bewerten|bewertung|bewerts)\b")
_EFFECT_RE = re.compile(r"\b(?:wirkung|gewirkt|wirkt|geholfen|hilft|half|wirksam)\b")

RATING_EXPRESSIONS = {
    "gar nicht": 0, "überhaupt nicht": 0, "keine wirkung": 0, "nichts": 0,
    "wirkungslos": 0, "sehr schlecht": 0, "katastrophal": 0,
    "schlecht": 1, "kaum": 1, "minimal": 1,
    "wenig": 2, "schwach": 2,
    "etwas": 3, "ein bisschen": 3,
    "mäßig": 4, "mittelmäßig": 4,
    "mittel": 5, "durchschnittlich": 5, "okay": 5, "ok": 5,
    "ganz gut": 6, "ordentlich": 6,
    "gut": 7, "wirksam": 7,
    "sehr gut": 8, "stark": 8,
    "super": 9, "toll": 9, "prima": 9,
    "hervorragend": 10, "perfekt": 10, "bestens": 10, "ausgezeichnet": 10,
    "sehr wirksam": 10,
}

# Longest phrase first: "sehr gut" before "gut", "gar nicht" before "nicht"
_EXPRESSIONS = sorted(RATING_EXPRESSIONS.items(), key=lambda kv: -len(kv[0]))

_NUMBER_RES = [
    re.compile(r"\b(\d{1,2})\s*(?:von|aus|auf)\s*10\b"),
    re.compile(r"\b(?:mit|auf|bewertung|wirkung|note)\s*:?\s*(\d{1,2})\b"),
]


def extract_rating(text):
    """A 0-10 effect rating from a number or a rating word, or None."""
    t = TokenView.plain(tokenize(text)).text
    for regex in _NUMBER_RES:
        m = regex.search(t)
        if m and int(m.group(1)) <= 10:
            return int(m.group(1))
    for phrase, value in _EXPRESSIONS:
        if re.search(r"\b" + re.escape(phrase) + r"\b", t):
            return value
    return None


def parse(text, lexicon=None, now=None):
    t = text.lower().strip()
    has_operator = bool(_RATE_OPERATOR_RE.search(t))
    if not has_operator and not _EFFECT_RE.search(t):
        return None

    medication = find_medication(t, lexicon)
    rating = extract_rating(t)
    # Without "bewerten", an effect word alone ("zeige wirkung") is navigation
    if not has_operator and (medication is None or rating is None):
        return None

    missing = [slot for slot, value in (("medication", medication), ("rating", rating))
               if value is None]
    return Parse(
        command="rate_intake",
        score=0.85 if missing else 0.9,
        args={"medication": medication, "rating": rating},
        missing=missing,
    )


def summarize(p):
    rating = p.args.get("rating")
    rating = "?" if rating is None else f"{rating}/10"
    return f"Wirkung bewerten: {p.args.get('medication') or '?'} ({rating})"
