"""Notes cleaner: what is left of a new entry once its data is taken out.

Every extractor reports the token indices it consumed. The note is built
from the tokens nobody claimed, minus dose vocabulary next to a medication
and symptom words that the pain value already records. What remains is
dropped altogether when it is too short to mean anything.
"""

import re

from painlog.entry.normalize import DOSE_MASK, DOSE_UNITS, fold_word, is_number
from painlog.entry.pain import is_pain_trigger

_SYMPTOM_NOUN_RE = re.compile(r"^(?:migraene\w*|kopfschmerz\w*|kopfweh|attacke\w*|anfall\w*)$")

_DOSE_WORDS = {
    "halbe", "halb", "halben", "viertel", "dreiviertel", "ganze", "tablette",
    "tabletten", "genommen", "eingenommen", "nehme", "mg", "milligramm",
    "eine", "ein", "zwei", "anderthalb", "eineinhalb", "stueck", "kapsel",
    "kapseln", "pille", "pillen",
}

_LEADING_FILLERS = {"ich", "habe", "hab", "also", "nur", "dann", "und"}
_TRAILING_CONNECTIVES = {"und", "oder", "mit", "wegen", "bei", "seit", "von", "auf", "um", "ab"}

_EDGE_RE = re.compile(r"^[\s,.\-:;]+|[\s,.\-:;]+$")

# Words that make even a one- or two-word remainder worth keeping
_MEANINGFUL_RE = re.compile(
    r"uebel|erbrech|licht|laerm|geraeusch|geruch|aura|schwindel|sehstoer"
    r"|links|rechts|seitig|nacken|stirn|schlaefe|auge"
    r"|stress|wetter|schlaf|periode|zyklus|kaffee|alkohol|sport|arbeit|reise"
)

_MIN_LENGTH = 3
_SHORT_WORD = 4


def _removed_indices(tokens, time, pain, medications):
    removed = set(time.span) | set(pain.span)
    for med in medications:
        removed |= set(med.span)

    for i, token in enumerate(tokens):
        folded = fold_word(token.word)
        if is_pain_trigger(token.word) or _SYMPTOM_NOUN_RE.match(folded):
            removed.add(i)
        elif token.masked == DOSE_MASK:
            removed.add(i)
            if i + 1 < len(tokens) and tokens[i + 1].word in DOSE_UNITS:
                removed.add(i + 1)

    # Dose vocabulary and bare amounts around each medication
    for med in medications:
        if not med.span:
            continue
        lo, hi = min(med.span), max(med.span)
        for i in range(max(0, lo - 4), min(len(tokens), hi + 5)):
            folded = fold_word(tokens[i].word)
            if folded in _DOSE_WORDS or is_number(tokens[i].value):
                removed.add(i)
    return removed


def _trim(words):
    changed = True
    while words and changed:
        changed = False
        if fold_word(words[0]) in _LEADING_FILLERS:
            words = words[1:]
            changed = True
        elif words and fold_word(words[-1]) in _TRAILING_CONNECTIVES:
            words = words[:-1]
            changed = True
    return words


def _meaningful(note):
    if len(note) < _MIN_LENGTH:
        return False
    if not re.search(r"[^\W\d_]", note):
        return False
    words = note.split()
    if len(words) <= 2:
        folded = [fold_word(w) for w in words]
        if _MEANINGFUL_RE.search(" ".join(folded)):
            return True
        if all(len(w) < _SHORT_WORD or w in _LEADING_FILLERS | _TRAILING_CONNECTIVES
               for w in folded):
            return False
    return True


def clean_note(tokens, time, pain, medications):
    """Build the free-text note of a new entry. Returns "" when nothing is left."""
    removed = _removed_indices(tokens, time, pain, medications)
    words = [t.raw for i, t in enumerate(tokens) if i not in removed]
    words = _trim(words)
    note = _EDGE_RE.sub("", " ".join(words))
    # Trimming can expose a filler that sat behind punctuation
    note = _EDGE_RE.sub("", " ".join(_trim(note.split())))
    return note if _meaningful(note) else ""
