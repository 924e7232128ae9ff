"""Intent planner: turn a free-form voice command into one proposed action.

Every command module gets a chance to parse the canonicalized text; the
best parse per intent is kept and the winner becomes the Plan. Nothing is
executed here: the router hands the Plan to the policy gate, and the
caller acts on the decision.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime

from painlog.commands import ALL_COMMANDS, delete, noise
from painlog.commands.policy import ANALYTICS, MUTATION, NAVIGATION, action_category, is_destructive
from painlog.commands.slots import as_lexicon
from painlog.thresholds import THRESHOLDS

NAVIGATE = "navigate"
QUERY = "query"
SLOT_FILLING = "slot_filling"
NOT_SUPPORTED = "not_supported"

_KINDS = {NAVIGATION: NAVIGATE, ANALYTICS: QUERY, MUTATION: "mutation"}

_FILLERS = {"bitte", "mal", "kurz", "äh", "ähm", "aeh", "hm", "hmm", "halt", "naja"}

_POLITE_RE = re.compile(
    r"^(?:(?:kannst|könntest|würdest)\s+du\s+(?:mir\s+)?|ich\s+(?:möchte|will|hätte\s+gerne?)\s+)"
)

SLOT_QUESTIONS = {
    "time": "Wann soll ich dich erinnern?",
    "title": "Woran soll ich dich erinnern?",
    "medication": "Welches Medikament meinst du?",
    "rating": "Wie gut hat es gewirkt, von 0 bis 10?",
    "pain": "Wie stark sind die Schmerzen, von 0 bis 10?",
    "text": "Was soll ich notieren?",
    "name": "Wie heißt das Medikament?",
}

SUGGESTIONS = [
    "Schmerzstärke 6, Ibuprofen genommen",
    "öffne Tagebuch",
    "wann zuletzt Triptan genommen",
    "erinnere mich um 20 Uhr an Prophylaxe",
    "Notiz: schlecht geschlafen",
]

_NOT_UNDERSTOOD = "Das habe ich nicht verstanden. Versuch es nochmal."

# Destructive and editing intents risk losing data; everything else is undoable
_RISK = {"delete_entry": "high", "delete_voice_note": "high",
         "edit_entry": "medium", "add_medication": "medium"}


@dataclass
class Plan:
    kind: str                  # navigate, query, mutation, slot_filling, not_supported
    intent: str | None = None
    confidence: float = 0.0
    gap: float | None = None   # lead over the runner-up intent
    args: dict = field(default_factory=dict)
    missing: list = field(default_factory=list)
    ambiguous: bool = False
    candidates: list = field(default_factory=list)   # [(intent, score), ...] best first
    question: str | None = None
    risk: str = "low"
    summary: str = ""
    suggestions: list = field(default_factory=list)


def canonicalize(text):
    """Lowercase, drop edge punctuation, politeness openers and filler words."""
    t = (text or "").lower().strip()
    t = re.sub(r"[.,!?;:\"„“”»«]+(?=\s|$)", "", t)
    t = re.sub(r"^[\"„“”»«]+", "", t)
    t = _POLITE_RE.sub("", t)
    words = [w for w in t.split() if w not in _FILLERS]
    return " ".join(words)


def _not_supported():
    return Plan(kind=NOT_SUPPORTED, question=_NOT_UNDERSTOOD,
                suggestions=list(SUGGESTIONS))


def _best_parses(text, lexicon, now):
    best = {}
    for mod in ALL_COMMANDS:
        p = mod.parse(text, lexicon, now)
        if p is None:
            continue
        p.module = mod
        if p.command not in best or p.score > best[p.command].score:
            best[p.command] = p
    return sorted(best.values(), key=lambda p: -p.score)


def plan(text, lexicon=None, now=None, thresholds=THRESHOLDS):
    """Plan one voice command. Always returns a Plan."""
    now = now or datetime.now()
    lexicon = as_lexicon(lexicon)
    canonical = canonicalize(text)

    guard = noise.check(canonical)
    if guard.is_noise:
        return _not_supported()
    if guard.ambiguous_number is not None:
        return Plan(
            kind="mutation",
            intent="quick_pain_entry",
            confidence=0.5,
            args={"pain": guard.ambiguous_number},
            ambiguous=True,
            question=guard.question,
            summary=f"Schmerzstärke {guard.ambiguous_number}",
        )

    parses = _best_parses(canonical, lexicon, now)
    if not parses:
        return _not_supported()

    best = parses[0]
    if is_destructive(best.command) and not delete.has_delete_operator(canonical):
        return _not_supported()

    gap = round(best.score - parses[1].score, 4) if len(parses) > 1 else None
    category = action_category(best.command)
    kind = SLOT_FILLING if best.missing else _KINDS.get(category, NOT_SUPPORTED)

    # Same order as the policy gate: a close call outranks missing slots
    close = gap is not None and gap < thresholds.disambiguation_gap
    either = f"Meinst du {best.module.summarize(best)} oder {parses[1].module.summarize(parses[1])}?" \
        if close else None
    if close and best.score < thresholds.mutation_auto:
        question = either
    elif best.missing:
        question = SLOT_QUESTIONS.get(best.missing[0])
    else:
        question = either

    return Plan(
        kind=kind,
        intent=best.command,
        confidence=best.score,
        gap=gap,
        args=dict(best.args),
        missing=list(best.missing),
        candidates=[(p.command, p.score) for p in parses[:3]],
        question=question,
        risk=_RISK.get(best.command, "low"),
        summary=best.module.summarize(best),
    )
