"""Entry classifier: is this a new pain/medication event or a context note?

A detected medication or pain value always makes a new entry, whatever
context vocabulary comes with it ("Stärke 6 wegen Stress" is still an
event). Without either, vocabulary decides, and anything unclear becomes
a context note so that nothing is logged as an event by accident.
"""

import re

NEW_ENTRY = "new_entry"
CONTEXT_ENTRY = "context_entry"

_NEW_ENTRY_PATTERNS = [
    re.compile(r"\b(?:kopfschmerz|kopfweh|migr(?:ä|ae)ne|schmerz|attacke|anfall)"),
    re.compile(r"\b(?:genommen|eingenommen|nehme|tablette)"),
    re.compile(r"\b(?:schmerzst(?:ä|ae)rke|schmerzlautst(?:ä|ae)rke|st(?:ä|ae)rke\s*\d|level\s*\d)"),
    re.compile(r"\b\d+\s*(?:von\s*(?:10|zehn)|/10)\b"),
    re.compile(r"\b(?:\w*triptan|ibuprofen|paracetamol|naproxen|aspirin|ass|schmerzmittel)\b"),
    re.compile(r"\bvor\s+\d+\s*(?:minute|stunde)"),
]

_CONTEXT_PATTERNS = [
    re.compile(r"\b(?:trigger|auslöser|ausloeser|ausloser)\b"),
    re.compile(r"\b(?:notiz|kontext|bemerkung|anmerkung)\b"),
    re.compile(r"\b(?:schlecht\s+geschlafen|wenig\s+geschlafen|zu\s+wenig\s+schlaf)"),
    re.compile(r"\b(?:stress|stressig|gestresst)\b"),
    re.compile(r"\b(?:wetter|wetterumschwung|föhn|foehn|gewitter)"),
    re.compile(r"\b(?:periode|menstruation|regel|zyklus)"),
    re.compile(r"\b(?:essen|gegessen|getrunken|kaffee|alkohol|wein|bier)"),
    re.compile(r"\b(?:sport|training|joggen|fitness)"),
    re.compile(r"\b(?:reise|gereist|unterwegs|flug)"),
    re.compile(r"\b(?:müde|muede|erschöpft|erschoepft)"),
    re.compile(r"\b(?:viel\s+gearbeitet|lange\s+gearbeitet|überstunden)"),
]

# Weights of the new-entry evidence
_W_MEDICATION = 0.35
_W_PAIN = 0.30
_W_EXPLICIT_TIME = 0.15
_W_VOCABULARY = 0.20


def has_new_entry_vocabulary(text):
    return any(p.search(text) for p in _NEW_ENTRY_PATTERNS)


def has_context_vocabulary(text):
    return any(p.search(text) for p in _CONTEXT_PATTERNS)


def classify_entry(text, pain, medications, time):
    """Decide the entry type.

    Args:
        text: Lowercased, number-converted utterance.
        pain: ParsedPainIntensity.
        medications: Sequence of ParsedMedication.
        time: ParsedTime.

    Returns:
        (entry_type, confidence, can_toggle)
    """
    if not text.strip():
        return CONTEXT_ENTRY, 0.0, False

    has_meds = len(medications) > 0
    has_pain = pain.value is not None
    new_vocab = has_new_entry_vocabulary(text)
    context_vocab = has_context_vocabulary(text)

    if has_meds or has_pain:
        score = 0.0
        if has_meds:
            score += _W_MEDICATION
        if has_pain:
            score += _W_PAIN
        if not time.is_now and time.kind != "none":
            score += _W_EXPLICIT_TIME
        if new_vocab:
            score += _W_VOCABULARY
        confidence = round(min(0.95, 0.5 + score / 2), 4)
        return NEW_ENTRY, confidence, context_vocab or confidence < 0.75

    if new_vocab and not context_vocab:
        return NEW_ENTRY, 0.6, True
    if new_vocab and context_vocab:
        # Both weakly present: stay on the safe side, let the user flip it
        return CONTEXT_ENTRY, 0.55, True
    if context_vocab:
        return CONTEXT_ENTRY, 0.85, False
    return CONTEXT_ENTRY, 0.5, False
