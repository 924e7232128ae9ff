"""Pain intensity extractor.

Handles:
    "Schmerzstärke 5", "Schmerzlautstärke acht" (STT variants), "8 von 10",
    "7/10", "Stärke 3", "Kopfschmerzen bei 5", "Migräne auf 8",
    "starke Kopfschmerzen", "leichte Migräne", "keine Kopfschmerzen"

The extractor works on masked tokens, so "800 mg" and "14:30" never look
like pain values. Numbers next to a time or dose word ("vor 10 Minuten",
"2 Tabletten") are skipped as well.
"""

import re

from rapidfuzz.distance import Levenshtein

from painlog.entry.normalize import TokenView, fold_word, tokenize
from painlog.entry.types import ParsedPainIntensity
from painlog.thresholds import THRESHOLDS

# Folded spellings accepted as a pain-scale keyword.
_TRIGGERS = {
    "schmerzstaerke", "schmerzlevel", "schmerzwert", "schmerzintensitaet",
    "schmerzskala", "schmerzlautstaerke", "schmerzlaut", "schmerzlautsaerke",
    "schmerzstaerker", "schmerzstarke", "staerke", "level", "intensitaet",
    "intensitat", "skala", "kopfschmerzstaerke", "migraenestaerke",
    "migraenelevel",
}

# Stems that a misrecognized long token may be up to 2 edits away from.
_TRIGGER_STEMS = [
    "schmerzstaerke", "schmerzlevel", "schmerzintensitaet", "schmerzskala",
    "migraenestaerke", "kopfschmerzstaerke", "intensitaet",
]

# Compound endings that mark a scale keyword whatever the first half
# was heard as ("Schnellstärke").
_TRIGGER_TAILS = ("staerke", "intensitaet")

_PAIN_CONTEXT_RE = re.compile(r"schmerz|kopfweh|migr(?:ä|ae)ne|attacke|anfall")

# Words that make a neighboring number a time or a dose, not a pain value
_TIME_DOSE_BEFORE = {"vor", "seit", "um", "gegen", "halb", "viertel", "nach", "ab"}
_TIME_DOSE_AFTER = {
    "minuten", "minute", "min", "stunden", "stunde", "std", "h", "tage",
    "tagen", "tag", "uhr", "mg", "milligramm", "ml", "g", "tablette",
    "tabletten", "stück", "stueck", "kapsel", "kapseln", "tropfen", "mal",
    "pillen", "pille", "hub", "hübe",
}

_SMALL_NUMBER_RE = re.compile(r"^(?:10|\d)$")


def is_pain_trigger(word):
    """True if a token looks like a pain-scale keyword, tolerating STT errors."""
    f = fold_word(word)
    if not f:
        return False
    if "schmerz" in f:
        return True
    if f in _TRIGGERS:
        return True
    if len(f) > 7 and f.endswith(_TRIGGER_TAILS):
        return True
    if len(f) >= 8:
        return any(Levenshtein.distance(f, stem, score_cutoff=2) <= 2
                   for stem in _TRIGGER_STEMS)
    return False


def has_pain_context(tokens):
    return any(_PAIN_CONTEXT_RE.search(t.word) for t in tokens)


def _is_time_or_dose_number(tokens, i):
    before = tokens[i - 1].word if i > 0 else ""
    after = tokens[i + 1].word if i + 1 < len(tokens) else ""
    return before in _TIME_DOSE_BEFORE or after in _TIME_DOSE_AFTER


def _pain_number(tokens, i):
    """The 0-10 value at token i, or None if it isn't a usable pain number."""
    value = tokens[i].masked
    if not _SMALL_NUMBER_RE.match(value):
        return None
    if _is_time_or_dose_number(tokens, i):
        return None
    return int(value)


def _result(value, confidence, evidence, span, review=False, descriptor=False):
    return ParsedPainIntensity(
        value=value,
        confidence=confidence,
        evidence=evidence,
        needs_review=review,
        estimated_from_descriptor=descriptor,
        span=tuple(sorted(span)),
    )


# --- Strategies, tried in order ---

_SCALE_RES = [
    re.compile(r"\b(\d{1,2})\s*(?:von|auf|aus)\s*(?:10|zehn)\b"),
    re.compile(r"\b(\d{1,2})\s*[/\\]\s*10\b"),
]


def _scale(tokens, view, thresholds):
    for regex in _SCALE_RES:
        for m in regex.finditer(view.text):
            level = int(m.group(1))
            if 0 <= level <= 10:
                return _result(level, thresholds.pain_scale, m.group(0),
                               view.match_span(m))
    return None


def _trigger(tokens, view, thresholds):
    for i, token in enumerate(tokens):
        if not is_pain_trigger(token.word):
            continue
        # Nearest number after the keyword first, then just before it
        after = range(i + 1, min(len(tokens), i + 5))
        before = range(i - 1, max(-1, i - 3), -1)
        for j in list(after) + list(before):
            level = _pain_number(tokens, j)
            if level is not None:
                return _result(level, thresholds.pain_trigger,
                               f"{token.word} ... {tokens[j].word}", (i, j))
    return None


_STAERKE_RE = re.compile(r"\b(?:nur\s+)?st(?:ä|ae)rke\s+(\d{1,2})\b")


def _staerke(tokens, view, thresholds):
    m = _STAERKE_RE.search(view.text)
    if m and int(m.group(1)) <= 10:
        return _result(int(m.group(1)), thresholds.pain_staerke, m.group(0),
                       view.match_span(m))
    return None


_BEI_AUF_RE = re.compile(r"\b(?:bei|auf)\s+(\d{1,2})\b")


def _bei_auf(tokens, view, thresholds):
    if not has_pain_context(tokens):
        return None
    for m in _BEI_AUF_RE.finditer(view.text):
        span = view.match_span(m)
        level = _pain_number(tokens, span[-1])
        if level is not None:
            return _result(level, thresholds.pain_context, m.group(0), span,
                           review=True)
    return None


# Most specific first: "sehr leicht" before "leicht", "sehr stark" before "stark"
_DESCRIPTORS = [
    (re.compile(r"\b(?:kein|keine|keinen|keiner|0)\s+(?:kopf)?schmerz\w*|\bkeine\s+migr(?:ä|ae)ne\b"), 0),
    (re.compile(r"\b(?:sehr\s+leicht\w*|minimal\w*|kaum\s+sp(?:ü|ue)rbar)"), 1),
    (re.compile(r"\b(?:sehr\s+stark\w*|unertr(?:ä|ae)glich\w*|extrem\w*|heftig\w*|maximal\w*"
                r"|h(?:ö|oe)llisch\w*|brutal\w*|kaum\s+auszuhalten)"), 9),
    (re.compile(r"\b(?:stark(?:e|en|er|es)?|schwer(?:e|en|er|es)?|massiv\w*"
                r"|richtig\s+schlimm\w*|echt\s+schlimm\w*)\b"), 7),
    (re.compile(r"\b(?:mittel(?:stark\w*)?|m(?:ä|ae|a)(?:ß|ss|s)ig\w*|moderat\w*)\b"), 5),
    (re.compile(r"\b(?:leicht(?:e|en|er|es)?|schwach\w*|gering\w*|dezent\w*|bisschen)\b"), 3),
]


def _descriptor(tokens, view, thresholds):
    if not has_pain_context(tokens):
        return None
    for regex, level in _DESCRIPTORS:
        m = regex.search(view.text)
        if m:
            return _result(level, thresholds.pain_descriptor, m.group(0),
                           view.match_span(m), review=True, descriptor=True)
    return None


def _fallback(tokens, view, thresholds):
    context = [i for i, t in enumerate(tokens) if _PAIN_CONTEXT_RE.search(t.word)]
    if not context:
        return None
    for i in range(len(tokens)):
        if not any(abs(i - c) <= 2 for c in context):
            continue
        level = _pain_number(tokens, i)
        if level is not None:
            return _result(level, thresholds.pain_fallback,
                           f"pain context + {tokens[i].word}", (i,), review=True)
    return None


_STRATEGIES = [_scale, _trigger, _staerke, _bei_auf, _descriptor, _fallback]


def extract_pain(text, tokens=None, thresholds=THRESHOLDS):
    """Find a 0-10 pain intensity. Returns a ParsedPainIntensity (value None if absent)."""
    if tokens is None:
        tokens = tokenize(text)
    view = TokenView.masked(tokens)
    for strategy in _STRATEGIES:
        result = strategy(tokens, view, thresholds)
        if result is not None:
            return result
    return ParsedPainIntensity()


# --- Standalone test ---

if __name__ == "__main__":
    tests = [
        "vor 10 Minuten schmerzstärke 5 Ibuprofen 800 mg",
        "Schmerzlautstärke 8 von 10",
        "schnellstärke 4",
        "Kopfschmerzen bei 5",
        "Migräne auf 8",
        "starke Kopfschmerzen",
        "wenig geschlafen und Stress",
        "Ibuprofen 400 mg genommen",
    ]
    for t in tests:
        r = extract_pain(t)
        print(f"  {t!r:52s} => {r.value} ({r.confidence:.2f}, {r.evidence!r})")
