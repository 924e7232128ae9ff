"""Medication matcher: find the user's medications in a transcript.

Handles:
    "Ibuprofen 400 genommen"            exact
    "Iboprofen", "Sumatriptam"          fuzzy (speech-recognition errors)
    "Suma triptan"                      split tokens merged back together
    "Rizat"                             stored short form of the name
    "Rizo"                              unique 3-letter prefix (uncertain)
    "keine Ibuprofen genommen"          negated, ignored
    "halbe Ibuprofen", "zwei Tabletten" dose in quarter-tablet units

Similarity is Jaro-Winkler, corroborated by Levenshtein distance for longer
tokens. The acceptance threshold drops a little when dose units, intake
verbs or quantity words stand next to the token, because real medication
mentions are often short and mangled.
"""

import re
from dataclasses import replace

from rapidfuzz.distance import JaroWinkler, Levenshtein

from painlog.entry.display import format_dose_quarters
from painlog.entry.lexicon import build_lexicon, strength_mg
from painlog.entry.normalize import DOSE_UNITS, TokenView, fold_word, is_number, tokenize
from painlog.entry.pain import is_pain_trigger
from painlog.entry.types import MedicationLexicon, MedicationMatch, MedicationMention, ParsedMedication
from painlog.thresholds import THRESHOLDS

MEDICATION_CONTEXT_WORDS = {
    "genommen", "eingenommen", "nehme", "nehmen", "nehm", "tablette",
    "tabletten", "pille", "kapsel", "mg", "milligramm", "ml", "tropfen",
    "triptan", "schmerzmittel", "medikament", "halbe", "ganze", "viertel",
    "eine", "zwei",
}

# Never matched as a medication, whatever the similarity says
SKIP_WORDS = {
    "vor", "nach", "mit", "und", "oder", "bei", "wegen", "durch", "seit",
    "ich", "habe", "hab", "heute", "gestern", "jetzt", "gerade", "dann", "noch",
    "eine", "einen", "einer", "einem", "das", "die", "der", "den", "dem",
    "paar", "schmerz", "kopfschmerz", "migräne", "migraene", "stark", "starke",
    "stärke",
    # context words that look close enough to drug names to slip through
    "büro", "buero", "stress", "trigger", "geschlafen", "arbeit", "müde",
    "muede", "wenig", "morgen", "schlaf", "schlecht", "wetter", "sport",
    "training", "essen", "trinken", "getrunken", "kaffee", "alkohol",
    "periode", "regel", "zyklus", "reise", "lärm", "laerm", "erschöpft",
    "erschoepft", "verspannt", "bildschirm", "termine", "sitzen",
    "autofahren", "zugfahrt", "gearbeitet", "ausgesetzt", "angestrengt",
    "überstunden", "minuten", "stunden", "tabletten", "tablette", "genommen",
    "eingenommen", "halbe", "ganze", "viertel",
}

NEGATION_WORDS = {"kein", "keine", "keinen", "keiner", "keinem", "nicht", "ohne"}

_DOSE_PATTERNS = [
    (re.compile(r"\b(?:drei\s*viertel|dreiviertel|3/4|0[.,]75)\b(?:\s+tabletten?)?"), 3),
    (re.compile(r"\b(?:anderthalb|eineinhalb|1[.,]5)\b(?:\s+tabletten?)?"), 6),
    (re.compile(r"\b(?:zwei|zwo|2)\s+(?:tabletten|kapseln|stück|stueck)\b"), 8),
    (re.compile(r"\b(?:drei|3)\s+(?:tabletten|kapseln|stück|stueck)\b"), 12),
    (re.compile(r"\b(?:viertel|1/4|0[.,]25)\b(?!\s*(?:nach|vor|stunde))(?:\s+tabletten?)?"), 1),
    (re.compile(r"\b(?:halbe|halben|halb|1/2|0[.,]5)\b"
                r"(?!\s*(?:stunde|\d|eins|zwei|drei|vier|fünf|fuenf|sechs|sieben|acht|neun|zehn|elf|zwölf))"
                r"(?:\s+tabletten?)?"), 2),
    (re.compile(r"\b(?:eine|einer|ganze|1)\s+(?:tablette|kapsel|pille)\b"), 4),
]


# --- Single-token matching ---

def _similarity(token, entry):
    best = 0.0
    for form in entry.fuzzy_forms:
        best = max(best, JaroWinkler.similarity(token, form, prefix_weight=0.1))
    if len(token) >= 6:
        base = fold_word(entry.base_name)
        max_dist = 2 if len(token) >= 8 else 1
        dist = Levenshtein.distance(token, base)
        if dist <= max_dist:
            best = max(best, 1 - dist / max(len(token), len(base)))
    return best


def _prefer_strength(entries, strength):
    """Narrow same-name entries to the one with the spoken strength, if unique."""
    if strength is None:
        return entries
    matching = [e for e in entries if e.strength_mg == strength]
    return matching if len(matching) == 1 else entries


def _exact(entries, strength, thresholds):
    entries = _prefer_strength(entries, strength)
    best = entries[0]
    others = tuple(e.canonical for e in entries[1:])
    return MedicationMatch(
        canonical=best.canonical,
        id=best.id,
        confidence=thresholds.exact_confidence,
        kind="exact",
        is_uncertain=bool(others),
        alternatives=others,
    )


def match_medication(word, lexicon, has_context=False, strength=None,
                     thresholds=THRESHOLDS):
    """Match one word (or merged phrase) against the lexicon.

    Args:
        word: The transcript text to match.
        lexicon: A MedicationLexicon.
        has_context: Medication context words are nearby; lowers the bar.
        strength: A strength in mg spoken right after the word, used to pick
            between entries that share a name.

    Returns:
        MedicationMatch or None
    """
    token = fold_word(word)
    if len(token) < 3 or token.isdigit():
        return None
    if word.lower() in SKIP_WORDS or token in SKIP_WORDS:
        return None

    # 1. Exact normalized form
    exact = [e for e in lexicon.entries if token in e.forms]
    if exact:
        return _exact(exact, strength, thresholds)

    # 2. Similarity across all variants
    threshold = thresholds.similarity_with_context if has_context else thresholds.similarity
    scored = []
    if len(token) >= 4:
        for entry in lexicon.entries:
            score = _similarity(token, entry)
            if score >= threshold:
                scored.append((score, entry))
    if scored:
        scored.sort(key=lambda pair: -pair[0])
        best_score = scored[0][0]
        close = [e for s, e in scored if best_score - s < thresholds.ambiguity_delta]
        close = _prefer_strength(close, strength)
        best = close[0]
        others = tuple(e.canonical for e in close[1:3])
        return MedicationMatch(
            canonical=best.canonical,
            id=best.id,
            confidence=round(best_score, 4),
            kind="fuzzy",
            is_uncertain=bool(others),
            alternatives=others,
        )

    # 3. Unique 3-letter prefix
    if len(token) >= 4:
        names = lexicon.prefix_index.get(token[:3], ())
        if len(names) == 1:
            entry = lexicon.get(names[0])
            return MedicationMatch(
                canonical=entry.canonical,
                id=entry.id,
                confidence=thresholds.prefix_confidence,
                kind="prefix",
                is_uncertain=True,
            )
    return None


# --- Transcript scanning ---

def _eligible(token):
    folded = fold_word(token.word)
    return (len(folded) >= 3
            and not is_number(token.value)
            and token.word not in SKIP_WORDS
            and folded not in SKIP_WORDS
            and not is_pain_trigger(token.word))


def _negated(tokens, i):
    return any(tokens[j].word in NEGATION_WORDS for j in range(max(0, i - 2), i))


def _has_context(tokens, i):
    for j in range(max(0, i - 3), min(len(tokens), i + 4)):
        if j != i and (tokens[j].word in MEDICATION_CONTEXT_WORDS
                       or tokens[j].word in DOSE_UNITS):
            return True
    return False


def _spoken_strength(tokens, end):
    """A strength in mg spoken right after a mention ("Ibuprofen 600 mg")."""
    if end + 1 >= len(tokens):
        return None
    amount = tokens[end + 1].value
    m = re.match(r"^(\d+(?:[.,]\d+)?)(mg|g|mcg|µg|ug)?$", amount)
    if not m:
        return None
    unit = m.group(2)
    if unit is None:
        following = tokens[end + 2].word if end + 2 < len(tokens) else ""
        unit = following if following in DOSE_UNITS else "mg"
    return strength_mg(m.group(1), unit)


def _match_split(tokens, i, lexicon, thresholds, claimed=()):
    """Merge 2-3 tokens ("suma triptan") and match them as one word."""
    for length in (2, 3):
        group = tokens[i:i + length]
        if len(group) < length or not all(_eligible(t) for t in group) \
                or any(j in claimed for j in range(i, i + length)):
            return None, 0
        merged = "".join(fold_word(t.word) for t in group)
        match = match_medication(merged, lexicon, True,
                                 _spoken_strength(tokens, i + length - 1), thresholds)
        if match is None or match.kind not in ("exact", "fuzzy") \
                or match.confidence < thresholds.split_token_min:
            continue
        # "woche sumatriptan" is a word followed by a name, not one mangled name
        tail = match_medication(group[-1].word, lexicon, True, None, thresholds)
        if tail is not None and tail.confidence >= match.confidence:
            return None, 0
        return MedicationMatch(
            canonical=match.canonical,
            id=match.id,
            confidence=match.confidence,
            kind="split_token",
            is_uncertain=match.is_uncertain,
            alternatives=match.alternatives,
        ), length
    return None, 0


def find_mentions(tokens, lexicon, thresholds=THRESHOLDS, claimed=()):
    """Scan tokens for medication mentions, one per medication.

    Tokens in claimed already belong to another slot and are never read as
    a medication. Later mentions of an already found medication are kept
    on the first mention as repeats.
    """
    mentions = []
    found = {}
    i = 0
    while i < len(tokens):
        if i in claimed or not _eligible(tokens[i]) or _negated(tokens, i):
            i += 1
            continue

        single = match_medication(tokens[i].word, lexicon, _has_context(tokens, i),
                                  _spoken_strength(tokens, i), thresholds)
        split, consumed = _match_split(tokens, i, lexicon, thresholds, claimed)
        if split is not None and (single is None or split.confidence >= single.confidence):
            match, end = split, i + consumed - 1
        elif single is not None:
            match, end = single, i
        else:
            i += 1
            continue

        span = tuple(range(i, end + 1))
        if match.canonical in found:
            k = found[match.canonical]
            mentions[k] = replace(mentions[k], repeats=mentions[k].repeats + span)
        else:
            found[match.canonical] = len(mentions)
            raw = " ".join(t.word for t in tokens[i:end + 1])
            mentions.append(MedicationMention(raw=raw, match=match, start=i, end=end))
        i = end + 1
    return mentions


def extract_dose(tokens, start, end):
    """Look for a dose phrase within 4 tokens of a mention.

    Returns (quarters, dose_text, token_indices). Defaults to one tablet.
    """
    lo = max(0, start - 4)
    hi = min(len(tokens), end + 5)
    view = TokenView(t.word for t in tokens[lo:hi])
    for regex, quarters in _DOSE_PATTERNS:
        m = regex.search(view.text)
        if m:
            span = tuple(lo + k for k in view.match_span(m))
            return quarters, format_dose_quarters(quarters), span
    return 4, None, ()


def _as_lexicon(medications):
    if isinstance(medications, MedicationLexicon):
        return medications
    return build_lexicon(medications or ())


def extract_medications(text, medications, tokens=None, thresholds=THRESHOLDS, claimed=()):
    """Find medications with doses. Returns a tuple of ParsedMedication.

    claimed holds token indices already taken by another slot, such as the
    pain descriptor in "maximale Kopfschmerzen".
    """
    lexicon = _as_lexicon(medications)
    if tokens is None:
        tokens = tokenize(text)
    if not lexicon.entries:
        return ()

    result = []
    for mention in find_mentions(tokens, lexicon, thresholds, claimed):
        quarters, dose_text, dose_span = extract_dose(tokens, mention.start, mention.end)
        match = mention.match
        result.append(ParsedMedication(
            name=match.canonical,
            matched_user_med=match.id is not None,
            dose_quarters=quarters,
            id=match.id,
            dose_text=dose_text,
            confidence=match.confidence,
            needs_review=match.is_uncertain,
            span=tuple(range(mention.start, mention.end + 1)) + dose_span + mention.repeats,
        ))
    return tuple(result)


def correct_transcript(text, medications, thresholds=THRESHOLDS):
    """Replace confidently matched drug mentions with their canonical base name.

    Returns (corrected_text, corrections) where corrections is a list of
    {"original", "corrected", "confidence"} dicts.
    """
    lexicon = _as_lexicon(medications)
    tokens = tokenize(text)
    mentions = find_mentions(tokens, lexicon, thresholds)
    if not mentions:
        return text, []

    raws = [t.raw for t in tokens]
    corrections = []
    for mention in reversed(mentions):
        match = mention.match
        if match.confidence < thresholds.correction_min:
            continue
        replacement = lexicon.get(match.canonical).base_name
        # A single word already spelled right stays as typed
        if mention.start == mention.end and fold_word(mention.raw) == fold_word(replacement):
            continue
        last = raws[mention.end]
        trailing = last[len(last.rstrip(".,;:!?")):]
        raws[mention.start:mention.end + 1] = [replacement + trailing]
        corrections.append({
            "original": mention.raw,
            "corrected": replacement,
            "confidence": match.confidence,
        })
    if not corrections:
        return text, []
    corrections.reverse()
    return " ".join(raws), corrections
