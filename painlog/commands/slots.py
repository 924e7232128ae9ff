"""Slot helpers shared by the command skills: medication names and day ranges."""

import re

from painlog.entry.lexicon import build_lexicon
from painlog.entry.medications import find_mentions
from painlog.entry.normalize import TokenView, tokenize
from painlog.entry.types import MedicationLexicon

# (category, words that name it)
_MEDICATION_CATEGORIES = [
    ("triptan", ["triptan", "triptane", "sumatriptan", "rizatriptan", "zolmitriptan",
                 "eletriptan", "naratriptan", "almotriptan", "frovatriptan",
                 "imigran", "maxalt", "ascotop", "relpax"]),
    ("schmerzmittel", ["schmerzmittel", "schmerztablette", "schmerztabletten",
                       "ibuprofen", "paracetamol", "aspirin", "diclofenac",
                       "naproxen", "novalgin", "metamizol"]),
    ("prophylaxe", ["prophylaxe", "vorbeugung", "ajovy", "aimovig", "emgality",
                    "topiramat", "amitriptylin", "flunarizin"]),
]

_DRUG_SUFFIX_RE = re.compile(r"\b([a-zäöü]+(?:triptan|profen|tamol|pirin|proxen))\b")


def as_lexicon(lexicon):
    if isinstance(lexicon, MedicationLexicon):
        return lexicon
    return build_lexicon(lexicon or ())


def find_medication(text, lexicon):
    """Name the medication a command refers to, or None.

    The user's own medications win; then a specific drug or category word
    ("triptan", "schmerzmittel"); then anything with a drug-like suffix.
    """
    lexicon = as_lexicon(lexicon)
    if lexicon.entries:
        mentions = find_mentions(tokenize(text), lexicon)
        if mentions:
            return mentions[0].match.canonical

    words = set(re.findall(r"[a-zäöüß]+", text.lower()))
    for category, names in _MEDICATION_CATEGORIES:
        for name in names:
            if name in words:
                return name if name != category and len(name) > 4 else category

    m = _DRUG_SUFFIX_RE.search(text.lower())
    if m:
        return m.group(1)
    return None


# --- Day ranges ---

_STANDARD_RANGES = [
    (r"\b(?:diese|letzte|vergangene)n?\s+woche\b", 7),
    (r"\b(?:eine|1)\s+woche\b", 7),
    (r"\b(?:zwei|2)\s+wochen\b", 14),
    (r"\b(?:diesen|letzten|vergangenen)\s+monat\b", 30),
    (r"\b(?:einen|ein|1)\s+monat\b", 30),
    (r"\b(?:drei|3)\s+monate(?:n)?\b", 90),
    (r"\b(?:sechs|6)\s+monate(?:n)?\b", 180),
    (r"\b(?:dieses|letztes|ein|1)\s+jahr\b", 365),
]

_RANGE_PATTERNS = [
    (re.compile(r"\bletzte(?:n)?\s+(\d+)\s*tage?n?\b"), 1),
    (re.compile(r"\bletzte(?:n)?\s+(\d+)\s*wochen?\b"), 7),
    (re.compile(r"\bletzte(?:n)?\s+(\d+)\s*monate?n?\b"), 30),
    (re.compile(r"\b(\d+)\s*tage?\s*(?:zurück|her)\b"), 1),
]

DEFAULT_DAYS = 30


def extract_days(text):
    """The day range a query covers ("letzte Woche" -> 7), or None."""
    t = TokenView.plain(tokenize(text)).text
    for regex, factor in _RANGE_PATTERNS:
        m = regex.search(t)
        if m:
            return int(m.group(1)) * factor
    for pattern, days in _STANDARD_RANGES:
        if re.search(pattern, t):
            return days
    return None
