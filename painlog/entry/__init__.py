"""Voice entry parser: one German utterance in, one structured diary entry out.

    >>> from painlog.entry import parse
    >>> r = parse("vor 10 Minuten Schmerzstärke 5, Ibuprofen 800 mg",
    ...           ["Ibuprofen 800 mg"])
    >>> r.entry_type, r.pain.value, r.time.relative_minutes, r.note
    ('new_entry', 5, 10, '')

parse() never raises for any string input; anything it cannot make sense
of becomes a low-confidence context entry.
"""

from datetime import datetime

from painlog.entry.classify import CONTEXT_ENTRY, NEW_ENTRY, classify_entry
from painlog.entry.display import format_dose_quarters, format_time_display
from painlog.entry.lexicon import build_lexicon
from painlog.entry.medications import (
    correct_transcript, extract_dose, extract_medications, find_mentions, match_medication,
)
from painlog.entry.normalize import TokenView, normalize, tokenize
from painlog.entry.notes import clean_note
from painlog.entry.pain import extract_pain
from painlog.entry.time_parse import extract_time
from painlog.entry.types import (
    MedicationLexicon, MedicationLexiconEntry, MedicationMatch, MedicationMention,
    ParsedMedication, ParsedPainIntensity, ParsedTime, UserMedication, VoiceParseResult,
)
from painlog.thresholds import THRESHOLDS

__all__ = [
    "parse", "build_lexicon", "normalize", "tokenize", "extract_time",
    "extract_pain", "extract_medications", "extract_dose", "match_medication",
    "find_mentions", "correct_transcript", "classify_entry", "clean_note",
    "format_dose_quarters", "format_time_display", "NEW_ENTRY", "CONTEXT_ENTRY",
    "MedicationLexicon", "MedicationLexiconEntry", "MedicationMatch",
    "MedicationMention", "ParsedMedication", "ParsedPainIntensity", "ParsedTime",
    "UserMedication", "VoiceParseResult",
]


def parse(transcript, medications=None, now=None, thresholds=THRESHOLDS):
    """Parse one utterance into a VoiceParseResult.

    Args:
        transcript: Raw speech-to-text output.
        medications: A MedicationLexicon, or the user's medication list
            (UserMedication records, dicts or names). Pass a prebuilt lexicon
            when parsing many utterances.
        now: Reference time for relative expressions; defaults to the clock.
        thresholds: Tunable confidences and cut-offs, see painlog.thresholds.
    """
    now = now or datetime.now()
    raw = transcript if isinstance(transcript, str) else ""
    stripped = raw.strip()
    tokens = tokenize(stripped)
    time = extract_time(stripped, now=now, tokens=tokens)

    if len(stripped) < 2:
        return VoiceParseResult(
            entry_type=CONTEXT_ENTRY,
            confidence=0.0,
            raw_text=raw,
            time=time,
            pain=ParsedPainIntensity(),
            medications=(),
            note=stripped,
            needs_review=True,
            type_can_be_toggled=False,
        )

    pain = extract_pain(stripped, tokens=tokens, thresholds=thresholds)
    meds = extract_medications(stripped, medications, tokens=tokens,
                               thresholds=thresholds, claimed=pain.span)

    text = TokenView.plain(tokens).text
    entry_type, confidence, can_toggle = classify_entry(text, pain, meds, time)

    if entry_type == NEW_ENTRY:
        note = clean_note(tokens, time, pain, meds)
    else:
        note = stripped

    needs_review = (any(m.needs_review for m in meds)
                    or pain.needs_review
                    or confidence < thresholds.review_below)

    return VoiceParseResult(
        entry_type=entry_type,
        confidence=confidence,
        raw_text=raw,
        time=time,
        pain=pain,
        medications=meds,
        note=note,
        needs_review=needs_review,
        type_can_be_toggled=can_toggle,
    )
