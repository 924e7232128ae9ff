"""Value types produced by the utterance parser.

All records are frozen: a parse result is built once and handed to the
caller, who owns persistence. Token spans are tuples of token indices into
the tokenized transcript and are used by the notes cleaner.
"""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class UserMedication:
    name: str
    id: str | None = None
    wirkstoff: str | None = None   # active ingredient, e.g. "Sumatriptan"


@dataclass(frozen=True)
class ParsedTime:
    kind: str                  # "absolute", "relative" or "none"
    instant: datetime
    date: date
    clock: str                 # "HH:MM"
    is_now: bool
    confidence: str            # "high", "medium" or "low"
    relative_minutes: int | None = None
    display: str | None = None
    span: tuple = ()

    @property
    def hour(self):
        return self.instant.hour

    @property
    def minute(self):
        return self.instant.minute


@dataclass(frozen=True)
class ParsedPainIntensity:
    value: int | None = None
    confidence: float = 0.0
    evidence: str = ""
    needs_review: bool = False
    estimated_from_descriptor: bool = False
    span: tuple = ()


@dataclass(frozen=True)
class MedicationLexiconEntry:
    canonical: str
    id: str | None
    base_name: str
    strength: str | None
    strength_mg: float | None
    forms: frozenset           # folded variants accepted as exact matches
    fuzzy_forms: tuple         # folded variants scored by similarity


@dataclass(frozen=True)
class MedicationLexicon:
    entries: tuple = ()
    prefix_index: dict = field(default_factory=dict)   # 3-char prefix -> canonical names

    def __len__(self):
        return len(self.entries)

    def get(self, canonical):
        for entry in self.entries:
            if entry.canonical == canonical:
                return entry
        return None


@dataclass(frozen=True)
class MedicationMatch:
    canonical: str
    id: str | None
    confidence: float
    kind: str                  # "exact", "fuzzy", "prefix" or "split_token"
    is_uncertain: bool = False
    alternatives: tuple = ()


@dataclass(frozen=True)
class MedicationMention:
    """A medication match anchored to the tokens it consumed."""
    raw: str
    match: MedicationMatch
    start: int
    end: int                   # inclusive
    repeats: tuple = ()        # token indices of later mentions of the same drug


@dataclass(frozen=True)
class ParsedMedication:
    name: str
    matched_user_med: bool
    dose_quarters: int = 4
    id: str | None = None
    dose_text: str | None = None
    confidence: float = 0.0
    needs_review: bool = False
    span: tuple = ()


@dataclass(frozen=True)
class VoiceParseResult:
    entry_type: str            # "new_entry" or "context_entry"
    confidence: float
    raw_text: str
    time: ParsedTime
    pain: ParsedPainIntensity
    medications: tuple
    note: str
    needs_review: bool
    type_can_be_toggled: bool
