"""Reminder command: propose a reminder for a medication or an appointment.

Handles:
    "erinnere mich um 14 uhr an triptan"
    "erinnere mich morgen früh an ibuprofen"
    "erinnere mich täglich um 8:00 an prophylaxe"
    "erinnere mich am montag um 9 an den arzttermin"
    "erinnere mich in 2 stunden ans trinken"
    "erinnere mich an medikament"            time missing
    "erinnere mich um 14:30 uhr"             title missing

The core never schedules anything; it only returns the resolved time.
"""

import re
from datetime import datetime, timedelta

from painlog.commands.parse import Parse
from painlog.commands.slots import as_lexicon
from painlog.entry.medications import find_mentions
from painlog.entry.normalize import TokenView, tokenize

_TRIGGER_RE = re.compile(
    r"^(?:erinnere|erinner|erinnre)\s+(?:mich|uns)\b|^(?:neue\s+)?erinnerung\b|^reminder\b|^weck\w*\s+mich\b"
)


# --- Time parsing ---

def _apply_daypart(hour, text):
    """Resolve hour to 24h from day-part words in the text."""
    if hour >= 12:
        return hour
    if re.search(r"\b(?:nachmittags?|abends?)\b", text):
        return hour + 12
    if re.search(r"\bnachts?\b", text):
        return hour + 12 if hour >= 6 else hour
    return hour


def _has_daypart(text):
    return bool(re.search(r"\b(?:früh|frueh|morgens|vormittags?|mittags?|nachmittags?|abends?|nachts?)\b", text))


def _next_occurrence(hour, minute, now):
    """Return the next datetime matching this hour:minute (24h)."""
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return target


def _next_occurrence_12h(hour, minute, now):
    """Return the soonest upcoming time for an hour that could be AM or PM."""
    am = _next_occurrence(hour % 12, minute, now)
    pm = _next_occurrence(hour % 12 + 12, minute, now)
    return min(am, pm)


# (pattern, hour, minute) for a bare day part with no clock
_DAYPART_DEFAULTS = [
    (r"\b(?:früh|frueh|morgens|jeden\s+morgen)\b", 8, 0),
    (r"\bvormittags?\b", 10, 0),
    (r"\bmittags?\b", 12, 0),
    (r"\bnachmittags?\b", 15, 0),
    (r"\babends?\b", 20, 0),
    (r"\bnachts?\b", 22, 0),
]

_CLOCK_PATTERNS = [
    # "um 14:30", "14.30 uhr"
    re.compile(r"\b(?:um\s+|gegen\s+)?(\d{1,2})[:.](\d{2})(?:\s*uhr)?\b"),
    # "um 14 uhr", "um 8 uhr 30"
    re.compile(r"\b(?:um\s+|gegen\s+)?(\d{1,2})\s*uhr(?:\s+(\d{1,2})\b)?"),
    # "um 8"
    re.compile(r"\b(?:um|gegen)\s+(\d{1,2})\b(?!\s*(?:minuten|stunden|tagen))"),
]

_HALF_RE = re.compile(r"\bum\s+halb\s+(\d{1,2})\b")

_WEEKDAYS = {
    "montag": 0, "dienstag": 1, "mittwoch": 2, "donnerstag": 3,
    "freitag": 4, "samstag": 5, "sonntag": 6,
}
_WEEKDAY_RE = re.compile(r"\b(?:am\s+|nächsten\s+|naechsten\s+)?(" + "|".join(_WEEKDAYS) + r")\b")


def _find_clock(text):
    """Return (hour, minute, matched_phrase) or None."""
    m = _HALF_RE.search(text)
    if m:
        return (int(m.group(1)) - 1) % 24, 30, m.group(0)
    for regex in _CLOCK_PATTERNS:
        m = regex.search(text)
        if m:
            hour = int(m.group(1))
            minute = int(m.group(2)) if m.lastindex and m.lastindex >= 2 and m.group(2) else 0
            if hour <= 23 and minute <= 59:
                return hour, minute, m.group(0)
    return None


def _find_day(text, now):
    """Return (date, matched_phrase) for an explicit day, or None."""
    m = re.search(r"\bübermorgen\b|\buebermorgen\b", text)
    if m:
        return (now + timedelta(days=2)).date(), m.group(0)
    # "morgen" is tomorrow unless it is a day part ("heute morgen", "jeden morgen")
    m = re.search(r"(?<!heute )(?<!jeden )\bmorgen\b", text)
    if m:
        return (now + timedelta(days=1)).date(), m.group(0)
    m = re.search(r"\bin\s+(\d+)\s+tagen?\b", text)
    if m:
        return (now + timedelta(days=int(m.group(1)))).date(), m.group(0)
    m = _WEEKDAY_RE.search(text)
    if m:
        days_ahead = (_WEEKDAYS[m.group(1)] - now.weekday()) % 7
        return (now + timedelta(days=days_ahead)).date(), m.group(0)
    m = re.search(r"\bheute\b", text)
    if m:
        return now.date(), m.group(0)
    return None


def parse_time(text, now=None):
    """Parse a German time expression into the next matching datetime.

    Handles:
        "um 14 uhr", "14:30", "um 8", "um halb 3", "heute abend",
        "morgen früh", "übermorgen um 9", "am montag um 10",
        "in 3 tagen", "in 20 minuten", "in 2 stunden"

    Returns:
        (datetime, [matched phrases]) or (None, [])
    """
    now = now or datetime.now()
    t = text.lower().strip()

    # "in 20 minuten", "in 2 stunden"
    m = re.search(r"\bin\s+(\d+)\s*(minuten|minute|min|stunden|stunde)\b", t)
    if m:
        n = int(m.group(1))
        delta = timedelta(minutes=n) if m.group(2).startswith("min") else timedelta(hours=n)
        return (now + delta).replace(second=0, microsecond=0), [m.group(0)]

    phrases = []
    day = _find_day(t, now)
    if day is not None:
        phrases.append(day[1])
    clock = _find_clock(t)

    if clock is not None:
        hour, minute, phrase = clock
        phrases.append(phrase)
        hour = _apply_daypart(hour, t)
        ambiguous = 1 <= hour <= 11 and not _has_daypart(t)
    else:
        for pattern, default_hour, default_minute in _DAYPART_DEFAULTS:
            m = re.search(pattern, t)
            if m:
                hour, minute, ambiguous = default_hour, default_minute, False
                phrases.append(m.group(0))
                break
        else:
            if day is None:
                return None, []
            # A day but no time: 9 o'clock
            hour, minute, ambiguous = 9, 0, False

    for m in re.finditer(r"\b(?:früh|frueh|morgens|vormittags?|mittags?|nachmittags?|abends?|nachts?)\b", t):
        if m.group(0) not in phrases:
            phrases.append(m.group(0))

    if day is not None:
        target = datetime.combine(day[0], datetime.min.time()).replace(hour=hour, minute=minute)
        if target <= now:
            target += timedelta(days=7 if _WEEKDAY_RE.search(day[1]) else 1)
        return target, phrases
    if ambiguous:
        return _next_occurrence_12h(hour, minute, now), phrases
    return _next_occurrence(hour, minute, now), phrases


# --- Repeat and title ---

_REPEATS = [
    (r"\b(?:täglich|taeglich|jeden\s+tag|jeden\s+morgen|jeden\s+abend)\b", "daily"),
    (r"\b(?:wöchentlich|woechentlich|jede\s+woche|jeden\s+(?:montag|dienstag|mittwoch|donnerstag|freitag|samstag|sonntag))\b", "weekly"),
    (r"\b(?:monatlich|jeden\s+monat)\b", "monthly"),
]

_TITLE_FILLERS = {
    "an", "ans", "am", "daran", "zu", "zum", "zur", "dass", "das", "den", "die",
    "der", "mein", "meine", "meinen", "für", "fuer", "um", "uhr", "bitte", "noch",
}


def _repeat(text):
    for pattern, repeat in _REPEATS:
        m = re.search(pattern, text)
        if m:
            return repeat, m.group(0)
    return None, None


def _title(text, lexicon, removed_phrases):
    """Medication names if any are mentioned, otherwise the leftover words."""
    lexicon = as_lexicon(lexicon)
    if lexicon.entries:
        mentions = find_mentions(tokenize(text), lexicon)
        if mentions:
            return ", ".join(m.match.canonical for m in mentions)

    rest = _TRIGGER_RE.sub("", text, count=1)
    for phrase in sorted(removed_phrases, key=len, reverse=True):
        rest = rest.replace(phrase, " ")
    words = [t.word for t in tokenize(rest) if t.word not in _TITLE_FILLERS]
    return " ".join(words) or None


def parse(text, lexicon=None, now=None):
    t = TokenView.plain(tokenize(text)).text
    if not _TRIGGER_RE.search(t):
        return None

    now = now or datetime.now()
    when, phrases = parse_time(t, now)
    repeat, repeat_phrase = _repeat(t)
    if repeat_phrase:
        phrases.append(repeat_phrase)
    title = _title(t, lexicon, phrases)

    missing = []
    if when is None:
        missing.append("time")
    if title is None:
        missing.append("title")
    return Parse(
        command="create_reminder",
        score=0.85 if missing else 0.92,
        args={"title": title, "time": when, "repeat": repeat},
        missing=missing,
    )


def summarize(p):
    title = p.args.get("title") or "?"
    when = p.args.get("time")
    when = when.strftime("%d.%m. %H:%M") if when else "?"
    return f"Erinnerung: {title} ({when})"


# --- Standalone test ---

if __name__ == "__main__":
    fixed = datetime(2025, 3, 14, 16, 0)   # a Friday
    for t in ["erinnere mich um 14 uhr an triptan",
              "erinnere mich morgen früh an ibuprofen",
              "erinnere mich täglich um 8:00 an prophylaxe",
              "erinnere mich am montag um 9 an den arzttermin",
              "erinnere mich an medikament",
              "erinnere mich um 14:30 uhr"]:
        p = parse(t, now=fixed)
        print(f"  {t!r:50s} => {p.args} missing={p.missing}")
