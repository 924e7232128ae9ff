"""Time extractor: when did the logged event happen?

Handles:
    "vor 10 Minuten", "seit einer halben Stunde", "anderthalb Stunden",
    "Viertelstunde", "vor 2 Tagen",
    "heute Morgen", "gestern Abend", "letzte Nacht", "vorgestern",
    "gestern um 14 Uhr", "um 14:30", "um 8", "14 Uhr",
    "halb drei nachmittags", "viertel nach 3", "zehn vor 5",
    "jetzt", "gerade"

The strategies run in order and the first hit wins. Relative durations go
first so that the number in "vor 10 Minuten" is never read as a clock hour.
"""

import re
from datetime import datetime, timedelta

from painlog.entry.normalize import TokenView, tokenize
from painlog.entry.types import ParsedTime


def _make(kind, instant, confidence, relative_minutes=None, is_now=False,
          display=None, span=()):
    return ParsedTime(
        kind=kind,
        instant=instant,
        date=instant.date(),
        clock=instant.strftime("%H:%M"),
        is_now=is_now,
        confidence=confidence,
        relative_minutes=relative_minutes,
        display=display,
        span=span,
    )


# --- Relative durations ---

def _plural(n, one, many):
    return one if n == 1 else many


_RELATIVE_PATTERNS = [
    (re.compile(r"\b(?:vor|seit)\s+(\d+)\s*(?:minuten|minute|min)\b"),
     lambda n: n,
     lambda n: f"vor {n} {_plural(n, 'Minute', 'Minuten')}"),
    (re.compile(r"\b(?:vor|seit)\s+(\d+)\s*(?:stunden|stunde|std|h)\b"),
     lambda n: n * 60,
     lambda n: f"vor {n} {_plural(n, 'Stunde', 'Stunden')}"),
    (re.compile(r"\b(?:vor|seit)\s+(\d+)\s*(?:tagen|tage|tag)\b"),
     lambda n: n * 1440,
     lambda n: f"vor {n} {_plural(n, 'Tag', 'Tagen')}"),
    (re.compile(r"\b(?:vor|seit)\s+(?:einer|einem|1)\s+halben\s+stunde\b"),
     lambda n: 30,
     lambda n: "vor einer halben Stunde"),
    (re.compile(r"\b(?:vor|seit)\s+(?:einer|einem)\s+stunde\b"),
     lambda n: 60,
     lambda n: "vor einer Stunde"),
    (re.compile(r"\b(?:(?:vor|seit)\s+)?(?:anderthalb|eineinhalb)\s+stunden?\b"),
     lambda n: 90,
     lambda n: "vor anderthalb Stunden"),
    (re.compile(r"\b(?:(?:vor|seit)\s+)?(?:einer\s+)?(?:dreiviertel|3\s+viertel)\s*stunde\b"),
     lambda n: 45,
     lambda n: "vor einer Dreiviertelstunde"),
    (re.compile(r"\b(?:(?:vor|seit)\s+)?(?:einer\s+)?viertel\s*stunde\b"),
     lambda n: 15,
     lambda n: "vor einer Viertelstunde"),
]


def _relative(view, now):
    for regex, to_minutes, display in _RELATIVE_PATTERNS:
        m = regex.search(view.text)
        if m:
            n = int(m.group(1)) if m.groups() else 0
            minutes = to_minutes(n)
            return _make("relative", now - timedelta(minutes=minutes), "high",
                         relative_minutes=minutes, display=display(n),
                         span=view.match_span(m))
    return None


# --- Clock times ---

def _apply_daypart(hour, view):
    """Resolve a 12-hour clock value to 24h from a day-part word.

    Returns (hour, span) where span holds the day-part word, if any.
    """
    m = _DAYPART_WORD_RE.search(view.text)
    if m is None:
        return hour, ()
    span = view.match_span(m)
    if hour >= 12:
        return hour, span
    if m.group(1):
        return hour + 12, span
    if m.group(2) is None:
        return hour, span
    # "um 11 nachts" is late evening, "um 3 nachts" is early morning
    return (hour + 12 if hour >= 6 else hour), span


_DAYPART_WORD_RE = re.compile(r"\b(?:(nachmittags?|abends?)|(nachts?)|morgens|vormittags?)\b")

_NOT_A_CLOCK = r"(?!\s*(?:[.,:]\d|minuten|minute|min|stunden|stunde|std|tagen|tage|mg|milligramm|tabletten|tablette|von|auf|/))"

_AT = r"(?:(?:um|gegen)\s+)?"

_CLOCK_PATTERNS = [
    # "um 14:30", "gegen 8.15 uhr"
    (re.compile(r"\b(?:um|gegen|ab)\s+(\d{1,2})[:.](\d{2})(?:\s*uhr)?\b"),
     lambda m: (int(m.group(1)), int(m.group(2)))),
    # "um 14 uhr", "um 8 uhr 30"
    (re.compile(r"\b(?:um|gegen|ab)\s+(\d{1,2})\s*uhr(?:\s+(\d{1,2})\b(?!\s*(?:minuten|min|mg)))?"),
     lambda m: (int(m.group(1)), int(m.group(2) or 0))),
    # "halb 3" -> 2:30
    (re.compile(r"\b" + _AT + r"halb\s+(\d{1,2})\b(?!\s*tablette)"),
     lambda m: ((int(m.group(1)) - 1) % 24, 30)),
    (re.compile(r"\b" + _AT + r"viertel\s+nach\s+(\d{1,2})\b"),
     lambda m: (int(m.group(1)), 15)),
    (re.compile(r"\b" + _AT + r"viertel\s+vor\s+(\d{1,2})\b"),
     lambda m: ((int(m.group(1)) - 1) % 24, 45)),
    # "5 nach 3", "10 vor 8"
    (re.compile(r"\b" + _AT + r"([1-9]|1\d|2\d)\s+nach\s+(\d{1,2})\b" + _NOT_A_CLOCK),
     lambda m: (int(m.group(2)), int(m.group(1)))),
    (re.compile(r"\b" + _AT + r"([1-9]|1\d|2\d)\s+vor\s+(\d{1,2})\b" + _NOT_A_CLOCK),
     lambda m: ((int(m.group(2)) - 1) % 24, 60 - int(m.group(1)))),
    # bare "14:30"
    (re.compile(r"\b(\d{1,2})[:.](\d{2})\b(?!\s*(?:tablette|mg))"),
     lambda m: (int(m.group(1)), int(m.group(2)))),
    # "14 uhr"
    (re.compile(r"\b(\d{1,2})\s*uhr\b"),
     lambda m: (int(m.group(1)), 0)),
    # "um 8"
    (re.compile(r"\b(?:um|gegen)\s+(\d{1,2})\b" + _NOT_A_CLOCK),
     lambda m: (int(m.group(1)), 0)),
]


def _find_clock(view):
    """Return (hour, minute, span) for the first clock phrase, or None."""
    for regex, parse in _CLOCK_PATTERNS:
        m = regex.search(view.text)
        if m:
            hour, minute = parse(m)
            hour, daypart_span = _apply_daypart(hour, view)
            hour = max(0, min(23, hour))
            minute = max(0, min(59, minute))
            span = set(view.match_span(m)) | set(daypart_span)
            return hour, minute, tuple(sorted(span))
    return None


def _clock(view, now):
    found = _find_clock(view)
    if found is None:
        return None
    hour, minute, span = found
    instant = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    return _make("absolute", instant, "high",
                 display=f"um {hour:02d}:{minute:02d} Uhr", span=span)


# --- Day parts ---

# (pattern, days ago, default hour or None, display)
_DAY_PATTERNS = [
    (r"heute\s+(?:morgen|früh|frueh)", 0, 7, "heute Morgen"),
    (r"heute\s+vormittag", 0, 10, "heute Vormittag"),
    (r"heute\s+mittag", 0, 12, "heute Mittag"),
    (r"heute\s+nachmittag", 0, 15, "heute Nachmittag"),
    (r"heute\s+abend", 0, 20, "heute Abend"),
    (r"heute\s+nacht", 0, 23, "heute Nacht"),
    (r"gestern\s+(?:morgen|früh|frueh)", 1, 7, "gestern Morgen"),
    (r"gestern\s+vormittag", 1, 10, "gestern Vormittag"),
    (r"gestern\s+mittag", 1, 12, "gestern Mittag"),
    (r"gestern\s+nachmittag", 1, 15, "gestern Nachmittag"),
    (r"gestern\s+abend", 1, 20, "gestern Abend"),
    (r"gestern\s+nacht", 1, 23, "gestern Nacht"),
    (r"letzte\s+nacht", 0, 3, "letzte Nacht"),
    (r"vorgestern", 2, None, "vorgestern"),
    (r"gestern", 1, None, "gestern"),
]

_DAY_REGEXES = [
    (re.compile(r"\b(?:(?:seit|ab|von)\s+)?" + pattern + r"\b"), days, hour, display)
    for pattern, days, hour, display in _DAY_PATTERNS
]


def _day_part(view, now):
    for regex, days_ago, default_hour, display in _DAY_REGEXES:
        m = regex.search(view.text)
        if not m:
            continue
        day = now - timedelta(days=days_ago)
        span = view.match_span(m)

        # A clock phrase next to the day refines it: "gestern um 14 Uhr"
        clock = _find_clock(view)
        if clock is not None:
            hour, minute, clock_span = clock
            instant = day.replace(hour=hour, minute=minute, second=0, microsecond=0)
            return _make("absolute", instant, "high",
                         display=f"{display} um {hour:02d}:{minute:02d} Uhr",
                         span=tuple(sorted(set(span) | set(clock_span))))

        if default_hour is None:
            # Bare "gestern": the day is known, the hour is not
            return _make("absolute", day.replace(second=0, microsecond=0), "low",
                         display=display, span=span)
        instant = day.replace(hour=default_hour, minute=0, second=0, microsecond=0)
        return _make("absolute", instant, "medium", display=display, span=span)
    return None


# --- Immediacy and default ---

_NOW_RE = re.compile(r"\b(?:jetzt|gerade|sofort|eben|soeben|aktuell|momentan)\b")


def _immediate(view, now):
    m = _NOW_RE.search(view.text)
    if not m:
        return None
    return _make("absolute", now, "high", relative_minutes=0, is_now=True,
                 display="jetzt", span=view.match_span(m))


def _default(view, now):
    return _make("none", now, "high", is_now=True)


_STRATEGIES = [_relative, _day_part, _clock, _immediate, _default]


def extract_time(text, now=None, tokens=None):
    """Find the time an utterance refers to. Always returns a ParsedTime."""
    now = now or datetime.now()
    if tokens is None:
        tokens = tokenize(text)
    view = TokenView.plain(tokens)
    for strategy in _STRATEGIES:
        result = strategy(view, now)
        if result is not None:
            return result


# --- Standalone test ---

if __name__ == "__main__":
    fixed = datetime(2025, 3, 14, 16, 0)
    tests = [
        "vor 10 Minuten Kopfschmerzen",
        "seit einer halben Stunde",
        "anderthalb Stunden",
        "gestern Abend",
        "gestern um 14 Uhr",
        "halb drei nachmittags",
        "viertel vor 5",
        "um 8",
        "gerade eben",
        "Stress im Büro",
    ]
    for t in tests:
        r = extract_time(t, now=fixed)
        print(f"  {t!r:35s} => {r.kind:8s} {r.date} {r.clock} "
              f"rel={r.relative_minutes} conf={r.confidence} ({r.display})")
