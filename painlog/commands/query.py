"""Query command: read-only questions about the diary.

Handles:
    "zeig letzten eintrag", "was war mein letzter eintrag"
    "wann zuletzt triptan genommen", "wann habe ich das letzte mal ibuprofen genommen"
    "wie oft triptan genommen", "an wie vielen tagen schmerzmittel letzten monat"
    "wie viele migränetage", "wie viele kopfschmerztage diese woche"
    "durchschnittliche schmerzstärke letzte 14 tage"
"""

import re

from painlog.commands.delete import has_delete_operator
from painlog.commands.parse import Parse
from painlog.commands.slots import DEFAULT_DAYS, extract_days, find_medication

_LATEST_RE = re.compile(r"\b(?:zuletzt|letzte[nrs]?|letztes\s+mal|vorhin)\b")
_WHEN_RE = re.compile(r"\bwann\b")
_INTAKE_RE = re.compile(r"\b(?:genommen|eingenommen|nehme|nahm|einnahme)\b")
_COUNT_RE = re.compile(r"\b(?:wie\s+oft|wie\s*viele|wieviele|anzahl|zähle|zaehle)\b")
_AVERAGE_RE = re.compile(r"\b(?:durchschnitt\w*|schnitt|mittelwert)\b")
_ENTRY_RE = re.compile(r"\b(?:eintrag|schmerzeintrag|migräneeintrag|kopfschmerzeintrag)\b")
_MIGRAINE_RE = re.compile(r"(?:migräne|migraene|kopfschmerz|attacke|schmerztage|anfälle)")
_PAIN_RE = re.compile(r"(?:schmerz|stärke|staerke|intensität)")
_OPEN_RE = re.compile(r"\b(?:zeig|zeige|öffne|öffnen|was\s+war|wann\s+war)\b")

LABELS = {
    "last_entry": "Letzten Eintrag anzeigen",
    "last_intake_med": "Letzte Einnahme abfragen",
    "count_med_range": "Einnahmetage zählen",
    "count_migraine_range": "Migränetage zählen",
    "avg_pain_range": "Durchschnittliche Schmerzstärke",
}


def _query(query, score, medication=None, days=None, needs_medication=False):
    missing = ["medication"] if needs_medication and medication is None else []
    if missing:
        score = min(score, 0.85)
    return Parse(command="analytics_query", score=score,
                 args={"query": query, "medication": medication, "days": days},
                 missing=missing)


def parse(text, lexicon=None, now=None):
    t = text.lower().strip()
    if has_delete_operator(t):
        return None
    medication = find_medication(t, lexicon)
    days = extract_days(t)

    # "durchschnittliche schmerzstärke letzte woche"
    if _AVERAGE_RE.search(t) and _PAIN_RE.search(t):
        return _query("avg_pain_range", 0.9, days=days or DEFAULT_DAYS)

    # "wann zuletzt triptan genommen"
    if _WHEN_RE.search(t) and _LATEST_RE.search(t) and (_INTAKE_RE.search(t) or medication):
        return _query("last_intake_med", 0.9, medication=medication,
                      needs_medication=True)

    if _COUNT_RE.search(t):
        # Medication first: "wie oft triptan genommen" counts intakes, not attacks
        if medication is not None or _INTAKE_RE.search(t):
            return _query("count_med_range", 0.9, medication=medication,
                          days=days or DEFAULT_DAYS, needs_medication=True)
        if _MIGRAINE_RE.search(t) or re.search(r"\btage\b", t):
            return _query("count_migraine_range", 0.9, days=days or DEFAULT_DAYS)

    # "zeig letzten eintrag"
    if _ENTRY_RE.search(t) and _LATEST_RE.search(t):
        score = 0.9 if _OPEN_RE.search(t) else 0.85
        return _query("last_entry", score)

    return None


def summarize(p):
    label = LABELS[p.args["query"]]
    if p.args.get("medication"):
        label += f" ({p.args['medication']})"
    if p.args.get("days"):
        label += f", {p.args['days']} Tage"
    return label
