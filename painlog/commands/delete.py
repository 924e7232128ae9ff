"""Delete command: remove a diary entry or a voice note.

Handles:
    "lösche den letzten eintrag"
    "entferne letzten schmerzeintrag"
    "lösche die letzte notiz"

Only fires on an explicit delete word; destructive intents are never
guessed from context.
"""

import re

from painlog.commands.parse import Parse

_DELETE_RE = re.compile(
    r"\b(?:lösche|löschen|lösch|loesche|loeschen|entferne|entfernen|entfern"
    r"|verwerfe|verwerfen|wegmachen|rausnehmen)\b"
)
_NOTE_RE = re.compile(r"\b(?:notiz|notizen|sprachnotiz|kontextnotiz)\b")
_ENTRY_RE = re.compile(r"\b(?:eintrag|einträge|schmerzeintrag|migräneeintrag|kopfschmerzeintrag)\b")
_LATEST_RE = re.compile(r"\b(?:letzte[nrs]?|zuletzt|neueste[nrs]?)\b")


def has_delete_operator(text):
    return bool(_DELETE_RE.search(text.lower()))


def parse(text, lexicon=None, now=None):
    t = text.lower().strip()
    if not has_delete_operator(t):
        return None

    which = "last" if _LATEST_RE.search(t) else None
    if _NOTE_RE.search(t):
        return Parse(command="delete_voice_note", score=0.9, args={"which": which})
    if _ENTRY_RE.search(t):
        return Parse(command="delete_entry", score=0.9, args={"which": which})
    return None


def summarize(p):
    target = "Notiz" if p.command == "delete_voice_note" else "Eintrag"
    return f"Letzte {target} löschen" if p.args.get("which") == "last" else f"{target} löschen"
