"""Navigate command: open one of the app's views.

Handles:
    "öffne tagebuch", "zeige auswertung", "gehe zu einstellungen"
    "öffne medikamente", "zeige erinnerungen", "öffne arztdaten"
    "erstelle bericht", "zeige wirkung", "hilfe", "was kann ich sagen"
"""

import re

from painlog.commands.parse import Parse
from painlog.commands.template import TemplatePattern, match_any

# (view, label, keyword regex)
VIEWS = [
    ("medication_effects", "Medikamentenwirkung",
     r"(?:wirkung|medikamentenwirkung|effekte?|bewertungen)"),
    ("diary_report", "Bericht", r"(?:bericht|arztbericht|pdf|export|report)"),
    ("voice_notes", "Notizen", r"(?:notizen|sprachnotizen|kontextnotizen|anmerkungen)"),
    ("diary", "Tagebuch", r"(?:tagebuch|kopfschmerztagebuch|einträge|eintraege|aufzeichnungen)"),
    ("analysis", "Auswertung", r"(?:auswertung|analyse|statistik|trends|übersicht|uebersicht)"),
    ("medications", "Medikamente", r"(?:medikamente|medikamentenliste|medikation)"),
    ("reminders", "Erinnerungen", r"(?:erinnerungen|termine|wecker|reminder)"),
    ("settings", "Einstellungen", r"(?:einstellungen|settings|konfiguration|optionen)"),
    ("doctors", "Ärzte", r"(?:arztdaten|ärzteliste|ärzte|aerzte|arzt|neurologe|hausarzt)"),
    ("profile", "Profil", r"(?:profil|persönliche daten|stammdaten|patientendaten)"),
]

_VIEW_RES = [(view, label, re.compile(r"\b" + words + r"\w*"))
             for view, label, words in VIEWS]

_OPEN_RE = re.compile(
    r"\b(?:öffne|öffnen|oeffne|aufmachen|zeig|zeige|anzeigen|geh|gehe|navigiere"
    r"|wechsle|wechsel|bring|starte|erstelle|erstellen|generiere|generieren)\b"
)

# Words that mean the user wants to do something with the object, not look at it
_ACTION_RE = re.compile(
    r"\b(?:bewerte|bewerten|lösche|löschen|entferne|entfernen|füge|hinzufügen|notiere)\b"
)

_HELP_PATTERNS = [
    (TemplatePattern("[hilfe|help|befehle|kommandos]"), "help"),
    (TemplatePattern("[was kann ich sagen|was kannst du|wie geht das|zeige hilfe|öffne hilfe]"), "help"),
]

LABELS = {view: label for view, label, _ in VIEWS}


def parse(text, lexicon=None, now=None):
    t = text.lower().strip()
    if match_any(_HELP_PATTERNS, t):
        return Parse(command="help", score=0.9)

    if _ACTION_RE.search(t):
        return None

    for view, _, regex in _VIEW_RES:
        if not regex.search(t):
            continue
        if _OPEN_RE.search(t):
            return Parse(command=f"navigate_{view}", score=0.9, args={"view": view})
        if len(t.split()) <= 2:
            # Bare object word: "tagebuch", "meine einstellungen"
            return Parse(command=f"navigate_{view}", score=0.7, args={"view": view})
        return None
    return None


def summarize(p):
    if p.command == "help":
        return "Hilfe anzeigen"
    return f"{LABELS[p.args['view']]} öffnen"
