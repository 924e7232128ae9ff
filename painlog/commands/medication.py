"""Medication command: add a medication to the user's list.

Handles:
    "füge medikament ibuprofen 400 mg hinzu"
    "neues medikament aimovig"
    "medikament naproxen hinzufügen"
    "lege medikament sumatriptan 50 mg an"
    "trage topiramat als neues medikament ein"
    "neues medikament"                           name missing
"""

from painlog.commands.parse import Parse
from painlog.commands.template import TemplatePattern, match_any
from painlog.entry.lexicon import split_strength

_ADD_PATTERNS = [
    (TemplatePattern("[füge|füg] [medikament|das medikament|ein medikament] $name hinzu"), "add"),
    (TemplatePattern("[füge|füg] $name als [medikament|neues medikament] hinzu"), "add"),
    (TemplatePattern("[neues medikament|neues mittel] $name", greedy=True), "add"),
    (TemplatePattern("[medikament|neues medikament] $name [hinzufügen|anlegen|eintragen]"), "add"),
    (TemplatePattern("[lege|leg] [medikament|neues medikament] $name an"), "add"),
    (TemplatePattern("[trage|trag] $name als [medikament|neues medikament] ein"), "add"),
    (TemplatePattern("$name als [medikament|neues medikament] [hinzufügen|anlegen|eintragen|speichern]"), "add"),
]

_BARE_PATTERNS = [
    (TemplatePattern("[neues medikament|medikament hinzufügen|neues medikament hinzufügen|medikament anlegen]"), "bare"),
]


def _display_name(name):
    """Capitalize the drug name and keep the strength as spoken: "Ibuprofen 400 mg"."""
    base, strength, _ = split_strength(name)
    base = " ".join(w[:1].upper() + w[1:] for w in base.split())
    return f"{base} {strength}" if strength else base


def parse(text, lexicon=None, now=None):
    t = text.strip()
    if match_any(_BARE_PATTERNS, t):
        return Parse(command="add_medication", score=0.85, args={"name": None},
                     missing=["name"])

    result = match_any(_ADD_PATTERNS, t)
    if result is None:
        return None
    _, fields = result
    return Parse(command="add_medication", score=0.9,
                 args={"name": _display_name(fields["name"])})


def summarize(p):
    return f"Medikament hinzufügen: {p.args.get('name') or '?'}"
