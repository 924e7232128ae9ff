"""Voice note command: store free text as a note without parsing it.

Handles:
    "notiz: stress bei der arbeit"
    "neue notiz wetterumschwung seit gestern"
    "notiere dass ich schlecht geschlafen habe"
    "merke dir kaffee um 15 uhr"
    "schreib auf rotwein gestern abend"
    "notiz"                                    text missing
"""

from painlog.commands.parse import Parse
from painlog.commands.template import TemplatePattern, match_any

_NOTE_PATTERNS = [
    (TemplatePattern("[notiz|neue notiz|sprachnotiz|kontextnotiz|notiz speichern] $text", greedy=True), "note"),
    (TemplatePattern("[notiere|notier|notieren] [dass|das|mir] $text", greedy=True), "note"),
    (TemplatePattern("[notiere|notier|notieren] $text", greedy=True), "note"),
    (TemplatePattern("[merke|merk] [dir|mir] [dass|das] $text", greedy=True), "note"),
    (TemplatePattern("[merke|merk] [dir|mir] $text", greedy=True), "note"),
    (TemplatePattern("[schreib|schreibe] auf $text", greedy=True), "note"),
    (TemplatePattern("[speichere|speicher] [notiz|als notiz] $text", greedy=True), "note"),
]

_BARE_PATTERNS = [
    (TemplatePattern("[notiz|neue notiz|sprachnotiz|notiere|notiz speichern|merke dir|merk dir]"), "bare"),
]


def parse(text, lexicon=None, now=None):
    t = text.strip()
    result = match_any(_NOTE_PATTERNS, t)
    if result is not None:
        _, fields = result
        return Parse(command="save_voice_note", score=0.95, args={"text": fields["text"]})

    if match_any(_BARE_PATTERNS, t):
        return Parse(command="save_voice_note", score=0.85, args={"text": None},
                     missing=["text"])
    return None


def summarize(p):
    return f"Notiz speichern: {p.args.get('text') or '?'}"
