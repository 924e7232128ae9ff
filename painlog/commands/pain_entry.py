"""Pain entry command: dictated diary entries.

Handles:
    "vor 10 Minuten Schmerzstärke 5, Ibuprofen 800 mg"   create_pain_entry
    "starke migräne gerade", "schmerzstärke 6"            quick_pain_entry
    "ich habe kopfschmerzen"                              quick_pain_entry, pain missing
    "wenig geschlafen und stress"                         create_note

Runs the full utterance parser and turns its result into a proposal.
"""

from painlog import entry
from painlog.entry.classify import has_context_vocabulary
from painlog.commands.parse import Parse
from painlog.commands.slots import as_lexicon

_NOTE_SCORE = 0.7
_VOCABULARY_ONLY_SCORE = 0.6


def parse(text, lexicon=None, now=None):
    result = entry.parse(text, as_lexicon(lexicon), now=now)

    if result.entry_type == entry.NEW_ENTRY:
        if result.medications:
            return Parse(
                command="create_pain_entry",
                score=result.confidence,
                args={
                    "pain": result.pain.value,
                    "medications": [m.name for m in result.medications],
                    "time": result.time,
                },
            )
        if result.pain.value is not None:
            return Parse(command="quick_pain_entry", score=result.confidence,
                         args={"pain": result.pain.value, "time": result.time})
        # Symptom words but no number: ask how strong
        return Parse(command="quick_pain_entry", score=_VOCABULARY_ONLY_SCORE,
                     args={"pain": None, "time": result.time}, missing=["pain"])

    if has_context_vocabulary(text.lower()):
        return Parse(command="create_note", score=_NOTE_SCORE,
                     args={"text": result.note})
    return None


def summarize(p):
    if p.command == "create_note":
        return "Kontextnotiz speichern"
    parts = []
    if p.args.get("pain") is not None:
        parts.append(f"Schmerzstärke {p.args['pain']}")
    parts.extend(p.args.get("medications", []))
    label = "Schmerzeintrag" if p.command == "create_pain_entry" else "Schnelleintrag"
    return f"{label}: {', '.join(parts)}" if parts else label
