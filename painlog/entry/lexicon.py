"""Per-user medication lexicon.

Built once from the user's medication list and passed by reference into
every parse call. Each entry carries the folded spellings a transcript may
contain: the full name, the name without strength, short prefixes, and
hand-collected speech-recognition variants for common drug names.
"""

import re
from types import MappingProxyType

import pint

from painlog.entry.normalize import fold_word
from painlog.entry.types import MedicationLexicon, MedicationLexiconEntry, UserMedication

_ureg = pint.UnitRegistry()

_STRENGTH_RE = re.compile(
    r"^(.+?)\s*(\d+(?:[.,]\d+)?)\s*(mg|ml|mcg|µg|ug|g|mikrogramm|milligramm)\b.*$",
    re.IGNORECASE,
)

_UNITS = {
    "mg": "milligram", "milligramm": "milligram",
    "g": "gram",
    "mcg": "microgram", "µg": "microgram", "ug": "microgram",
    "mikrogramm": "microgram",
    "ml": "milliliter",
}

# (substring of the folded name, extra spellings heard for it)
_ASR_VARIANTS = [
    ("ibuprofen", ["iboprofen", "ibuproffen", "ibu", "ibuprofe"]),
    ("paracetamol", ["parazitamol", "paracetamoll", "para", "parcetamol"]),
    ("aspirin", ["asprin", "asperin", "ass"]),
    ("naproxen", ["naproxem", "naproxan"]),
    ("diclofenac", ["diclofenak", "diklofenac"]),
]


def strength_mg(amount, unit):
    """Convert a strength to milligrams with pint. Returns None for volumes."""
    try:
        quantity = _ureg.Quantity(float(amount.replace(",", ".")), _UNITS[unit.lower()])
        return round(quantity.to("milligram").magnitude, 6)
    except (KeyError, ValueError, pint.errors.DimensionalityError):
        return None


def split_strength(name):
    """Split "Sumatriptan 50 mg" into ("Sumatriptan", "50 mg", 50.0)."""
    m = _STRENGTH_RE.match(name.strip())
    if not m:
        return name.strip(), None, None
    amount, unit = m.group(2), m.group(3).lower()
    return m.group(1).strip(), f"{amount} {unit}", strength_mg(amount, unit)


def _forms(name):
    """Folded spellings of one name: (exact forms, fuzzy forms)."""
    folded = fold_word(name)
    base, _, _ = split_strength(name)
    base_folded = fold_word(base)

    fuzzy = [f for f in dict.fromkeys([base_folded, folded]) if f]
    exact = set(fuzzy)
    for n in (4, 5, 6):
        if len(base_folded) > n:
            exact.add(base_folded[:n])

    lower = base.lower()
    if "triptan" in lower:
        fuzzy.append(fold_word(lower.replace("triptan", "tryptan")))
        fuzzy.append(fold_word(lower.replace("triptan", "triplan")))
    if lower.startswith("suma"):
        fuzzy.append(fold_word("soma" + lower[4:]))
        fuzzy.append(fold_word("zuma" + lower[4:]))
    for key, variants in _ASR_VARIANTS:
        if key in base_folded:
            for v in variants:
                exact.add(v)
                if len(v) >= 5:
                    fuzzy.append(v)

    exact.update(fuzzy)
    return exact, list(dict.fromkeys(fuzzy))


def _coerce(med):
    if isinstance(med, UserMedication):
        return med
    if isinstance(med, str):
        return UserMedication(name=med)
    if isinstance(med, dict):
        return UserMedication(name=med.get("name") or "", id=med.get("id"),
                              wirkstoff=med.get("wirkstoff"))
    return None


def build_lexicon(medications):
    """Build a MedicationLexicon from the user's medication list.

    Accepts UserMedication records, dicts with name/id/wirkstoff keys, or
    bare names. Records without a usable name are skipped.
    """
    entries = []
    prefix_index = {}

    for med in medications or ():
        med = _coerce(med)
        if med is None or not med.name or len(med.name.strip()) < 2:
            continue
        name = med.name.strip()
        base, strength, mg = split_strength(name)
        exact, fuzzy = _forms(name)
        if med.wirkstoff and len(med.wirkstoff.strip()) >= 2:
            w_exact, w_fuzzy = _forms(med.wirkstoff)
            exact |= w_exact
            fuzzy += [f for f in w_fuzzy if f not in fuzzy]

        entries.append(MedicationLexiconEntry(
            canonical=name,
            id=med.id,
            base_name=base,
            strength=strength,
            strength_mg=mg,
            forms=frozenset(exact),
            fuzzy_forms=tuple(fuzzy),
        ))

        base_folded = fold_word(base)
        if len(base_folded) >= 3:
            names = prefix_index.setdefault(base_folded[:3], [])
            if name not in names:
                names.append(name)

    return MedicationLexicon(
        entries=tuple(entries),
        prefix_index=MappingProxyType({k: tuple(v) for k, v in prefix_index.items()}),
    )


if __name__ == "__main__":
    lex = build_lexicon(["Sumatriptan 50 mg", "Ibuprofen 0,4 g", "Naproxen"])
    for e in lex.entries:
        print(f"  {e.canonical!r}: base={e.base_name!r} strength={e.strength!r} "
              f"mg={e.strength_mg} forms={sorted(e.forms)}")
