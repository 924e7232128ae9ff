"""Tests for the medication lexicon and matcher."""

import pytest

from painlog.entry import (
    build_lexicon, correct_transcript, extract_medications, match_medication,
)
from painlog.entry.lexicon import split_strength, strength_mg


def test_exact(lexicon):
    meds = extract_medications("Ibuprofen 400 genommen", lexicon)
    assert len(meds) == 1
    m = meds[0]
    assert m.name == "Ibuprofen 400 mg"
    assert m.id == "med-1"
    assert m.matched_user_med
    assert m.confidence == 0.98
    assert m.dose_quarters == 4
    assert m.dose_text is None
    assert not m.needs_review


def test_speech_variant_is_exact(lexicon):
    match = match_medication("Iboprofen", lexicon)
    assert match.canonical == "Ibuprofen 400 mg"
    assert match.kind == "exact"


def test_fuzzy(lexicon):
    match = match_medication("Sumatriptam", lexicon)
    assert match.canonical == "Sumatriptan 50 mg"
    assert match.kind == "fuzzy"
    assert match.confidence >= 0.9


def test_split_tokens(lexicon):
    meds = extract_medications("Suma triptan genommen", lexicon)
    assert [m.name for m in meds] == ["Sumatriptan 50 mg"]
    assert meds[0].span[:2] == (0, 1)


def test_word_before_name_is_not_merged(lexicon):
    meds = extract_medications("letzte Woche Sumatriptan genommen", lexicon)
    assert [m.name for m in meds] == ["Sumatriptan 50 mg"]
    assert meds[0].span == (2,)


def test_unique_prefix_is_uncertain(lexicon):
    match = match_medication("Rizo", lexicon)
    assert match.canonical == "Rizatriptan 10 mg"
    assert match.kind == "prefix"
    assert match.confidence == 0.75
    assert match.is_uncertain


@pytest.mark.parametrize("word", ["Stress", "Büro", "Morgen", "vor", "14", "ab"])
def test_context_words_never_match(lexicon, word):
    assert match_medication(word, lexicon) is None


def test_negation(lexicon):
    assert extract_medications("keine Ibuprofen genommen", lexicon) == ()


def test_first_mention_only(lexicon):
    meds = extract_medications("Ibuprofen und später nochmal Ibuprofen", lexicon)
    assert len(meds) == 1
    # the repeat is still consumed
    assert meds[0].span == (0, 4)


def test_claimed_tokens_are_skipped():
    assert extract_medications("maximale Kopfschmerzen", ["Maxalt 10 mg"], claimed=(0,)) == ()


def test_several_medications(lexicon):
    meds = extract_medications("Sumatriptan und Paracetamol genommen", lexicon)
    assert [m.name for m in meds] == ["Sumatriptan 50 mg", "Paracetamol 500 mg"]


@pytest.mark.parametrize("text, quarters, label", [
    ("halbe Ibuprofen", 2, "½ Tablette"),
    ("eine viertel Ibuprofen", 1, "¼ Tablette"),
    ("dreiviertel Ibuprofen", 3, "¾ Tablette"),
    ("anderthalb Tabletten Sumatriptan", 6, "1½ Tabletten"),
    ("zwei Tabletten Paracetamol", 8, "2 Tabletten"),
])
def test_dose(lexicon, text, quarters, label):
    m = extract_medications(text, lexicon)[0]
    assert m.dose_quarters == quarters
    assert m.dose_text == label


def test_empty_lexicon():
    assert extract_medications("Ibuprofen 400 genommen", []) == ()
    assert extract_medications("Ibuprofen 400 genommen", None) == ()


def test_spoken_strength_picks_entry():
    lex = build_lexicon(["Ibuprofen 400 mg", "Ibuprofen 600 mg"])
    match = extract_medications("Ibuprofen 600 mg genommen", lex)[0]
    assert match.name == "Ibuprofen 600 mg"
    assert not match.needs_review

    match = extract_medications("Ibuprofen genommen", lex)[0]
    assert match.name == "Ibuprofen 400 mg"
    assert match.needs_review


def test_build_lexicon_accepts_names_and_dicts():
    lex = build_lexicon([
        "Naproxen",
        {"name": "Aimovig", "id": "x-1"},
        {"name": ""},
        "a",
        None,
    ])
    assert [e.canonical for e in lex.entries] == ["Naproxen", "Aimovig"]
    assert lex.get("Aimovig").id == "x-1"
    assert lex.get("Topiramat") is None


@pytest.mark.parametrize("name, base, strength, mg", [
    ("Sumatriptan 50 mg", "Sumatriptan", "50 mg", 50.0),
    ("Ibuprofen 0,4 g", "Ibuprofen", "0,4 g", 400.0),
    ("Naproxen", "Naproxen", None, None),
])
def test_split_strength(name, base, strength, mg):
    assert split_strength(name) == (base, strength, mg)


def test_strength_mg():
    assert strength_mg("500", "mcg") == 0.5
    assert strength_mg("5", "ml") is None
    assert strength_mg("5", "tabletten") is None


def test_correct_transcript(lexicon):
    text, corrections = correct_transcript("Iboprofen genommen", lexicon)
    assert text == "Ibuprofen genommen"
    assert corrections == [
        {"original": "iboprofen", "corrected": "Ibuprofen", "confidence": 0.98},
    ]


def test_correct_transcript_keeps_punctuation(lexicon):
    text, _ = correct_transcript("Danach Suma triptan.", lexicon)
    assert text == "Danach Sumatriptan."


def test_correct_transcript_unchanged(lexicon):
    assert correct_transcript("Ibuprofen genommen", lexicon) == ("Ibuprofen genommen", [])
    assert correct_transcript("Stress im Büro", lexicon) == ("Stress im Büro", [])
