"""End-to-end tests for the utterance parser."""

from datetime import datetime

import pytest

from painlog.entry import CONTEXT_ENTRY, NEW_ENTRY, parse
from painlog.thresholds import Thresholds

from conftest import NOW


def test_full_entry(lexicon):
    r = parse("vor 10 Minuten Schmerzstärke 5, Ibuprofen 800 mg", lexicon, now=NOW)
    assert r.entry_type == NEW_ENTRY
    assert r.confidence == 0.95
    assert r.time.kind == "relative"
    assert r.time.relative_minutes == 10
    assert r.time.instant == datetime(2025, 3, 14, 15, 50)
    assert r.pain.value == 5
    assert [m.name for m in r.medications] == ["Ibuprofen 400 mg"]
    assert r.note == ""
    assert not r.needs_review
    assert not r.type_can_be_toggled


def test_misheard_scale_keyword(lexicon):
    r = parse("Seit 30 Minuten Migräne, Schmerzlautstärke 8 von 10, Ibuprofen 400.",
              lexicon, now=NOW)
    assert r.entry_type == NEW_ENTRY
    assert r.time.relative_minutes == 30
    assert r.pain.value == 8
    assert r.pain.confidence == 0.95
    assert [m.name for m in r.medications] == ["Ibuprofen 400 mg"]
    assert r.note == ""


def test_context_note(lexicon):
    text = "Trigger: wenig geschlafen und Stress im Büro."
    r = parse(text, lexicon, now=NOW)
    assert r.entry_type == CONTEXT_ENTRY
    assert r.confidence == 0.85
    assert r.pain.value is None
    assert r.medications == ()
    assert r.note == text
    assert r.raw_text == text
    assert not r.needs_review
    assert not r.type_can_be_toggled


def test_descriptor_with_symptom_note(lexicon):
    r = parse("starke Kopfschmerzen seit heute Morgen, Übelkeit", lexicon, now=NOW)
    assert r.entry_type == NEW_ENTRY
    assert r.pain.value == 7
    assert r.pain.estimated_from_descriptor
    assert r.time.clock == "07:00"
    assert r.time.confidence == "medium"
    assert r.note == "Übelkeit"
    assert r.needs_review


def test_medication_only(lexicon):
    r = parse("Sumatriptan genommen", lexicon, now=NOW)
    assert r.entry_type == NEW_ENTRY
    assert r.confidence == 0.775
    assert r.pain.value is None
    assert r.note == ""


def test_half_tablet(lexicon):
    r = parse("Ich habe eine halbe Ibuprofen genommen und Schmerzstärke 4", lexicon, now=NOW)
    assert r.pain.value == 4
    assert len(r.medications) == 1
    assert r.medications[0].dose_quarters == 2
    assert r.note == ""


def test_vocabulary_only_can_be_toggled(lexicon):
    r = parse("Kopfschmerzen", lexicon, now=NOW)
    assert r.entry_type == NEW_ENTRY
    assert r.confidence == 0.6
    assert r.type_can_be_toggled
    assert r.needs_review


def test_event_with_context_words_stays_event(lexicon):
    r = parse("Schmerzstärke 6 wegen Stress", lexicon, now=NOW)
    assert r.entry_type == NEW_ENTRY
    assert r.pain.value == 6
    assert r.type_can_be_toggled
    assert r.note == "wegen Stress"


@pytest.mark.parametrize("text, clock", [
    ("Schmerz 3 um halb 12 nachts", "23:30"),
    ("halb 3 nachmittags Kopfschmerzen Stärke 4", "14:30"),
])
def test_clock_phrase_leaves_no_note(lexicon, text, clock):
    r = parse(text, lexicon, now=NOW)
    assert r.time.clock == clock
    assert r.pain.value is not None
    assert r.note == ""


def test_pain_descriptor_is_not_a_medication():
    r = parse("maximale Kopfschmerzen", ["Maxalt 10 mg"], now=NOW)
    assert r.pain.value == 9
    assert r.medications == ()


def test_repeated_medication_leaves_no_note():
    r = parse("Schmerzstärke 5 Ibuprofen Ibuprofen", ["Ibuprofen 400 mg"], now=NOW)
    assert [m.name for m in r.medications] == ["Ibuprofen 400 mg"]
    assert r.note == ""


def test_custom_pain_thresholds(lexicon):
    r = parse("Schmerzstärke 5", lexicon, now=NOW, thresholds=Thresholds(pain_trigger=0.5))
    assert r.pain.value == 5
    assert r.pain.confidence == 0.5


@pytest.mark.parametrize("text", ["", " ", "a", "5", None])
def test_too_short(lexicon, text):
    r = parse(text, lexicon, now=NOW)
    assert r.entry_type == CONTEXT_ENTRY
    assert r.confidence == 0.0
    assert r.needs_review
    assert r.pain.value is None
    assert r.medications == ()


@pytest.mark.parametrize("text", [
    "!!! ??? ...",
    "ä" * 1000,
    "Schmerzstärke 99 von 100",
    "um 99:99 Uhr vor -5 Minuten",
    "\x00\n\t",
])
def test_never_raises(lexicon, text):
    r = parse(text, lexicon, now=NOW)
    assert r.entry_type in (NEW_ENTRY, CONTEXT_ENTRY)
    assert 0.0 <= r.confidence <= 1.0


def test_accepts_plain_medication_list():
    r = parse("Naproxen genommen", ["Naproxen 500 mg"], now=NOW)
    assert [m.name for m in r.medications] == ["Naproxen 500 mg"]


def test_idempotent(lexicon):
    text = "gestern Abend Migräne 7 von 10, halbe Sumatriptan"
    assert parse(text, lexicon, now=NOW) == parse(text, lexicon, now=NOW)
