"""Tests for the pain intensity extractor."""

import pytest

from painlog.entry import extract_pain
from painlog.entry.pain import is_pain_trigger


@pytest.mark.parametrize("text, value, confidence", [
    ("Schmerzlautstärke 8 von 10", 8, 0.95),
    ("7/10", 7, 0.95),
    ("Schmerzstärke 5", 5, 0.85),
    ("Schmerzstärke sieben", 7, 0.85),
    ("schnellstärke 4", 4, 0.85),
    ("Stärke 3", 3, 0.85),
    ("Kopfschmerzen bei 5", 5, 0.85),
    ("Schmerzstärke 5, Ibuprofen 800 mg", 5, 0.85),
])
def test_explicit_value(text, value, confidence):
    p = extract_pain(text)
    assert p.value == value
    assert p.confidence == confidence
    assert not p.needs_review
    assert not p.estimated_from_descriptor


def test_bei_auf_needs_pain_context():
    p = extract_pain("Migräne auf 8")
    assert p.value == 8
    assert p.confidence == 0.70
    assert p.needs_review
    assert extract_pain("Termin auf 8").value is None


@pytest.mark.parametrize("text, value", [
    ("starke Kopfschmerzen", 7),
    ("sehr starke Kopfschmerzen", 9),
    ("leichte Migräne", 3),
    ("mittelstarke Kopfschmerzen", 5),
    ("keine Kopfschmerzen", 0),
])
def test_descriptor(text, value):
    p = extract_pain(text)
    assert p.value == value
    assert p.confidence == 0.60
    assert p.needs_review
    assert p.estimated_from_descriptor


def test_fallback_number_near_pain_word():
    p = extract_pain("Migräne, 6")
    assert p.value == 6
    assert p.confidence == 0.55
    assert p.needs_review


@pytest.mark.parametrize("text", [
    "wenig geschlafen und Stress",
    "Ibuprofen 400 mg genommen",
    "vor 10 Minuten Kopfschmerzen",
    "Kopfschmerzen seit 2 Stunden",
    "2 Tabletten Ibuprofen wegen Kopfschmerzen",
    "starker Stress",
    "",
])
def test_no_value(text):
    p = extract_pain(text)
    assert p.value is None
    assert p.confidence == 0.0
    assert p.span == ()


def test_span():
    assert extract_pain("Schmerzstärke 5").span == (0, 1)


@pytest.mark.parametrize("word, expected", [
    ("Schmerzstärke", True),
    ("schmerzlaut", True),
    ("Schnellstärke", True),
    ("Intensität", True),
    ("Stärke", True),
    ("Schmerzstaerke", True),
    ("Tablette", False),
    ("Stress", False),
    ("", False),
])
def test_is_pain_trigger(word, expected):
    assert is_pain_trigger(word) == expected
