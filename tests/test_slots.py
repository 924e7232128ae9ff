"""Tests for reminder times and the shared slot helpers."""

from datetime import datetime

import pytest

from painlog.commands.rate import extract_rating
from painlog.commands.reminder import parse_time
from painlog.commands.slots import extract_days, find_medication

from conftest import NOW


@pytest.mark.parametrize("text, expected", [
    ("um 14 uhr", datetime(2025, 3, 15, 14, 0)),
    ("um 8", datetime(2025, 3, 14, 20, 0)),
    ("um 8 uhr morgens", datetime(2025, 3, 15, 8, 0)),
    ("morgen früh", datetime(2025, 3, 15, 8, 0)),
    ("heute abend", datetime(2025, 3, 14, 20, 0)),
    ("übermorgen um 9", datetime(2025, 3, 16, 9, 0)),
    ("am montag um 10", datetime(2025, 3, 17, 10, 0)),
    ("in 3 tagen", datetime(2025, 3, 17, 9, 0)),
    ("in 20 minuten", datetime(2025, 3, 14, 16, 20)),
    ("in 2 stunden", datetime(2025, 3, 14, 18, 0)),
])
def test_parse_time(text, expected):
    when, phrases = parse_time(text, NOW)
    assert when == expected
    assert phrases


def test_parse_time_none():
    assert parse_time("an die prophylaxe", NOW) == (None, [])


@pytest.mark.parametrize("text, days", [
    ("letzte woche", 7),
    ("in den letzten 3 monaten", 90),
    ("letzten 14 tage", 14),
    ("14 tage zurück", 14),
    ("letztes jahr", 365),
    ("diesen monat", 30),
    ("ohne zeitraum", None),
])
def test_extract_days(text, days):
    assert extract_days(text) == days


@pytest.mark.parametrize("text, expected", [
    ("wie oft triptan", "triptan"),
    ("wann schmerzmittel genommen", "schmerzmittel"),
    ("wie oft eletriptan", "eletriptan"),
    ("wie oft ibuprofen", "ibuprofen"),
    ("wann xyztriptan", "xyztriptan"),
    ("wie viele migränetage", None),
])
def test_find_medication_without_lexicon(text, expected):
    assert find_medication(text, None) == expected


def test_find_medication_prefers_user_list(lexicon):
    assert find_medication("wie oft ibuprofen", lexicon) == "Ibuprofen 400 mg"
    assert find_medication("wie oft triptan", lexicon) == "triptan"


@pytest.mark.parametrize("text, rating", [
    ("hat gut geholfen", 7),
    ("hat sehr gut geholfen", 8),
    ("hat gar nicht gewirkt", 0),
    ("wirkung 6 von 10", 6),
    ("bewerte mit sieben", 7),
    ("hat geholfen", None),
])
def test_extract_rating(text, rating):
    assert extract_rating(text) == rating
