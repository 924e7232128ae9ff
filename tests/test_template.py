"""Tests for command templates."""

import pytest

from painlog.commands.template import TemplatePattern, match_any


@pytest.mark.parametrize("template, text, expected", [
    ("[füge|füg] medikament $name hinzu", "füge medikament Ibuprofen 400 hinzu",
     {"name": "Ibuprofen 400"}),
    ("[füge|füg] medikament $name hinzu", "FÜG Medikament Aspirin HINZU?", {"name": "Aspirin"}),
    ("[füge|füg] medikament $name hinzu", "füge das medikament Naproxen hinzu", None),
    ("öffne tagebuch", "öffne   tagebuch", {}),
    ("hilfe", "hilfe bitte", None),
])
def test_match(template, text, expected):
    assert TemplatePattern(template).match(text) == expected


def test_greedy_field_runs_to_end():
    p = TemplatePattern("[notiz|neue notiz] $text", greedy=True)
    assert p.match("neue notiz stress bei der arbeit") == {"text": "stress bei der arbeit"}


def test_match_any_returns_first_tag():
    patterns = [
        (TemplatePattern("[merke|merk] dir $text", greedy=True), "remember"),
        (TemplatePattern("[notiere|notier] $text", greedy=True), "note"),
    ]
    assert match_any(patterns, "notiere wetterumschwung") == ("note", {"text": "wetterumschwung"})
    assert match_any(patterns, "öffne tagebuch") is None
