"""Tests for the noise guard."""

import pytest

from painlog.commands.noise import check


@pytest.mark.parametrize("text", ["", "a", "äh", "ähm hm", "okay", "ja und", "test", "danke!"])
def test_noise(text):
    assert check(text).is_noise


@pytest.mark.parametrize("text, number", [("5", 5), ("0", 0), ("10", 10), ("7.", 7)])
def test_bare_number_is_ambiguous(text, number):
    r = check(text)
    assert not r.is_noise
    assert r.ambiguous_number == number
    assert r.question == f"Meinst du Schmerzstärke {number}?"


@pytest.mark.parametrize("text", ["öffne tagebuch", "11", "schmerzstärke 5", "ok tagebuch"])
def test_not_noise(text):
    r = check(text)
    assert not r.is_noise
    assert r.ambiguous_number is None
