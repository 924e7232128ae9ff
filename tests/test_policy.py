"""Tests for the policy gate."""

import pytest

from painlog.commands.planner import Plan
from painlog.commands.policy import (
    ACTION_PICKER, AUTO_EXECUTE, CONFIRM, DISAMBIGUATION, SLOT_FILLING,
    action_category, evaluate_plan, evaluate_policy, is_destructive,
)
from painlog.thresholds import Thresholds


@pytest.mark.parametrize("intent, category", [
    ("navigate_diary", "navigation"),
    ("help", "navigation"),
    ("analytics_query", "analytics"),
    ("create_pain_entry", "mutation"),
    ("delete_entry", "mutation"),
    ("save_voice_note", "mutation"),
    ("fly_to_moon", "unknown"),
    (None, "unknown"),
])
def test_action_category(intent, category):
    assert action_category(intent) == category


@pytest.mark.parametrize("source, confidence, intent, expected", [
    ("stt", 0.90, "navigate_diary", AUTO_EXECUTE),
    ("stt", 0.70, "navigate_diary", CONFIRM),
    ("stt", 0.80, "analytics_query", AUTO_EXECUTE),
    ("stt", 0.70, "analytics_query", CONFIRM),
    ("stt", 0.95, "create_pain_entry", AUTO_EXECUTE),
    ("stt", 0.80, "create_pain_entry", CONFIRM),
    ("stt", 0.50, "create_pain_entry", ACTION_PICKER),
    ("typed", 0.95, "delete_entry", CONFIRM),
    ("stt", 0.99, "delete_voice_note", CONFIRM),
    ("dictation_fallback", 0.95, "create_pain_entry", CONFIRM),
    ("dictation_fallback", 0.90, "navigate_diary", AUTO_EXECUTE),
    ("stt", 0.95, "fly_to_moon", ACTION_PICKER),
    ("stt", 0.30, "navigate_diary", ACTION_PICKER),
])
def test_decisions(source, confidence, intent, expected):
    assert evaluate_policy(source, confidence, intent).decision == expected


def test_ambiguous_wins():
    d = evaluate_policy("stt", 0.99, "navigate_diary", ambiguous=True)
    assert d.decision == DISAMBIGUATION


def test_close_runner_up():
    assert evaluate_policy("stt", 0.80, "create_pain_entry", score_gap=0.05).decision == DISAMBIGUATION
    assert evaluate_policy("stt", 0.80, "create_pain_entry", score_gap=0.20).decision == CONFIRM
    # A confident best intent is not held up by a close runner-up
    assert evaluate_policy("stt", 0.95, "create_pain_entry", score_gap=0.05).decision == AUTO_EXECUTE


def test_missing_slots():
    d = evaluate_policy("stt", 0.92, "create_reminder", missing_slots=["time"])
    assert d.decision == SLOT_FILLING
    assert "time" in d.reason


def test_bad_confidence_is_zero():
    assert evaluate_policy("stt", "n/a", "navigate_diary").decision == ACTION_PICKER


def test_custom_thresholds():
    strict = Thresholds(nav_auto=0.95)
    assert evaluate_policy("stt", 0.90, "navigate_diary", thresholds=strict).decision == CONFIRM


def test_is_destructive():
    assert is_destructive("delete_entry")
    assert is_destructive("delete_everything")
    assert not is_destructive("create_note")
    assert not is_destructive(None)


def test_evaluate_plan():
    assert evaluate_plan(Plan(kind="not_supported")).decision == ACTION_PICKER
    p = Plan(kind="navigate", intent="navigate_diary", confidence=0.9)
    assert evaluate_plan(p, "typed").decision == AUTO_EXECUTE
