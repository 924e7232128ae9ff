"""Policy gate: decide how a planned command may be executed.

    auto_execute     run it right away
    confirm          show it and ask for a yes
    disambiguation   offer the competing readings
    slot_filling     ask for the missing parameters
    action_picker    show the list of things the user can do

The gate is a pure function of its inputs and always returns exactly one
decision. Destructive commands never auto-execute, and neither do
mutations dictated through the lower-trust fallback recognizer.
"""

from dataclasses import dataclass

from painlog.thresholds import THRESHOLDS

AUTO_EXECUTE = "auto_execute"
CONFIRM = "confirm"
DISAMBIGUATION = "disambiguation"
SLOT_FILLING = "slot_filling"
ACTION_PICKER = "action_picker"

# Input channels, most trusted first
SOURCES = ("typed", "stt", "dictation_fallback")
LOW_TRUST_SOURCES = {"dictation_fallback"}

NAVIGATION = "navigation"
ANALYTICS = "analytics"
MUTATION = "mutation"
UNKNOWN = "unknown"

MUTATION_INTENTS = {
    "create_pain_entry", "create_quick_entry", "quick_pain_entry",
    "create_medication_update", "create_medication_effect", "add_medication",
    "create_note", "create_reminder", "save_voice_note", "rate_intake",
    "edit_entry", "delete_entry", "delete_voice_note",
}

DESTRUCTIVE_INTENTS = {"delete_entry", "delete_voice_note"}


@dataclass(frozen=True)
class PolicyDecision:
    decision: str
    reason: str


def action_category(intent):
    """navigation, analytics, mutation or unknown."""
    if not intent:
        return UNKNOWN
    if intent.startswith("navigate_") or intent == "help":
        return NAVIGATION
    if intent == "analytics_query":
        return ANALYTICS
    if intent in MUTATION_INTENTS:
        return MUTATION
    return UNKNOWN


def is_destructive(intent):
    return intent in DESTRUCTIVE_INTENTS or bool(intent and intent.startswith("delete_"))


def _by_category(category, confidence, thresholds):
    if category == NAVIGATION:
        if confidence >= thresholds.nav_auto:
            return PolicyDecision(AUTO_EXECUTE, f"navigation at {confidence:.2f}")
        return PolicyDecision(CONFIRM, f"navigation below {thresholds.nav_auto:.2f}")
    if category == ANALYTICS:
        if confidence >= thresholds.analytics_auto:
            return PolicyDecision(AUTO_EXECUTE, f"read-only query at {confidence:.2f}")
        return PolicyDecision(CONFIRM, f"query below {thresholds.analytics_auto:.2f}")
    if confidence >= thresholds.mutation_auto:
        return PolicyDecision(AUTO_EXECUTE, f"mutation at {confidence:.2f}")
    if confidence >= thresholds.mutation_confirm:
        return PolicyDecision(CONFIRM, f"mutation below {thresholds.mutation_auto:.2f}")
    return PolicyDecision(ACTION_PICKER, f"mutation below {thresholds.mutation_confirm:.2f}")


def evaluate_policy(source, confidence, intent_type, score_gap=None,
                    missing_slots=None, ambiguous=False, thresholds=THRESHOLDS):
    """Map one planned command to a PolicyDecision.

    Args:
        source: "stt", "typed" or "dictation_fallback".
        confidence: Planner confidence for the best intent, 0-1.
        intent_type: The best intent, e.g. "navigate_diary", "delete_entry".
        score_gap: Confidence lead over the runner-up, None if unopposed.
        missing_slots: Required parameters the utterance did not supply.
        ambiguous: The utterance was a bare fragment such as a lone number.
    """
    try:
        confidence = float(confidence)
    except (TypeError, ValueError):
        confidence = 0.0
    category = action_category(intent_type)

    if ambiguous:
        return PolicyDecision(DISAMBIGUATION, "ambiguous fragment")
    if score_gap is not None and score_gap < thresholds.disambiguation_gap \
            and confidence < thresholds.mutation_auto:
        return PolicyDecision(DISAMBIGUATION,
                              f"runner-up within {score_gap:.2f} of best intent")
    if missing_slots:
        return PolicyDecision(SLOT_FILLING, "missing " + ", ".join(missing_slots))
    if category == UNKNOWN:
        return PolicyDecision(ACTION_PICKER, f"unknown intent {intent_type!r}")
    if confidence < thresholds.minimum:
        return PolicyDecision(ACTION_PICKER, f"confidence {confidence:.2f} below floor")

    decision = _by_category(category, confidence, thresholds)
    if decision.decision != AUTO_EXECUTE:
        return decision

    if is_destructive(intent_type):
        return PolicyDecision(CONFIRM, "destructive action needs confirmation")
    if source in LOW_TRUST_SOURCES and category == MUTATION:
        return PolicyDecision(CONFIRM, f"mutation from {source} needs confirmation")
    return decision


def evaluate_plan(plan, source="stt", thresholds=THRESHOLDS):
    """Apply evaluate_policy to a planner Plan."""
    if plan.kind == "not_supported":
        return PolicyDecision(ACTION_PICKER, "nothing recognized")
    return evaluate_policy(
        source,
        plan.confidence,
        plan.intent,
        score_gap=plan.gap,
        missing_slots=plan.missing,
        ambiguous=plan.ambiguous,
        thresholds=thresholds,
    )
