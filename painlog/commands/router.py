"""Command router: plans a voice command and gates it through the policy.

    dispatch(text, lexicon, source, now) -> (plan, decision)

Each request is appended to a small log file for later tuning of the
thresholds. The router never executes the planned action; the caller does
that according to the decision.
"""

import os
from datetime import datetime

from painlog.commands.planner import plan as make_plan
from painlog.commands.policy import evaluate_plan
from painlog.thresholds import THRESHOLDS

# Log file: lives next to the painlog package directory
_LOG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "painlog.log")


def _log_value(v):
    if isinstance(v, datetime):
        return v.strftime("%Y-%m-%d %H:%M")
    if hasattr(v, "clock") and hasattr(v, "date"):
        return f"{v.date.isoformat()} {v.clock}"
    return repr(v)


def _log_request(text, plan, decision, source="stt"):
    """Append a compact 2-line entry to the log file."""
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    if plan.intent is None:
        parse_line = f"  -> {plan.kind}, decision={decision.decision}"
    else:
        parts = [plan.intent, f"score={plan.confidence:.2f}", f"decision={decision.decision}"]
        for k, v in plan.args.items():
            parts.append(f"{k}={_log_value(v)}")
        if plan.missing:
            parts.append(f"missing={','.join(plan.missing)}")
        parse_line = f"  -> {', '.join(parts)}"
    try:
        with open(_LOG_PATH, "a", encoding="utf-8") as f:
            f.write(f"{ts} [{source}]  {text}\n{parse_line}\n")
    except OSError:
        pass


def dispatch(text, lexicon=None, source="stt", now=None, thresholds=THRESHOLDS):
    """Plan a command and decide how it may run.

    Args:
        text: Transcribed or typed user input.
        lexicon: The user's MedicationLexicon (or medication list).
        source: "stt", "typed" or "dictation_fallback".
        now: Reference time for relative expressions.

    Returns:
        (plan, decision): the Plan and its PolicyDecision.
    """
    p = make_plan(text, lexicon, now, thresholds)
    decision = evaluate_plan(p, source, thresholds)
    _log_request(text, p, decision, source)
    return p, decision
