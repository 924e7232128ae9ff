"""Confidence thresholds for parsing and the execution policy.

All tunable numbers live here so that policy behavior can be audited and
tested on its own. The medication and pain numbers were tuned by hand
against a small corpus of dictated diary entries; re-tune them against
fresh transcripts rather than treating them as fixed.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Thresholds:
    # --- Policy gate ---
    nav_auto: float = 0.75
    analytics_auto: float = 0.75
    mutation_auto: float = 0.90
    mutation_confirm: float = 0.65
    disambiguation_gap: float = 0.12
    minimum: float = 0.40

    # --- Medication matching ---
    similarity: float = 0.82
    similarity_with_context: float = 0.78
    ambiguity_delta: float = 0.08
    split_token_min: float = 0.85
    exact_confidence: float = 0.98
    prefix_confidence: float = 0.75
    correction_min: float = 0.80

    # --- Pain intensity tiers ---
    pain_scale: float = 0.95
    pain_trigger: float = 0.85
    pain_staerke: float = 0.80
    pain_context: float = 0.70
    pain_descriptor: float = 0.60
    pain_fallback: float = 0.55

    # Overall classification confidence below this flags the result for review
    review_below: float = 0.65


THRESHOLDS = Thresholds()
