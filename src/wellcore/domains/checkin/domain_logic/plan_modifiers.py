"""Deterministic plan-modifier rules: NormalizedDailyCheckin -> PlanModifiers.

Rules run in a fixed order. Adjustments accumulate across rules; only
``reasoning_short`` is overwritten, giving the message priority
poor sleep > high stress > low energy > baseline. The injury tag sets the
exercise constraint on its own, regardless of the other rules.
"""

from __future__ import annotations

from typing import Any

from wellcore.domains.checkin.domain_logic.checkin_models import (
    CONSTRAINT_AVOID_IMPACT,
    FOCUS_RECOVERY,
    FOCUS_STRESS_SUPPORT,
    HIGH_STRESS_THRESHOLD,
    INJURY_TAG,
    LOW_ENERGY_THRESHOLD,
    LOW_ENERGY_TIME_BUDGET_MINUTES,
    MICRO_ACTION_BREATHWORK,
    MISSING_ENERGY_DEFAULT,
    MISSING_STRESS_DEFAULT,
    REASON_HIGH_STRESS,
    REASON_LOW_ENERGY,
    REASON_POOR_SLEEP,
    WORST_SLEEP_QUALITY,
    NormalizedDailyCheckin,
    PlanModifiers,
)


def _get(checkin: NormalizedDailyCheckin | dict[str, Any], name: str) -> Any:
    if isinstance(checkin, dict):
        return checkin.get(name)
    return getattr(checkin, name, None)


def _num(val: Any, default: float) -> float:
    """Safely convert to float, returning default for None or non-numeric."""
    if val is None or isinstance(val, bool):
        return default
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def derive_plan_modifiers(checkin: NormalizedDailyCheckin | dict[str, Any]) -> PlanModifiers:
    """Map a normalized check-in to today's plan adjustments."""
    modifiers = PlanModifiers()

    poor_sleep = _get(checkin, "sleep_quality_score") == WORST_SLEEP_QUALITY
    high_stress = _num(_get(checkin, "stress_level"), MISSING_STRESS_DEFAULT) >= HIGH_STRESS_THRESHOLD
    low_energy = _num(_get(checkin, "energy_level"), MISSING_ENERGY_DEFAULT) <= LOW_ENERGY_THRESHOLD

    if poor_sleep or high_stress or low_energy:
        modifiers.intensity_modifier = -1

    if high_stress:
        modifiers.focus = FOCUS_STRESS_SUPPORT
        modifiers.add_micro_actions = [MICRO_ACTION_BREATHWORK]
        modifiers.reasoning_short = REASON_HIGH_STRESS

    # Overrides the stress focus and message; keeps the breathwork action.
    if poor_sleep:
        modifiers.focus = FOCUS_RECOVERY
        modifiers.reasoning_short = REASON_POOR_SLEEP

    if low_energy:
        modifiers.time_budget_modifier_minutes = LOW_ENERGY_TIME_BUDGET_MINUTES
        if not poor_sleep and not high_stress:
            modifiers.reasoning_short = REASON_LOW_ENERGY

    tags = _get(checkin, "context_tags")
    if isinstance(tags, (list, tuple)) and INJURY_TAG in tags:
        modifiers.exercise_constraint = CONSTRAINT_AVOID_IMPACT

    return modifiers
