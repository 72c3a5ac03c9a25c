"""Daily check-in models and plan-modifier vocabulary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_CONTEXT_TAGS = 3

# Scores are small integer scales: sleep quality 1-3, the others 1-5.
WORST_SLEEP_QUALITY = 1
HIGH_STRESS_THRESHOLD = 4
LOW_ENERGY_THRESHOLD = 2

# Substituted when a score is missing, so absence never triggers a rule.
MISSING_STRESS_DEFAULT = 0
MISSING_ENERGY_DEFAULT = 5

INJURY_TAG = "injury"

FOCUS_STRESS_SUPPORT = "stress_support"
FOCUS_RECOVERY = "recovery"
CONSTRAINT_AVOID_IMPACT = "avoid_impact"
MICRO_ACTION_BREATHWORK = "breathwork_5min"
LOW_ENERGY_TIME_BUDGET_MINUTES = -10

REASON_BASELINE = "Keeping today supportive and realistic."
REASON_HIGH_STRESS = "Pacing today with extra calm and support."
REASON_POOR_SLEEP = "Leaning into recovery and smaller wins today."
REASON_LOW_ENERGY = "Keeping today lighter to match your energy."


# ---------------------------------------------------------------------------
# Raw answers
# ---------------------------------------------------------------------------

# Accepted input keys -> attribute. Form-style camelCase, short question ids
# and the normalized names all map onto the same fields.
_RAW_KEY_ALIASES: dict[str, str] = {
    "moodScore": "mood_score",
    "mood": "mood_score",
    "mood_score": "mood_score",
    "sleepQualityScore": "sleep_quality_score",
    "sleep_quality": "sleep_quality_score",
    "sleep_quality_score": "sleep_quality_score",
    "sleepHours": "sleep_hours",
    "sleep_hours": "sleep_hours",
    "sleepHoursTouched": "sleep_hours_touched",
    "sleep_hours_touched": "sleep_hours_touched",
    "stressLevel": "stress_level",
    "stress": "stress_level",
    "stress_level": "stress_level",
    "energyLevel": "energy_level",
    "energy": "energy_level",
    "energy_level": "energy_level",
    "userNote": "user_note",
    "notes": "user_note",
    "user_note": "user_note",
    "contextTags": "context_tags",
    "context_tags": "context_tags",
}


@dataclass
class RawCheckinInput:
    """Answers as collected by a check-in form, before normalization."""

    mood_score: Any = None
    sleep_quality_score: Any = None
    sleep_hours: Any = None
    sleep_hours_touched: bool = False
    stress_level: Any = None
    energy_level: Any = None
    user_note: Any = None
    context_tags: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> RawCheckinInput:
        """Build from a form payload; unknown keys are ignored."""
        values: dict[str, Any] = {}
        for key, value in (data or {}).items():
            attr = _RAW_KEY_ALIASES.get(key)
            if attr is not None:
                values[attr] = value
        values["sleep_hours_touched"] = bool(values.get("sleep_hours_touched", False))
        return cls(**values)


# ---------------------------------------------------------------------------
# Normalized record
# ---------------------------------------------------------------------------

@dataclass
class NormalizedDailyCheckin:
    """Canonical shape of one day's check-in."""

    date: str
    mood_score: int | None = None
    sleep_quality_score: int | None = None
    sleep_hours: float | None = None
    stress_level: int | None = None
    energy_level: int | None = None
    context_tags: list[str] = field(default_factory=list)
    user_note: str | None = None
    skipped: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NormalizedDailyCheckin:
        """Rebuild from a stored row (extra columns like ``user_id`` are ignored)."""
        return cls(
            date=str(data.get("date") or ""),
            mood_score=data.get("mood_score"),
            sleep_quality_score=data.get("sleep_quality_score"),
            sleep_hours=data.get("sleep_hours"),
            stress_level=data.get("stress_level"),
            energy_level=data.get("energy_level"),
            context_tags=list(data.get("context_tags") or []),
            user_note=data.get("user_note"),
            skipped=bool(data.get("skipped", False)),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "mood_score": self.mood_score,
            "sleep_quality_score": self.sleep_quality_score,
            "sleep_hours": self.sleep_hours,
            "stress_level": self.stress_level,
            "energy_level": self.energy_level,
            "context_tags": list(self.context_tags),
            "user_note": self.user_note,
            "skipped": self.skipped,
        }


@dataclass
class PlanModifiers:
    """Same-day adjustments to the activity plan."""

    intensity_modifier: int = 0
    focus: str | None = None
    time_budget_modifier_minutes: int | None = None
    exercise_constraint: str | None = None
    add_micro_actions: list[str] = field(default_factory=list)
    reasoning_short: str = REASON_BASELINE

    def as_dict(self) -> dict[str, Any]:
        return {
            "intensity_modifier": self.intensity_modifier,
            "focus": self.focus,
            "time_budget_modifier_minutes": self.time_budget_modifier_minutes,
            "exercise_constraint": self.exercise_constraint,
            "add_micro_actions": list(self.add_micro_actions),
            "reasoning_short": self.reasoning_short,
        }
