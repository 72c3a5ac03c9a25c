"""Raw daily check-in answers -> NormalizedDailyCheckin.

Every function here tolerates missing or malformed answers: they degrade to
``None`` (unanswered) or an empty list, never to an exception. Unanswered
scores stay ``None`` rather than ``0`` so a real low score and a skipped
question remain distinguishable downstream.
"""

from __future__ import annotations

import math
from datetime import date as date_type
from datetime import datetime
from typing import TYPE_CHECKING, Any

from wellcore.domains.checkin.domain_logic.checkin_models import (
    MAX_CONTEXT_TAGS,
    NormalizedDailyCheckin,
    RawCheckinInput,
)

if TYPE_CHECKING:
    from wellcore.domains.checkin.schema.models import CheckinSchema


def _score(value: Any) -> int | None:
    """Coerce a score answer to int, or None when it can't be one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def _hours(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _tags(value: Any, limit: int) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        tags = [value]
    elif isinstance(value, (list, tuple)):
        tags = list(value)
    else:
        return []
    return tags[: max(limit, 0)]


def _note(value: Any, limit: int | None) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if limit is not None:
        trimmed = trimmed[: max(limit, 0)].rstrip()
    return trimmed or None


def format_checkin_date(value: date_type | datetime | str) -> str:
    """``yyyy-MM-dd`` for a date/datetime (local time); strings pass through."""
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.strftime("%Y-%m-%d")
    if isinstance(value, date_type):
        return value.strftime("%Y-%m-%d")
    return str(value)


def _as_raw(raw: RawCheckinInput | dict[str, Any] | None) -> RawCheckinInput:
    if isinstance(raw, RawCheckinInput):
        return raw
    if isinstance(raw, dict):
        return RawCheckinInput.from_dict(raw)
    return RawCheckinInput()


def normalize_checkin(
    raw: RawCheckinInput | dict[str, Any] | None,
    date: date_type | datetime | str,
    *,
    max_context_tags: int = MAX_CONTEXT_TAGS,
    max_note_chars: int | None = None,
) -> NormalizedDailyCheckin:
    """Normalize one day's raw answers.

    ``sleep_hours`` is only kept when the form reports the user actually
    touched that control; an untouched slider default is not an answer.
    ``user_note`` is cut to ``max_note_chars`` when a limit is given.
    """
    answers = _as_raw(raw)
    return NormalizedDailyCheckin(
        date=format_checkin_date(date),
        mood_score=_score(answers.mood_score),
        sleep_quality_score=_score(answers.sleep_quality_score),
        sleep_hours=_hours(answers.sleep_hours) if answers.sleep_hours_touched else None,
        stress_level=_score(answers.stress_level),
        energy_level=_score(answers.energy_level),
        context_tags=_tags(answers.context_tags, max_context_tags),
        user_note=_note(answers.user_note, max_note_chars),
    )


def skipped_checkin(date: date_type | datetime | str) -> NormalizedDailyCheckin:
    """The record kept when the user skips today's check-in."""
    return NormalizedDailyCheckin(date=format_checkin_date(date), skipped=True)


def is_submittable(raw: RawCheckinInput | dict[str, Any] | None) -> bool:
    """True when mood, sleep quality, stress and energy are all answered."""
    answers = _as_raw(raw)
    return all(
        _score(value)
        for value in (
            answers.mood_score,
            answers.sleep_quality_score,
            answers.stress_level,
            answers.energy_level,
        )
    )


def answers_from_form(form: dict[str, Any] | None, schema: CheckinSchema) -> RawCheckinInput:
    """Resolve chip option ids (``"mood": "rough"``) into scores.

    Numeric answers pass through unchanged; unknown option ids become None.
    """
    resolved: dict[str, Any] = {}
    for key, value in (form or {}).items():
        if isinstance(value, str) and schema.has_scored_options(key):
            resolved[key] = schema.option_score(key, value)
        else:
            resolved[key] = value
    return RawCheckinInput.from_dict(resolved)
