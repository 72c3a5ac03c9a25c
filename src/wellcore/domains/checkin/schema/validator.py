"""Check-in schema validator: ensures questionnaire definitions are well-formed."""

from __future__ import annotations

import logging
from pathlib import Path

from wellcore.domains.checkin.schema.loader import CheckinSchemaError, load_checkin_schema
from wellcore.domains.checkin.schema.models import CheckinSchema

logger = logging.getLogger(__name__)

QUESTION_TYPES = {"single_select", "scale", "free_text", "multi_select"}

# Questions the normalizer and plan-modifier rules depend on.
SCORE_QUESTIONS = ["mood", "sleep_quality", "stress", "energy"]


def validate_checkin_schema(schema: CheckinSchema, *, label: str = "schema") -> list[str]:
    """Return a list of problems with ``schema`` (empty when it is valid)."""
    errors: list[str] = []

    if not schema.feature:
        errors.append(f"{label}: Missing or empty required field 'feature'")

    # Version format check (semver-ish).
    if not schema.schema_version or not all(
        c.isdigit() or c == "." for c in schema.schema_version
    ):
        errors.append(
            f"{label}: Version '{schema.schema_version}' doesn't look like a version number"
        )

    seen: set[str] = set()
    for q in schema.questions:
        where = f"{label}: Question '{q.id}'"
        if q.id in seen:
            errors.append(f"{where} is defined more than once")
        seen.add(q.id)

        if q.type not in QUESTION_TYPES:
            errors.append(f"{where} has unknown type '{q.type}'")
        if q.type == "single_select":
            if not q.options:
                errors.append(f"{where} has no options")
            elif any(o.score is None for o in q.options):
                errors.append(f"{where} has options without a score")
        if q.type == "scale":
            if q.min is None or q.max is None:
                errors.append(f"{where} is a scale without min/max")
            elif q.min >= q.max:
                errors.append(f"{where} has min >= max")
        if q.type == "multi_select" and q.max_selected is not None and q.max_selected < 1:
            errors.append(f"{where} allows fewer than one selection")

    for question_id in SCORE_QUESTIONS:
        if question_id not in seen:
            errors.append(f"{label}: Required question '{question_id}' is missing")

    return errors


def validate_checkin_schema_file(path: str | Path) -> tuple[CheckinSchema | None, list[str]]:
    """Validate a single questionnaire YAML file.

    Returns: (schema_or_none, errors)
    """
    path = Path(path)
    try:
        schema = load_checkin_schema(path)
    except CheckinSchemaError as exc:
        return None, [f"{path}: Failed to load: {exc}"]
    return schema, validate_checkin_schema(schema, label=str(path))


def validate_checkin_schemas(path: str | Path) -> int:
    """Validate a file and log each problem; returns the error count."""
    _, errors = validate_checkin_schema_file(path)
    for err in errors:
        logger.error("%s", err)
    return len(errors)
