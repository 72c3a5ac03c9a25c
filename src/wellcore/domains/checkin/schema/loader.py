"""Check-in schema loader: reads the questionnaire YAML from disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from wellcore.domains.checkin.schema.models import (
    CheckinOption,
    CheckinQuestion,
    CheckinSchema,
    CheckinSubquestion,
)

if TYPE_CHECKING:
    from wellcore.core.config.settings import Settings

logger = logging.getLogger(__name__)

# Bundled questionnaire, shipped next to this module.
BUNDLED_SCHEMA_PATH = Path(__file__).resolve().parent / "daily_checkin.v1.yaml"


class CheckinSchemaError(ValueError):
    """Raised when a check-in schema file can't be read or is malformed."""


def _option(raw: Any) -> CheckinOption:
    # Tag lists are plain strings; chip options are {id, score} mappings.
    if isinstance(raw, str):
        return CheckinOption(id=raw)
    return CheckinOption(id=str(raw["id"]), score=raw.get("score"))


def _subquestion(data: dict[str, Any] | None) -> CheckinSubquestion | None:
    if not data:
        return None
    response = data.get("response", {})
    return CheckinSubquestion(
        id=data["id"],
        type=data["type"],
        prompt_key=data.get("prompt_key", ""),
        enabled=data.get("enabled", True),
        required=data.get("required", False),
        min=response.get("min"),
        max=response.get("max"),
        step=response.get("step"),
    )


def _question(data: dict[str, Any]) -> CheckinQuestion:
    response = data.get("response", {})
    return CheckinQuestion(
        id=data["id"],
        order=int(data.get("order", 0)),
        type=data["type"],
        prompt_key=data.get("prompt_key", ""),
        enabled=data.get("enabled", True),
        required=data.get("required", False),
        presentation=response.get("presentation"),
        options=[_option(o) for o in response.get("options", [])],
        min=response.get("min"),
        max=response.get("max"),
        step=response.get("step"),
        max_chars=response.get("max_chars"),
        max_selected=response.get("max_selected"),
        subquestion=_subquestion(data.get("subquestion")),
    )


def parse_checkin_schema(data: dict[str, Any]) -> CheckinSchema:
    """Build a CheckinSchema from already-parsed YAML/JSON data."""
    try:
        return CheckinSchema(
            schema_version=str(data["schema_version"]),
            feature=data["feature"],
            questions=[_question(q) for q in data.get("questions", [])],
            defaults=data.get("defaults", {}),
            ui=data.get("ui", {}),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise CheckinSchemaError(f"Malformed check-in schema: {exc!r}") from exc


def load_checkin_schema(path: str | Path | None = None) -> CheckinSchema:
    """Parse a questionnaire YAML file (the bundled one when ``path`` is None)."""
    path = Path(path) if path else BUNDLED_SCHEMA_PATH
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise CheckinSchemaError(f"Could not read check-in schema {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise CheckinSchemaError(f"Check-in schema {path} is not a mapping")

    schema = parse_checkin_schema(data)
    logger.info(
        "Loaded check-in schema %s (v%s, %d questions)",
        schema.feature,
        schema.schema_version,
        len(schema.questions),
    )
    return schema


def load_checkin_schema_from_settings(settings: Settings) -> CheckinSchema:
    """Load the schema named by ``checkin_schema_path``, or the bundled one."""
    return load_checkin_schema(settings.checkin_schema_path or None)
