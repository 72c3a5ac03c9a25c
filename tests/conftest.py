"""Shared test fixtures for wellcore tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "WELLCORE_LOG_LEVEL",
        "CHECKIN_SCHEMA_PATH",
        "IMMEDIATE_ITEM_TYPE",
        "DEFAULT_ITEM_TYPE",
    ):
        monkeypatch.delenv(name, raising=False)

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))


# ---------------------------------------------------------------------------
# Stored-record fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def recommendation_records() -> list[dict[str, Any]]:
    """Three stored recommendation rows, deliberately out of date order."""
    return [
        {
            "id": "rec-lis",
            "source_type": "lis_assessment",
            "source_assessment_id": "lis-42",
            "created_at": "2026-01-20T10:00:00Z",
            "protocol_data": {
                "immediate": [
                    {"name": "Morning sunlight", "description": "10 minutes outside", "category": "immediate"},
                    {"name": "HIIT intervals", "description": "Short sprints", "category": "immediate"},
                ],
                "foundation": [
                    {"name": "magnesium  glycinate", "description": "Later wording", "category": "foundation"},
                ],
            },
        },
        {
            "id": "rec-hormone",
            "source_type": "hormone_compass",
            "source_assessment_id": "hc-7",
            "created_at": "2026-01-05T09:00:00Z",
            "protocol_data": {
                "immediate": [
                    {"name": "Box breathing", "description": "Calm the nervous system", "category": "immediate"},
                ],
                "foundation": [
                    {
                        "name": "Magnesium Glycinate",
                        "description": "Supports sleep",
                        "category": "foundation",
                        "productKeywords": ["magnesium", "glycinate"],
                        "impact_weight": 0.8,
                    },
                ],
                "optimization": [
                    {"name": "Sleep restore stack", "description": "Evening wind-down", "category": "optimization"},
                ],
            },
        },
        {
            "id": "rec-symptom",
            "source_type": "symptom_assessment",
            "source_assessment_id": None,
            "created_at": "2026-01-12T12:00:00Z",
            "protocol_data": {
                "immediate": [
                    {"name": "morning sunlight", "description": "Dup", "category": "immediate"},
                ],
                "optimization": None,
            },
        },
    ]


# ---------------------------------------------------------------------------
# Check-in fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def checkin_schema():
    """The questionnaire bundled with the package."""
    from wellcore.domains.checkin.schema.loader import load_checkin_schema

    return load_checkin_schema()


@pytest.fixture
def rough_day_form() -> dict[str, Any]:
    """Form answers for a rough day, as the check-in flow submits them."""
    return {
        "mood": "flat",
        "sleep_quality": "poor",
        "sleep_hours": 4.5,
        "sleep_hours_touched": True,
        "stress": 5,
        "energy": 2,
        "notes": "   ",
        "context_tags": ["injury", "late_night"],
    }
