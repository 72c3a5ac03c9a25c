"""Data models for the daily check-in questionnaire definition."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wellcore.domains.checkin.domain_logic.checkin_models import MAX_CONTEXT_TAGS


@dataclass
class CheckinOption:
    """A selectable answer; chip answers carry a score, tag answers don't."""

    id: str
    score: int | None = None


@dataclass
class CheckinSubquestion:
    id: str
    type: str
    prompt_key: str
    enabled: bool = True
    required: bool = False
    min: float | None = None
    max: float | None = None
    step: float | None = None


@dataclass
class CheckinQuestion:
    """One question in the daily check-in flow."""

    id: str
    order: int
    type: str  # single_select | scale | free_text | multi_select
    prompt_key: str
    enabled: bool = True
    required: bool = False
    presentation: str | None = None
    options: list[CheckinOption] = field(default_factory=list)
    min: float | None = None
    max: float | None = None
    step: float | None = None
    max_chars: int | None = None
    max_selected: int | None = None
    subquestion: CheckinSubquestion | None = None


@dataclass
class CheckinSchema:
    """A versioned daily check-in questionnaire."""

    schema_version: str
    feature: str
    questions: list[CheckinQuestion]
    defaults: dict[str, Any] = field(default_factory=dict)
    ui: dict[str, Any] = field(default_factory=dict)

    def enabled_questions(self) -> list[CheckinQuestion]:
        """Enabled questions in presentation order."""
        return sorted((q for q in self.questions if q.enabled), key=lambda q: q.order)

    def question(self, question_id: str) -> CheckinQuestion | None:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None

    def has_scored_options(self, question_id: str) -> bool:
        q = self.question(question_id)
        return q is not None and any(o.score is not None for o in q.options)

    def option_score(self, question_id: str, option_id: str) -> int | None:
        """Score behind a chip answer, or None if the question/option is unknown."""
        q = self.question(question_id)
        if q is None:
            return None
        for option in q.options:
            if option.id == option_id:
                return option.score
        return None

    @property
    def max_context_tags(self) -> int:
        q = self.question("context_tags")
        if q is None or q.max_selected is None:
            return MAX_CONTEXT_TAGS
        return q.max_selected

    @property
    def max_note_chars(self) -> int | None:
        q = self.question("notes")
        if q is not None and q.max_chars is not None:
            return q.max_chars
        return self.ui.get("max_free_text_chars")
