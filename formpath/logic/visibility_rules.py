"""Visibility rule evaluation helpers for conditional questions.

Centralizes the equality-based visibility check so step counting, navigation,
review and readiness all derive visibility from one place and never drift.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional
import logging

from formpath.models.schema import Condition, DocumentSchema, Question, Section

logger = logging.getLogger(__name__)


def is_condition_met(condition: Optional[Condition], answers: Mapping[str, str]) -> bool:
    """Return True if a question guarded by `condition` should be shown.

    Visibility is an exact, case-sensitive string match between the parent's
    current answer and the expected value. Missing conditions always hold; a
    missing parent answer never matches.
    """
    if condition is None:
        return True
    parent_value = answers.get(condition.field_id)
    if parent_value is None:
        return False
    return parent_value == condition.expected_value


def visible_questions(section: Section, answers: Mapping[str, str]) -> list[Question]:
    """Return the section's questions currently applicable given `answers`, in order."""
    return [q for q in section.questions if is_condition_met(q.condition, answers)]


def iter_visible(schema: DocumentSchema, answers: Mapping[str, str]) -> Iterable[tuple[int, Section, list[Question]]]:
    """Yield (section_index, section, visible questions) for every section."""
    for idx, section in enumerate(schema.sections):
        yield idx, section, visible_questions(section, answers)


def total_steps(schema: DocumentSchema, answers: Mapping[str, str]) -> int:
    """Number of visible questions across the whole document."""
    return sum(len(visible) for _idx, _section, visible in iter_visible(schema, answers))


def current_step_number(
    schema: DocumentSchema,
    section_index: int,
    question_index: int,
    answers: Mapping[str, str],
) -> int:
    """1-based step number of the (section, question) cursor."""
    preceding = 0
    for idx, _section, visible in iter_visible(schema, answers):
        if idx >= section_index:
            break
        preceding += len(visible)
    return preceding + question_index + 1


def is_answer_blank(value: Optional[str]) -> bool:
    """True when an answer is absent or only whitespace."""
    return value is None or str(value).strip() == ""


__all__ = [
    "is_condition_met",
    "visible_questions",
    "iter_visible",
    "total_steps",
    "current_step_number",
    "is_answer_blank",
]
