"""Read-only accessor over a document's ordered sections and questions.

`QuestionGraph` wraps a frozen `DocumentSchema` and answers the questions the
wizard, review and export flows ask of it. Visibility always goes through
`formpath.logic.visibility_rules`.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from formpath.errors import SchemaError
from formpath.logic.visibility_rules import (
    current_step_number,
    is_condition_met,
    total_steps,
    visible_questions,
)
from formpath.models.question_kind import NO, YES, QuestionKind
from formpath.models.schema import DocumentSchema, Question, SelectQuestion, Section


def validate_schema(schema: DocumentSchema) -> None:
    """Fail fast on authoring defects.

    - Question ids must be unique within the document.
    - Every `condition.field_id` must name a question appearing strictly
      earlier in traversal order (no forward or self references).
    """
    if not schema.sections:
        raise SchemaError(f"{schema.id}: document has no sections")
    seen: set[str] = set()
    for section in schema.sections:
        for question in section.questions:
            if question.id in seen:
                raise SchemaError(f"{schema.id}: duplicate question id {question.id!r}")
            cond = question.condition
            if cond is not None and cond.field_id not in seen:
                raise SchemaError(
                    f"{schema.id}: question {question.id!r} depends on {cond.field_id!r} "
                    "which does not appear earlier in the document"
                )
            seen.add(question.id)


def describe_input(question: Question) -> Dict[str, Any]:
    """Return the answer-input descriptor a client needs to render a question."""
    kind = question.kind
    if kind is QuestionKind.YES_NO:
        return {"widget": "choice", "choices": [YES, NO]}
    if kind is QuestionKind.SELECT:
        if not isinstance(question, SelectQuestion):
            raise TypeError(f"question {question.id!r} is typed select but carries no options")
        return {"widget": "select", "choices": list(question.options)}
    if kind is QuestionKind.TEXTAREA:
        return {"widget": "textarea", "rows": 4}
    if kind is QuestionKind.DATE:
        return {"widget": "date"}
    if kind is QuestionKind.TEXT:
        return {"widget": "text"}
    raise TypeError(f"unhandled question kind: {kind!r}")


class QuestionGraph:
    def __init__(self, schema: DocumentSchema):
        self._schema = schema
        self._by_id: Dict[str, Question] = {
            q.id: q for section in schema.sections for q in section.questions
        }

    @property
    def schema(self) -> DocumentSchema:
        return self._schema

    @property
    def document_id(self) -> str:
        return self._schema.id

    @property
    def section_count(self) -> int:
        return len(self._schema.sections)

    def section(self, index: int) -> Section:
        return self._schema.sections[index]

    def question(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def visible(self, section_index: int, answers: Mapping[str, str]) -> list[Question]:
        """Visible questions of one section; empty for an index past either end."""
        if not 0 <= section_index < len(self._schema.sections):
            return []
        return visible_questions(self._schema.sections[section_index], answers)

    def is_visible(self, question_id: str, answers: Mapping[str, str]) -> bool:
        q = self._by_id.get(question_id)
        return q is not None and is_condition_met(q.condition, answers)

    def total_steps(self, answers: Mapping[str, str]) -> int:
        return total_steps(self._schema, answers)

    def step_number(self, section_index: int, question_index: int, answers: Mapping[str, str]) -> int:
        return current_step_number(self._schema, section_index, question_index, answers)


__all__ = ["QuestionGraph", "validate_schema", "describe_input"]
