"""Wizard state machine over the (section, question) cursor.

States are AT_QUESTION, AT_REVIEW (terminal) and EXITED (signal back to
document selection). Visibility is recomputed lazily inside each navigation
transition only; answer edits never move the cursor, even when they hide
questions further along the path.

Every answer edit is persisted synchronously through the PersistenceStore
helpers, which swallow storage faults.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping, Optional
import logging

from formpath.errors import RequiredFieldError
from formpath.logic.answer_store import AnswerStore, load_answers, save_answers
from formpath.logic.events import ANSWER_SAVED, WIZARD_COMPLETED, publish
from formpath.logic.question_graph import QuestionGraph, describe_input
from formpath.logic.readiness import compute_readiness, missing_required
from formpath.logic.visibility_rules import is_answer_blank
from formpath.models.schema import Question
from formpath.models.wizard import (
    NavDirection,
    QuestionView,
    ReviewItem,
    ReviewSection,
    ReviewView,
    WizardPosition,
    WizardState,
    WizardView,
)

logger = logging.getLogger(__name__)


class WizardController:
    def __init__(self, graph: QuestionGraph, store: AnswerStore, answers: Optional[Mapping[str, str]] = None):
        self._graph = graph
        self._store = store
        self._answers: Dict[str, str] = dict(answers or {})
        self._position = WizardPosition()
        self._state = WizardState.AT_QUESTION

    @classmethod
    def start(cls, graph: QuestionGraph, store: AnswerStore) -> "WizardController":
        """Select a document: load its saved AnswerSet (or start empty) at (0, 0)."""
        answers = load_answers(store, graph.document_id)
        logger.info("wizard_start doc_id=%s resumed_answers=%s", graph.document_id, len(answers))
        return cls(graph, store, answers)

    # -- read side ---------------------------------------------------------

    @property
    def graph(self) -> QuestionGraph:
        return self._graph

    @property
    def answers(self) -> Mapping[str, str]:
        return MappingProxyType(self._answers)

    @property
    def position(self) -> WizardPosition:
        return self._position.model_copy()

    @property
    def state(self) -> WizardState:
        return self._state

    def current_question(self) -> Optional[Question]:
        if self._state is not WizardState.AT_QUESTION:
            return None
        visible = self._graph.visible(self._position.section_index, self._answers)
        idx = self._position.question_index
        if 0 <= idx < len(visible):
            return visible[idx]
        return None

    def total_steps(self) -> int:
        return self._graph.total_steps(self._answers)

    def step_number(self) -> int:
        return self._graph.step_number(self._position.section_index, self._position.question_index, self._answers)

    def readiness(self) -> int:
        return compute_readiness(self._graph.schema, self._answers)

    def can_skip(self) -> bool:
        question = self.current_question()
        return question is not None and not question.required

    def is_last_question(self) -> bool:
        if self._state is not WizardState.AT_QUESTION:
            return False
        visible = self._graph.visible(self._position.section_index, self._answers)
        if self._position.question_index + 1 < len(visible):
            return False
        return self._find_section(self._position.section_index + 1, step=1) is None

    # -- transitions -------------------------------------------------------

    def set_answer(self, question_id: str, value: str) -> None:
        """SET_ANSWER: write and persist; the cursor does not move."""
        self._answers[question_id] = str(value)
        save_answers(self._store, self._graph.document_id, self._answers)
        publish(ANSWER_SAVED, {"document_id": self._graph.document_id, "question_id": question_id})

    def next(self) -> WizardState:
        if self._state is not WizardState.AT_QUESTION:
            return self._state
        sec = self._position.section_index
        visible = self._graph.visible(sec, self._answers)
        if self._position.question_index + 1 < len(visible):
            self._move(sec, self._position.question_index + 1, NavDirection.FORWARD)
            return self._state
        nxt = self._find_section(sec + 1, step=1)
        if nxt is not None:
            self._move(nxt, 0, NavDirection.FORWARD)
            return self._state
        self._state = WizardState.AT_REVIEW
        logger.info("wizard_at_review doc_id=%s readiness=%s", self._graph.document_id, self.readiness())
        publish(WIZARD_COMPLETED, {"document_id": self._graph.document_id})
        return self._state

    def prev(self) -> WizardState:
        if self._state is not WizardState.AT_QUESTION:
            return self._state
        if self._position.question_index > 0:
            self._move(self._position.section_index, self._position.question_index - 1, NavDirection.BACK)
            return self._state
        prv = self._find_section(self._position.section_index - 1, step=-1)
        if prv is not None:
            last_idx = len(self._graph.visible(prv, self._answers)) - 1
            self._move(prv, last_idx, NavDirection.BACK)
            return self._state
        self._state = WizardState.EXITED
        logger.info("wizard_exit doc_id=%s", self._graph.document_id)
        return self._state

    def continue_(self) -> WizardState:
        """User-gated forward action; blocks on a blank required answer."""
        question = self.current_question()
        if question is not None and question.required and is_answer_blank(self._answers.get(question.id)):
            logger.info("wizard_continue_blocked doc_id=%s question_id=%s", self._graph.document_id, question.id)
            raise RequiredFieldError(question.id)
        return self.next()

    def skip(self) -> WizardState:
        """Offered by callers only for optional questions; otherwise NEXT."""
        return self.next()

    def jump(self, section_index: int, question_index: int) -> WizardState:
        """Set the cursor directly; callers derive indices from visible questions."""
        self._state = WizardState.AT_QUESTION
        self._move(section_index, question_index, NavDirection.FORWARD)
        return self._state

    # -- views -------------------------------------------------------------

    def view(self) -> WizardView:
        question = self.current_question()
        question_view = None
        if question is not None:
            question_view = QuestionView(
                id=question.id,
                label=question.label,
                hint=question.hint,
                type=question.kind.value,
                required=question.required,
                input=describe_input(question),
                value=self._answers.get(question.id),
            )
        section_id = section_title = None
        if 0 <= self._position.section_index < self._graph.section_count:
            section = self._graph.section(self._position.section_index)
            section_id, section_title = section.id, section.title
        return WizardView(
            document_id=self._graph.document_id,
            state=self._state,
            position=self.position,
            section_id=section_id,
            section_title=section_title,
            question=question_view,
            step=self.step_number(),
            total_steps=self.total_steps(),
            readiness=self.readiness(),
            can_skip=self.can_skip(),
            is_last_question=self.is_last_question(),
        )

    def review(self) -> ReviewView:
        """Every visible question per section, with its jump coordinates."""
        sections = []
        for s_idx in range(self._graph.section_count):
            visible = self._graph.visible(s_idx, self._answers)
            if not visible:
                continue
            section = self._graph.section(s_idx)
            items = [
                ReviewItem(
                    question_id=q.id,
                    label=q.label,
                    value=self._answers.get(q.id),
                    required=q.required,
                    blank=is_answer_blank(self._answers.get(q.id)),
                    section_index=s_idx,
                    question_index=q_idx,
                )
                for q_idx, q in enumerate(visible)
            ]
            sections.append(ReviewSection(section_id=section.id, title=section.title, items=items))
        return ReviewView(
            document_id=self._graph.document_id,
            readiness=self.readiness(),
            missing_required=missing_required(self._graph.schema, self._answers),
            sections=sections,
        )

    # -- internals ---------------------------------------------------------

    def _move(self, section_index: int, question_index: int, direction: NavDirection) -> None:
        self._position = WizardPosition(
            section_index=section_index,
            question_index=question_index,
            nav_direction=direction,
        )

    def _find_section(self, start: int, step: int) -> Optional[int]:
        """First section from `start` (walking by `step`) with any visible question."""
        idx = start
        while 0 <= idx < self._graph.section_count:
            if self._graph.visible(idx, self._answers):
                return idx
            idx += step
        return None


__all__ = ["WizardController"]
