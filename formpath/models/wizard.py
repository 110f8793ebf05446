"""Pydantic models for wizard state and the wizard/documents response bodies."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class WizardState(str, Enum):
    AT_QUESTION = "at_question"
    AT_REVIEW = "at_review"
    EXITED = "exited"


class NavDirection(str, Enum):
    FORWARD = "forward"
    BACK = "back"


class WizardAction(str, Enum):
    NEXT = "next"
    PREV = "prev"
    CONTINUE = "continue"
    SKIP = "skip"


class WizardPosition(BaseModel):
    section_index: int = 0
    question_index: int = 0
    nav_direction: NavDirection = NavDirection.FORWARD


class QuestionView(BaseModel):
    id: str
    label: str
    hint: str = ""
    type: str
    required: bool
    input: Dict[str, Any]
    value: Optional[str] = None


class WizardView(BaseModel):
    document_id: str
    state: WizardState
    position: WizardPosition
    section_id: Optional[str] = None
    section_title: Optional[str] = None
    question: Optional[QuestionView] = None
    step: int
    total_steps: int
    readiness: int
    can_skip: bool = False
    is_last_question: bool = False


class ReviewItem(BaseModel):
    question_id: str
    label: str
    value: Optional[str] = None
    required: bool
    blank: bool
    section_index: int
    question_index: int


class ReviewSection(BaseModel):
    section_id: str
    title: str
    items: List[ReviewItem]


class ReviewView(BaseModel):
    document_id: str
    readiness: int
    missing_required: List[str]
    sections: List[ReviewSection]


class DocumentSummary(BaseModel):
    id: str
    title: str
    short_title: str = ""
    category: str = ""
    description: str = ""
    filing_fee: str = ""
    saved_readiness: Optional[int] = None


class AnswerBody(BaseModel):
    value: str


class JumpBody(BaseModel):
    section_index: int = Field(ge=0)
    question_index: int = Field(ge=0)


__all__ = [
    "WizardState",
    "NavDirection",
    "WizardAction",
    "WizardPosition",
    "QuestionView",
    "WizardView",
    "ReviewItem",
    "ReviewSection",
    "ReviewView",
    "DocumentSummary",
    "AnswerBody",
    "JumpBody",
]
