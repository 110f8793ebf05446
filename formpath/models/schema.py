"""Pydantic models for document schemas (sections and questions).

Questions are a closed tagged variant discriminated on `type`; one model per
input kind. All models are frozen so catalog content cannot be mutated once
loaded.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from formpath.models.question_kind import QuestionKind


class Condition(BaseModel):
    """Show the owning question only when `field_id` was answered `expected_value`."""

    model_config = ConfigDict(frozen=True)

    field_id: str
    expected_value: str


class _QuestionBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    hint: str = ""
    required: bool = False
    condition: Optional[Condition] = None

    @field_validator("id")
    @classmethod
    def id_must_be_non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("question.id must be a non-empty string")
        return v

    @property
    def kind(self) -> QuestionKind:
        return QuestionKind(self.type)  # type: ignore[attr-defined]


class TextQuestion(_QuestionBase):
    type: Literal["text"] = "text"


class TextareaQuestion(_QuestionBase):
    type: Literal["textarea"] = "textarea"


class DateQuestion(_QuestionBase):
    type: Literal["date"] = "date"


class YesNoQuestion(_QuestionBase):
    type: Literal["yes_no"] = "yes_no"


class SelectQuestion(_QuestionBase):
    type: Literal["select"] = "select"
    options: tuple[str, ...]

    @field_validator("options")
    @classmethod
    def options_must_be_non_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("select questions need at least one option")
        return v


Question = Annotated[
    Union[TextQuestion, TextareaQuestion, DateQuestion, SelectQuestion, YesNoQuestion],
    Field(discriminator="type"),
]


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    questions: tuple[Question, ...]


class DocumentSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    short_title: str = ""
    category: str = ""
    description: str = ""
    filing_fee: str = ""
    next_steps: tuple[str, ...] = ()
    sections: tuple[Section, ...]


__all__ = [
    "Condition",
    "TextQuestion",
    "TextareaQuestion",
    "DateQuestion",
    "YesNoQuestion",
    "SelectQuestion",
    "Question",
    "Section",
    "DocumentSchema",
]
