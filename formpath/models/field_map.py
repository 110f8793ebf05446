"""FieldMap models: answer key -> ordered target fields on the reference PDF."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from formpath.models.question_kind import TargetKind


class TargetField(BaseModel):
    model_config = ConfigDict(frozen=True)

    field_key: str
    kind: TargetKind = TargetKind.TEXT
    match_value: Optional[str] = None

    @model_validator(mode="after")
    def match_value_iff_mark(self) -> "TargetField":
        if self.kind is TargetKind.MARK and self.match_value is None:
            raise ValueError(f"mark target {self.field_key!r} requires match_value")
        if self.kind is TargetKind.TEXT and self.match_value is not None:
            raise ValueError(f"text target {self.field_key!r} must not set match_value")
        return self


class FieldMap(BaseModel):
    """Static per-document mapping, versioned independently of the reference PDF."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    entries: dict[str, tuple[TargetField, ...]]

    def targets_for(self, answer_key: str) -> tuple[TargetField, ...]:
        return self.entries.get(answer_key, ())


__all__ = ["TargetField", "FieldMap"]
