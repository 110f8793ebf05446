"""QuestionKind enumeration for the closed set of answer input types.

Every consumer that branches on a question's kind (input descriptors, report
formatting, overlay kinds) dispatches on these members rather than on raw
strings.
"""

from __future__ import annotations

from enum import Enum


class QuestionKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    DATE = "date"
    SELECT = "select"
    YES_NO = "yes_no"


class TargetKind(str, Enum):
    """How an answer is drawn onto a mapped field: as text or as a mark."""

    TEXT = "text"
    MARK = "mark"


YES = "yes"
NO = "no"


__all__ = ["QuestionKind", "TargetKind", "YES", "NO"]
