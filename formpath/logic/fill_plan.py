"""Fill plan: which text and marks go where, computed without rasterizing.

Pure function of (FieldMap, AnswerSet, widget placements, settings). The
overlay renderer executes the plan; tests inspect it directly. Text width is
measured through an injected callable so this module stays free of any PDF
library.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Mapping, Sequence, Union
import logging

from formpath.logic.visibility_rules import is_answer_blank
from formpath.models.field_map import FieldMap, TargetField
from formpath.models.placement import Box, Placement
from formpath.models.question_kind import TargetKind

logger = logging.getLogger(__name__)

# (text, font_size) -> rendered width in points
Measure = Callable[[str, float], float]

# Share of the font size above the baseline used for vertical centring
_ASCENT = 0.35


def approximate_width(text: str, font_size: float) -> float:
    """Average-glyph estimate for Helvetica; good enough outside rendering."""
    return len(text) * font_size * 0.5


@dataclass(frozen=True)
class FillSettings:
    font_size_ratio: float = 0.7
    font_size_cap: float = 10.0
    text_inset: float = 2.0


@dataclass(frozen=True)
class TextInstruction:
    page_index: int
    field_key: str
    text: str
    font_size: float
    # baseline origin, top-left page coordinates
    x: float
    y: float


@dataclass(frozen=True)
class MarkInstruction:
    page_index: int
    field_key: str
    square: Box


Instruction = Union[TextInstruction, MarkInstruction]


def font_size_for(box: Box, settings: FillSettings) -> float:
    return min(box.height * settings.font_size_ratio, settings.font_size_cap)


def truncate_to_width(text: str, font_size: float, max_width: float, measure: Measure) -> str:
    """Longest prefix of `text` that fits `max_width`; never wraps."""
    if max_width <= 0:
        return ""
    if measure(text, font_size) <= max_width:
        return text
    lo, hi = 0, len(text)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if measure(text[:mid], font_size) <= max_width:
            lo = mid
        else:
            hi = mid - 1
    return text[:lo]


def centred_square(box: Box) -> Box:
    side = min(box.width, box.height) / 2
    cx = box.x0 + box.width / 2
    cy = box.y0 + box.height / 2
    half = side / 2
    return Box(x0=cx - half, y0=cy - half, x1=cx + half, y1=cy + half)


def _text_instruction(field_key: str, placement: Placement, value: str, settings: FillSettings, measure: Measure) -> TextInstruction:
    box = placement.box
    size = font_size_for(box, settings)
    text = truncate_to_width(value, size, box.width - 2 * settings.text_inset, measure)
    return TextInstruction(
        page_index=placement.page_index,
        field_key=field_key,
        text=text,
        font_size=size,
        x=box.x0 + settings.text_inset,
        y=box.y0 + box.height / 2 + size * _ASCENT,
    )


def _instructions_for(
    target: TargetField,
    value: str,
    placements: Sequence[Placement],
    settings: FillSettings,
    measure: Measure,
) -> List[Instruction]:
    kind = target.kind
    if kind is TargetKind.TEXT:
        return [_text_instruction(target.field_key, p, value, settings, measure) for p in placements]
    if kind is TargetKind.MARK:
        if value != target.match_value:
            return []
        return [
            MarkInstruction(page_index=p.page_index, field_key=target.field_key, square=centred_square(p.box))
            for p in placements
        ]
    raise TypeError(f"unhandled target kind: {kind!r}")


def build_fill_plan(
    field_map: FieldMap,
    answers: Mapping[str, str],
    placements: Mapping[str, Sequence[Placement]],
    settings: FillSettings | None = None,
    measure: Measure = approximate_width,
) -> List[Instruction]:
    """Resolve every non-blank answer's targets into draw instructions.

    Targets whose field key the reference does not carry are skipped
    silently; the order follows the FieldMap.
    """
    settings = settings or FillSettings()
    plan: List[Instruction] = []
    skipped = 0
    for answer_key, targets in field_map.entries.items():
        value = answers.get(answer_key)
        if is_answer_blank(value):
            continue
        for target in targets:
            found = placements.get(target.field_key)
            if not found:
                skipped += 1
                continue
            plan.extend(_instructions_for(target, str(value), found, settings, measure))
    logger.debug("fill_plan_built doc_id=%s instructions=%s skipped_targets=%s", field_map.document_id, len(plan), skipped)
    return plan


__all__ = [
    "Measure",
    "approximate_width",
    "FillSettings",
    "TextInstruction",
    "MarkInstruction",
    "Instruction",
    "font_size_for",
    "truncate_to_width",
    "centred_square",
    "build_fill_plan",
]
