"""Reference PDF parsing: page geometry and widget placements.

Field names in government forms are hierarchical
(`form1[0].#subform[0].Part1_FamilyName[0]`); the lookup key is the terminal
component with its `[n]` index suffix stripped, so every widget sharing that
key (comb fields, repeated headers) receives the same overlay.
"""

from __future__ import annotations

from typing import Dict, List
import logging
import re

import fitz

from formpath.errors import ParseError
from formpath.models.placement import Box, Placement, ReferenceLayout

logger = logging.getLogger(__name__)

_INDEX_SUFFIX = re.compile(r"\[\d+\]$")


def terminal_key(field_name: str) -> str:
    """`a[0].b[0].Part1_FamilyName[0]` -> `Part1_FamilyName`."""
    last = (field_name or "").split(".")[-1]
    return _INDEX_SUFFIX.sub("", last).strip()


def open_reference(data: bytes) -> fitz.Document:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise ParseError(f"reference is not a readable PDF: {e}") from e
    if doc.page_count == 0:
        doc.close()
        raise ParseError("reference has no pages")
    return doc


def read_layout(doc: fitz.Document) -> ReferenceLayout:
    """Collect page sizes and widget placements from an open reference.

    A reference without any form widgets (an XFA-only form) cannot be
    overlaid and is reported as a ParseError.
    """
    sizes: List[tuple[float, float]] = []
    found: Dict[str, List[Placement]] = {}
    widget_count = 0
    for page_index in range(doc.page_count):
        page = doc[page_index]
        sizes.append((float(page.rect.width), float(page.rect.height)))
        for widget in page.widgets():
            key = terminal_key(getattr(widget, "field_name", "") or "")
            if not key:
                continue
            r = widget.rect
            box = Box(x0=float(r.x0), y0=float(r.y0), x1=float(r.x1), y1=float(r.y1))
            found.setdefault(key, []).append(Placement(page_index=page_index, box=box))
            widget_count += 1
    if widget_count == 0:
        raise ParseError("reference has no form widgets")
    logger.info("reference_parsed pages=%s widgets=%s keys=%s", len(sizes), widget_count, len(found))
    return ReferenceLayout(
        page_sizes=tuple(sizes),
        placements={k: tuple(v) for k, v in found.items()},
    )


def parse_reference(data: bytes) -> ReferenceLayout:
    doc = open_reference(data)
    try:
        return read_layout(doc)
    finally:
        doc.close()


__all__ = ["terminal_key", "open_reference", "read_layout", "parse_reference"]
