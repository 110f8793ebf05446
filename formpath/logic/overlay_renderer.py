"""CoordinateOverlay: rasterize the reference and draw answers on top.

Each reference page becomes a JPEG background on a fresh page of the same
native size; the fill plan is then executed as plain text and filled squares.
The output is a flattened visual document without form fields.

Output is byte-identical for identical inputs: metadata is fixed, no dates are
written and the trailer carries no fresh /ID.
"""

from __future__ import annotations

from typing import Mapping
import logging

import fitz

from formpath.config import RenderConfig
from formpath.errors import RenderError
from formpath.logic.fill_plan import (
    FillSettings,
    Instruction,
    MarkInstruction,
    TextInstruction,
    build_fill_plan,
)
from formpath.logic.pdf_fields import open_reference, read_layout
from formpath.models.field_map import FieldMap

logger = logging.getLogger(__name__)

FONT_NAME = "helv"
INK = (0.08, 0.12, 0.42)


def helv_width(text: str, font_size: float) -> float:
    return fitz.get_text_length(text, fontname=FONT_NAME, fontsize=font_size)


def _fixed_metadata(document_id: str) -> dict:
    return {
        "title": f"{document_id} (FormPath)",
        "author": "",
        "subject": "",
        "keywords": "",
        "creator": "FormPath",
        "producer": "FormPath",
        "creationDate": "",
        "modDate": "",
    }


def _draw(page: fitz.Page, instruction: Instruction) -> None:
    if isinstance(instruction, TextInstruction):
        if instruction.text:
            page.insert_text(
                fitz.Point(instruction.x, instruction.y),
                instruction.text,
                fontname=FONT_NAME,
                fontsize=instruction.font_size,
                color=INK,
            )
        return
    if isinstance(instruction, MarkInstruction):
        sq = instruction.square
        page.draw_rect(fitz.Rect(sq.x0, sq.y0, sq.x1, sq.y1), color=INK, fill=INK, width=0)
        return
    raise TypeError(f"unhandled instruction: {instruction!r}")


def render_overlay(
    reference: bytes,
    field_map: FieldMap,
    answers: Mapping[str, str],
    render: RenderConfig | None = None,
) -> bytes:
    """Return the filled PDF or raise ParseError / RenderError.

    Blocking; callers on the event loop run it in a worker thread.
    """
    render = render or RenderConfig()
    src = open_reference(reference)
    try:
        layout = read_layout(src)
        settings = FillSettings(
            font_size_ratio=render.font_size_ratio,
            font_size_cap=render.font_size_cap,
            text_inset=render.text_inset,
        )
        plan = build_fill_plan(field_map, answers, layout.placements, settings, measure=helv_width)
        out = fitz.open()
        try:
            matrix = fitz.Matrix(render.scale, render.scale)
            for page_index in range(src.page_count):
                pix = src[page_index].get_pixmap(matrix=matrix, alpha=False)
                image = pix.tobytes("jpeg", jpg_quality=render.jpeg_quality)
                width, height = layout.page_sizes[page_index]
                page = out.new_page(width=width, height=height)
                page.insert_image(
                    fitz.Rect(0, 0, pix.width / render.scale, pix.height / render.scale),
                    stream=image,
                )
            for instruction in plan:
                _draw(out[instruction.page_index], instruction)
            out.set_metadata(_fixed_metadata(field_map.document_id))
            content = out.tobytes(garbage=3, deflate=True, no_new_id=True)
        finally:
            out.close()
    except (RuntimeError, ValueError, IndexError) as e:
        logger.warning("overlay_render_failed doc_id=%s error=%s", field_map.document_id, e)
        raise RenderError(f"overlay rendering failed for {field_map.document_id}: {e}") from e
    finally:
        src.close()
    logger.info(
        "overlay_rendered doc_id=%s pages=%s instructions=%s bytes=%s",
        field_map.document_id,
        layout.page_count,
        len(plan),
        len(content),
    )
    return content


__all__ = ["FONT_NAME", "INK", "helv_width", "render_overlay"]
