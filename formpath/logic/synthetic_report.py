"""SyntheticReport: a readable summary PDF built from schema + answers only.

Used when the coordinate overlay cannot run. Layout is a single pass over the
visible questions; page footers ("Page n of N" plus the disclaimer) are drawn
when the canvas is saved, once the page count is known.
"""

from __future__ import annotations

from io import BytesIO
from typing import List, Mapping, Optional
import logging
import textwrap

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from formpath.logic.visibility_rules import is_answer_blank, iter_visible
from formpath.models.question_kind import NO, YES, QuestionKind
from formpath.models.schema import DocumentSchema, Question

logger = logging.getLogger(__name__)

W, H = letter
MARGIN = 54
FOOTER_ZONE = 60
WRAP_CHARS = 88
LEADING = 13

NAVY = HexColor("#1B2A4A")
AMBER_PALE = HexColor("#FDF3DC")
AMBER = HexColor("#D4920B")
CHARCOAL = HexColor("#2D3748")
SLATE = HexColor("#64748B")
ROSE = HexColor("#BE185D")
WHITE = HexColor("#FFFFFF")

REQUIRED_BLANK = "Required - not answered"
OPTIONAL_BLANK = "Not answered"
DISCLAIMER = "IMPORTANT: This is a guided summary, not an official form. File the official USCIS form."
GENERATED_BY = "Generated by FormPath"


def format_answer(question: Question, value: Optional[str]) -> str:
    """Human-readable answer text for the summary and review listings."""
    if is_answer_blank(value):
        return REQUIRED_BLANK if question.required else OPTIONAL_BLANK
    kind = question.kind
    if kind is QuestionKind.YES_NO:
        return {YES: "Yes", NO: "No"}.get(str(value), str(value))
    if kind in (QuestionKind.TEXT, QuestionKind.TEXTAREA, QuestionKind.DATE, QuestionKind.SELECT):
        return str(value)
    raise TypeError(f"unhandled question kind: {kind!r}")


def wrap(text: str, width: int = WRAP_CHARS) -> List[str]:
    lines: List[str] = []
    for paragraph in str(text).splitlines() or [""]:
        lines.extend(textwrap.wrap(paragraph, width=width) or [""])
    return lines


class NumberedCanvas(canvas.Canvas):
    """Defers page emission so every footer can show the final page count."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states: List[dict] = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        self.saveState()
        self.setStrokeColor(SLATE)
        self.setLineWidth(0.4)
        self.line(MARGIN, FOOTER_ZONE - 14, W - MARGIN, FOOTER_ZONE - 14)
        self.setFont("Helvetica-Oblique", 7.5)
        self.setFillColor(SLATE)
        self.drawString(MARGIN, FOOTER_ZONE - 26, DISCLAIMER)
        self.drawString(MARGIN, FOOTER_ZONE - 36, GENERATED_BY)
        self.setFont("Helvetica", 8)
        self.drawRightString(W - MARGIN, FOOTER_ZONE - 36, f"Page {self._pageNumber} of {total}")
        self.restoreState()


class _ReportWriter:
    def __init__(self, schema: DocumentSchema, buffer: BytesIO):
        self.schema = schema
        # invariant output: no creation date, stable document id
        self.c = NumberedCanvas(buffer, pagesize=letter, invariant=1)
        self.c.setTitle(f"{schema.id} FormPath Summary")
        self.c.setAuthor("FormPath")
        self.c.setCreator("FormPath")
        self.y = H - MARGIN

    # -- page infrastructure -------------------------------------------------

    def header_band(self) -> None:
        c = self.c
        c.saveState()
        c.setFillColor(NAVY)
        c.rect(0, H - 96, W, 96, fill=1, stroke=0)
        c.setFillColor(WHITE)
        c.setFont("Helvetica-Bold", 20)
        c.drawString(MARGIN, H - 46, f"Form {self.schema.id}")
        c.setFont("Helvetica", 12)
        c.drawString(MARGIN, H - 66, self.schema.title)
        if self.schema.filing_fee:
            c.drawRightString(W - MARGIN, H - 66, f"Filing fee: {self.schema.filing_fee}")
        c.restoreState()
        self.y = H - 120

    def running_header(self) -> None:
        c = self.c
        c.saveState()
        c.setFillColor(NAVY)
        c.setFont("Helvetica-Bold", 9)
        c.drawString(MARGIN, H - 36, f"Form {self.schema.id} - {self.schema.title} (continued)")
        c.setStrokeColor(AMBER)
        c.setLineWidth(0.6)
        c.line(MARGIN, H - 42, W - MARGIN, H - 42)
        c.restoreState()
        self.y = H - 64

    def ensure_space(self, needed: float) -> None:
        if self.y - needed < FOOTER_ZONE:
            self.c.showPage()
            self.running_header()

    # -- blocks --------------------------------------------------------------

    def banner(self) -> None:
        lines = wrap(
            f"This is a summary of your answers for Form {self.schema.id}. Transfer them to the "
            "official USCIS form, review every entry, and sign it before filing.",
            width=WRAP_CHARS + 4,
        )
        height = 16 + LEADING * len(lines)
        c = self.c
        c.saveState()
        c.setFillColor(AMBER_PALE)
        c.setStrokeColor(AMBER)
        c.rect(MARGIN, self.y - height, W - 2 * MARGIN, height, fill=1, stroke=1)
        c.setFillColor(CHARCOAL)
        c.setFont("Helvetica", 9.5)
        ty = self.y - 14
        for line in lines:
            c.drawString(MARGIN + 10, ty, line)
            ty -= LEADING
        c.restoreState()
        self.y -= height + 18

    def section_title(self, title: str) -> None:
        self.ensure_space(40)
        c = self.c
        c.saveState()
        c.setFillColor(NAVY)
        c.setFont("Helvetica-Bold", 13)
        c.drawString(MARGIN, self.y, title)
        c.setStrokeColor(AMBER)
        c.setLineWidth(0.8)
        c.line(MARGIN, self.y - 5, W - MARGIN, self.y - 5)
        c.restoreState()
        self.y -= 22

    def question_block(self, question: Question, value: Optional[str]) -> None:
        label_lines = wrap(question.label)
        answer_lines = wrap(format_answer(question, value), width=WRAP_CHARS - 4)
        blank = is_answer_blank(value)
        for line in label_lines:
            self.ensure_space(LEADING)
            self.c.setFont("Helvetica-Bold", 9.5)
            self.c.setFillColor(CHARCOAL)
            self.c.drawString(MARGIN, self.y, line)
            self.y -= LEADING
        for line in answer_lines:
            self.ensure_space(LEADING)
            self.c.setFont("Helvetica-Oblique" if blank else "Helvetica", 10)
            self.c.setFillColor(ROSE if blank and question.required else (SLATE if blank else NAVY))
            self.c.drawString(MARGIN + 14, self.y, line)
            self.y -= LEADING
        self.y -= 6

    def next_steps(self) -> None:
        if not self.schema.next_steps:
            return
        self.section_title("Next steps")
        for n, step in enumerate(self.schema.next_steps, 1):
            lines = wrap(step, width=WRAP_CHARS - 4)
            for i, line in enumerate(lines):
                self.ensure_space(LEADING)
                self.c.setFont("Helvetica", 9.5)
                self.c.setFillColor(CHARCOAL)
                prefix = f"{n}." if i == 0 else ""
                self.c.drawString(MARGIN, self.y, prefix)
                self.c.drawString(MARGIN + 14, self.y, line)
                self.y -= LEADING
            self.y -= 3

    def finish(self) -> None:
        self.c.showPage()
        self.c.save()


def render_report(schema: DocumentSchema, answers: Mapping[str, str]) -> bytes:
    """Return a summary PDF listing every visible question and its answer."""
    buffer = BytesIO()
    writer = _ReportWriter(schema, buffer)
    writer.header_band()
    writer.banner()
    count = 0
    for _idx, section, visible in iter_visible(schema, answers):
        if not visible:
            continue
        writer.section_title(section.title)
        for question in visible:
            writer.question_block(question, answers.get(question.id))
            count += 1
    writer.next_steps()
    writer.finish()
    content = buffer.getvalue()
    logger.info("report_rendered doc_id=%s questions=%s bytes=%s", schema.id, count, len(content))
    return content


__all__ = [
    "REQUIRED_BLANK",
    "OPTIONAL_BLANK",
    "DISCLAIMER",
    "format_answer",
    "wrap",
    "NumberedCanvas",
    "render_report",
]
