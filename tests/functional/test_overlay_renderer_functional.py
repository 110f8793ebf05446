"""Functional tests for the coordinate overlay renderer."""

from __future__ import annotations

import fitz
import pytest

from formpath.config import RenderConfig
from formpath.errors import ParseError
from formpath.logic.overlay_renderer import render_overlay

from conftest import build_plain_pdf


ANSWERS = {"q1": "yes", "q2": "Because it is right"}


def test_overlay_is_flattened_and_carries_answers(scenario_pdf, scenario_entry):
    content = render_overlay(scenario_pdf, scenario_entry.field_map, ANSWERS)

    with fitz.open(stream=content, filetype="pdf") as doc:
        assert doc.page_count == 1
        page = doc[0]
        assert (page.rect.width, page.rect.height) == (612, 792)
        assert list(page.widgets()) == []
        text = page.get_text()
        assert "Because it is right" in text
        # the reference page text is now part of the background image
        assert "Reference page 1" not in text


def test_only_the_matching_mark_is_filled(scenario_pdf, scenario_entry):
    content = render_overlay(scenario_pdf, scenario_entry.field_map, ANSWERS)

    with fitz.open(stream=content, filetype="pdf") as doc:
        filled = [d for d in doc[0].get_drawings() if d.get("fill") is not None]
    assert len(filled) == 1
    r = filled[0]["rect"]
    # Agree_Yes sits at (72, 100, 84, 112): a 6pt square centred on (78, 106)
    assert (r.x0, r.y0, r.x1, r.y1) == pytest.approx((75, 103, 81, 109), abs=0.5)


def test_identical_inputs_give_identical_bytes(scenario_pdf, scenario_entry):
    first = render_overlay(scenario_pdf, scenario_entry.field_map, ANSWERS)
    second = render_overlay(scenario_pdf, scenario_entry.field_map, ANSWERS)
    assert first == second


def test_render_settings_are_honoured(scenario_pdf, scenario_entry):
    small = render_overlay(scenario_pdf, scenario_entry.field_map, ANSWERS, RenderConfig(scale=0.5, jpeg_quality=20))
    large = render_overlay(scenario_pdf, scenario_entry.field_map, ANSWERS, RenderConfig(scale=2.0, jpeg_quality=95))
    assert len(small) < len(large)


def test_parse_failures_propagate_unchanged(scenario_entry):
    with pytest.raises(ParseError):
        render_overlay(build_plain_pdf(), scenario_entry.field_map, ANSWERS)
    with pytest.raises(ParseError):
        render_overlay(b"%PDF-garbage", scenario_entry.field_map, ANSWERS)
