"""Functional test bootstrap for the FormPath service.

Points the answer store at an in-memory SQLite database before any
`formpath` import, resets process-wide state between tests, and provides
small schemas plus a generator for reference PDFs carrying real form widgets.
"""

from __future__ import annotations

import os

os.environ.setdefault("FORMPATH_DATABASE_URL", "sqlite+pysqlite:///:memory:")

from pathlib import Path
from typing import Dict, Iterable, Tuple

import fitz
import pytest
from fastapi.testclient import TestClient

from formpath.config import AppConfig, ReferenceConfig, RenderConfig, StoreConfig
from formpath.logic.answer_store import InMemoryAnswerStore
from formpath.logic.catalog import Catalog, parse_entry
from formpath.logic.events import get_buffered_events
from formpath.logic.inmemory_state import WIZARDS
from formpath.logic.question_graph import QuestionGraph
from formpath.logic.wizard_controller import WizardController
from formpath.models.schema import DocumentSchema


SCENARIO_A = {
    "id": "T-1",
    "title": "Scenario Form",
    "short_title": "Scenario",
    "filing_fee": "$0",
    "next_steps": ["Mail it."],
    "sections": [
        {
            "id": "only",
            "title": "Only Section",
            "questions": [
                {"id": "q1", "label": "Do you agree?", "type": "yes_no", "required": True},
                {
                    "id": "q2",
                    "label": "Why do you agree?",
                    "type": "text",
                    "required": True,
                    "condition": {"field_id": "q1", "expected_value": "yes"},
                },
            ],
        }
    ],
    "field_map": {
        "q1": [
            {"field_key": "Agree_Yes", "kind": "mark", "match_value": "yes"},
            {"field_key": "Agree_No", "kind": "mark", "match_value": "no"},
        ],
        "q2": [{"field_key": "Reason", "kind": "text"}],
    },
}

THREE_SECTIONS = {
    "id": "T-3",
    "title": "Three Sections",
    "sections": [
        {
            "id": "first",
            "title": "First",
            "questions": [
                {"id": "name", "label": "Name?", "type": "text", "required": True},
                {"id": "married", "label": "Married?", "type": "yes_no", "required": True},
            ],
        },
        {
            "id": "spouse",
            "title": "Spouse",
            "questions": [
                {
                    "id": "spouse_name",
                    "label": "Spouse name?",
                    "type": "text",
                    "required": True,
                    "condition": {"field_id": "married", "expected_value": "yes"},
                },
            ],
        },
        {
            "id": "last",
            "title": "Last",
            "questions": [
                {"id": "email", "label": "Email?", "type": "text", "required": False},
                {"id": "color", "label": "Color?", "type": "select", "required": True, "options": ["Red", "Blue"]},
            ],
        },
    ],
    "field_map": {
        "name": [{"field_key": "Name", "kind": "text"}],
        "spouse_name": [{"field_key": "SpouseName", "kind": "text"}],
    },
}


@pytest.fixture(autouse=True)
def reset_process_state():
    WIZARDS.clear()
    get_buffered_events(clear=True)
    yield
    WIZARDS.clear()
    get_buffered_events(clear=True)


@pytest.fixture
def scenario_entry():
    return parse_entry(dict(SCENARIO_A), source="scenario_a")


@pytest.fixture
def scenario_schema(scenario_entry) -> DocumentSchema:
    return scenario_entry.schema


@pytest.fixture
def three_entry():
    return parse_entry(dict(THREE_SECTIONS), source="three_sections")


@pytest.fixture
def store() -> InMemoryAnswerStore:
    return InMemoryAnswerStore()


@pytest.fixture
def make_wizard(store):
    def _make(entry, answers=None) -> WizardController:
        return WizardController(QuestionGraph(entry.schema), store, answers)

    return _make


def build_widget_pdf(
    widgets: Iterable[Tuple[str, Tuple[float, float, float, float], str]],
    pages: int = 1,
    page_size: Tuple[float, float] = (612, 792),
) -> bytes:
    """Return a PDF whose widgets are (full field name, rect, 'text'|'checkbox').

    Rects are placed on page 0 unless the name ends with `@<page>`.
    """
    doc = fitz.open()
    for n in range(pages):
        page = doc.new_page(width=page_size[0], height=page_size[1])
        page.insert_text((72, 60), f"Reference page {n + 1}", fontsize=12)
    for name, rect, kind in widgets:
        page_index = 0
        if "@" in name:
            name, _, idx = name.rpartition("@")
            page_index = int(idx)
        w = fitz.Widget()
        w.field_name = name
        w.rect = fitz.Rect(*rect)
        w.field_type = fitz.PDF_WIDGET_TYPE_CHECKBOX if kind == "checkbox" else fitz.PDF_WIDGET_TYPE_TEXT
        doc[page_index].add_widget(w)
    data = doc.tobytes()
    doc.close()
    return data


def build_plain_pdf(pages: int = 1) -> bytes:
    doc = fitz.open()
    for n in range(pages):
        doc.new_page(width=612, height=792).insert_text((72, 72), f"Flat page {n + 1}", fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


SCENARIO_WIDGETS = [
    ("form1[0].#subform[0].Agree_Yes[0]", (72, 100, 84, 112), "checkbox"),
    ("form1[0].#subform[0].Agree_No[0]", (120, 100, 132, 112), "checkbox"),
    ("form1[0].#subform[0].Reason[0]", (72, 140, 372, 160), "text"),
]


@pytest.fixture
def scenario_pdf() -> bytes:
    return build_widget_pdf(SCENARIO_WIDGETS)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        store=StoreConfig(dsn="sqlite+pysqlite:///:memory:"),
        reference=ReferenceConfig(base_url=str(tmp_path)),
        render=RenderConfig(),
    )


@pytest.fixture
def client(tmp_path: Path, scenario_entry, three_entry, store, app_config, scenario_pdf):
    """TestClient over the real app with a small catalog and in-memory store."""
    from formpath.main import create_app
    from formpath.routes.deps import get_answer_store, get_app_config, get_document_catalog

    (tmp_path / "T-1.pdf").write_bytes(scenario_pdf)
    catalog = Catalog({e.schema.id: e for e in (scenario_entry, three_entry)})
    app = create_app()
    app.dependency_overrides[get_document_catalog] = lambda: catalog
    app.dependency_overrides[get_answer_store] = lambda: store
    app.dependency_overrides[get_app_config] = lambda: app_config
    with TestClient(app) as c:
        yield c


def answers(**kwargs: str) -> Dict[str, str]:
    return dict(kwargs)
