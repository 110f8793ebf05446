"""Behave environment hooks for FormPath integration scenarios.

Boots the FastAPI app in-process behind `fastapi.testclient.TestClient` with a
small scenario catalog, an in-memory answer store and a temporary reference
directory. Each scenario starts from empty wizard, store and event state.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from typing import Any

os.environ.setdefault("FORMPATH_DATABASE_URL", "sqlite+pysqlite:///:memory:")

from fastapi.testclient import TestClient

from formpath.config import AppConfig, ReferenceConfig, RenderConfig, StoreConfig
from formpath.logic.answer_store import InMemoryAnswerStore
from formpath.logic.catalog import Catalog, parse_entry
from formpath.logic.events import get_buffered_events
from formpath.logic.inmemory_state import WIZARDS
from formpath.main import create_app
from formpath.routes.deps import get_answer_store, get_app_config, get_document_catalog


GATED_DOCUMENT = {
    "id": "T-1",
    "title": "Gated Form",
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


def before_all(context: Any) -> None:
    context.reference_dir = tempfile.mkdtemp(prefix="formpath-refs-")
    context.api_prefix = os.getenv("TEST_API_PREFIX", "/api/v1")
    context.store = InMemoryAnswerStore()
    entry = parse_entry(dict(GATED_DOCUMENT), source="gated")
    catalog = Catalog({entry.schema.id: entry})
    config = AppConfig(
        store=StoreConfig(dsn=os.environ["FORMPATH_DATABASE_URL"]),
        reference=ReferenceConfig(base_url=context.reference_dir),
        render=RenderConfig(),
    )
    app = create_app()
    app.dependency_overrides[get_document_catalog] = lambda: catalog
    app.dependency_overrides[get_answer_store] = lambda: context.store
    app.dependency_overrides[get_app_config] = lambda: config
    context.client = TestClient(app)


def before_scenario(context: Any, scenario: Any) -> None:
    WIZARDS.clear()
    get_buffered_events(clear=True)
    context.store.clear("T-1")
    for name in os.listdir(context.reference_dir):
        os.remove(os.path.join(context.reference_dir, name))
    context.response = None


def after_all(context: Any) -> None:
    context.client.close()
    shutil.rmtree(context.reference_dir, ignore_errors=True)
