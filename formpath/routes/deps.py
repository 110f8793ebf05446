"""FastAPI dependencies shared by the routers.

Each provider is process-wide and cached; tests replace them through
`app.dependency_overrides`.
"""

from __future__ import annotations

from functools import lru_cache

from formpath.config import AppConfig, load_config
from formpath.db.base import get_engine
from formpath.logic.answer_store import AnswerStore, SqlAnswerStore
from formpath.logic.catalog import Catalog, get_catalog


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    return load_config()


@lru_cache(maxsize=1)
def get_answer_store() -> AnswerStore:
    return SqlAnswerStore(get_engine(get_app_config().store.dsn))


def get_document_catalog() -> Catalog:
    return get_catalog()


__all__ = ["get_app_config", "get_answer_store", "get_document_catalog"]
