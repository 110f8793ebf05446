"""PersistenceStore contract and adapters for AnswerSet snapshots.

Adapters raise `PersistenceError` on storage faults. Flow code never calls
them directly: it goes through `save_answers` / `load_answers` /
`clear_answers`, which log and swallow those faults so storage trouble never
interrupts the wizard.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Protocol
import json
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from formpath.db.base import get_engine, session_scope
from formpath.errors import PersistenceError
from formpath.models.answer_snapshot import AnswerSnapshot, Base

logger = logging.getLogger(__name__)

KEY_PREFIX = "formpath_"


def storage_key(document_id: str) -> str:
    """One namespaced key per document id."""
    return f"{KEY_PREFIX}{document_id}"


def _serialize(answers: Mapping[str, str]) -> str:
    return json.dumps(dict(answers), sort_keys=True, ensure_ascii=False)


def _deserialize(payload: str) -> Dict[str, str]:
    data = json.loads(payload)
    if not isinstance(data, dict):
        raise ValueError("answer snapshot must be a JSON object")
    return {str(k): str(v) for k, v in data.items() if v is not None}


class AnswerStore(Protocol):
    def save(self, document_id: str, answers: Mapping[str, str]) -> None: ...

    def load(self, document_id: str) -> Optional[Dict[str, str]]: ...

    def clear(self, document_id: str) -> None: ...


class InMemoryAnswerStore:
    """Process-local store holding serialized snapshots keyed like the SQL store."""

    def __init__(self) -> None:
        self._rows: Dict[str, str] = {}

    def save(self, document_id: str, answers: Mapping[str, str]) -> None:
        self._rows[storage_key(document_id)] = _serialize(answers)

    def load(self, document_id: str) -> Optional[Dict[str, str]]:
        payload = self._rows.get(storage_key(document_id))
        if payload is None:
            return None
        try:
            return _deserialize(payload)
        except ValueError as e:
            raise PersistenceError(f"corrupt snapshot for {document_id}: {e}") from e

    def clear(self, document_id: str) -> None:
        self._rows.pop(storage_key(document_id), None)


class SqlAnswerStore:
    """SQLAlchemy-backed store; last write wins per storage key.

    The table is created on first successful contact with the database, so an
    unreachable store can still be constructed and fails per call instead.
    """

    def __init__(self, engine: Engine | None = None):
        self._engine = engine or get_engine()
        self._schema_ready = False
        try:
            self._ensure_schema()
        except SQLAlchemyError:
            logger.error("answer_store_schema_failed url=%s", self._engine.url, exc_info=True)

    def _ensure_schema(self) -> None:
        if not self._schema_ready:
            Base.metadata.create_all(self._engine)
            self._schema_ready = True

    def save(self, document_id: str, answers: Mapping[str, str]) -> None:
        key = storage_key(document_id)
        try:
            self._ensure_schema()
            with session_scope(self._engine) as session:
                session.merge(AnswerSnapshot(storage_key=key, payload=_serialize(answers)))
        except SQLAlchemyError as e:
            raise PersistenceError(f"save failed for {key}") from e

    def load(self, document_id: str) -> Optional[Dict[str, str]]:
        key = storage_key(document_id)
        try:
            self._ensure_schema()
            with session_scope(self._engine) as session:
                row = session.get(AnswerSnapshot, key)
                payload = row.payload if row is not None else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"load failed for {key}") from e
        if payload is None:
            return None
        try:
            return _deserialize(payload)
        except ValueError as e:
            raise PersistenceError(f"corrupt snapshot for {key}: {e}") from e

    def clear(self, document_id: str) -> None:
        key = storage_key(document_id)
        try:
            self._ensure_schema()
            with session_scope(self._engine) as session:
                row = session.get(AnswerSnapshot, key)
                if row is not None:
                    session.delete(row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"clear failed for {key}") from e


def save_answers(store: AnswerStore, document_id: str, answers: Mapping[str, str]) -> None:
    try:
        store.save(document_id, answers)
    except PersistenceError:
        logger.error("persistence_save_failed doc_id=%s", document_id, exc_info=True)


def load_answers(store: AnswerStore, document_id: str) -> Dict[str, str]:
    """Return the saved AnswerSet, or an empty one when absent or unreadable."""
    try:
        loaded = store.load(document_id)
    except PersistenceError:
        logger.error("persistence_load_failed doc_id=%s", document_id, exc_info=True)
        return {}
    return dict(loaded or {})


def clear_answers(store: AnswerStore, document_id: str) -> None:
    try:
        store.clear(document_id)
    except PersistenceError:
        logger.error("persistence_clear_failed doc_id=%s", document_id, exc_info=True)


__all__ = [
    "KEY_PREFIX",
    "storage_key",
    "AnswerStore",
    "InMemoryAnswerStore",
    "SqlAnswerStore",
    "save_answers",
    "load_answers",
    "clear_answers",
]
