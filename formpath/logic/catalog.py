"""Immutable document catalog: schemas and field maps shipped as JSON.

Each file under `formpath/catalog/` holds one document schema plus its
`field_map`. The registry is built once per process (`get_catalog`) and
validated eagerly so authoring defects surface as `SchemaError` at load time,
never in a live wizard flow.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Mapping
import json
import logging

from pydantic import ValidationError as PydanticValidationError

from formpath.errors import DocumentNotFoundError, SchemaError
from formpath.logic.question_graph import QuestionGraph, validate_schema
from formpath.models.field_map import FieldMap
from formpath.models.schema import DocumentSchema

logger = logging.getLogger(__name__)

CATALOG_DIR = Path(__file__).resolve().parent.parent / "catalog"


@dataclass(frozen=True)
class CatalogEntry:
    schema: DocumentSchema
    field_map: FieldMap

    @property
    def graph(self) -> QuestionGraph:
        return QuestionGraph(self.schema)


def validate_field_map(schema: DocumentSchema, field_map: FieldMap) -> None:
    """Every mapped answer key must name a question of the same document."""
    if field_map.document_id != schema.id:
        raise SchemaError(f"{schema.id}: field map belongs to {field_map.document_id!r}")
    known = {q.id for section in schema.sections for q in section.questions}
    unknown = sorted(set(field_map.entries) - known)
    if unknown:
        raise SchemaError(f"{schema.id}: field map references unknown questions {unknown}")


def parse_entry(data: dict, source: str = "<memory>") -> CatalogEntry:
    """Build and validate one catalog entry from its decoded JSON document."""
    if not isinstance(data, dict):
        raise SchemaError(f"{source}: catalog document must be a JSON object")
    body = dict(data)
    raw_map = body.pop("field_map", {})
    try:
        schema = DocumentSchema.model_validate(body)
        field_map = FieldMap(document_id=schema.id, entries=raw_map)
    except PydanticValidationError as e:
        raise SchemaError(f"{source}: {e}") from e
    validate_schema(schema)
    validate_field_map(schema, field_map)
    return CatalogEntry(schema=schema, field_map=field_map)


class Catalog:
    """Read-only registry keyed by document id, in file-name order."""

    def __init__(self, entries: Mapping[str, CatalogEntry]):
        self._entries = MappingProxyType(dict(entries))

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._entries

    def ids(self) -> List[str]:
        return list(self._entries)

    def get(self, document_id: str) -> CatalogEntry:
        try:
            return self._entries[document_id]
        except KeyError:
            raise DocumentNotFoundError(document_id) from None

    def get_schema(self, document_id: str) -> DocumentSchema:
        return self.get(document_id).schema

    def get_field_map(self, document_id: str) -> FieldMap:
        return self.get(document_id).field_map


def load_catalog(directory: Path = CATALOG_DIR) -> Catalog:
    entries: dict[str, CatalogEntry] = {}
    for path in sorted(directory.glob("*.json")):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SchemaError(f"{path.name}: unreadable catalog file: {e}") from e
        entry = parse_entry(data, source=path.name)
        if entry.schema.id in entries:
            raise SchemaError(f"{path.name}: duplicate document id {entry.schema.id!r}")
        entries[entry.schema.id] = entry
    if not entries:
        raise SchemaError(f"no catalog documents found in {directory}")
    logger.info("catalog_loaded documents=%s", ",".join(entries))
    return Catalog(entries)


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    return load_catalog()


__all__ = [
    "CATALOG_DIR",
    "CatalogEntry",
    "Catalog",
    "validate_field_map",
    "parse_entry",
    "load_catalog",
    "get_catalog",
]
