"""Document catalog endpoints.

Implements:
- GET /documents
  - Lists catalog documents with saved readiness for those with stored progress
- GET /documents/{document_id}
  - Returns the full schema (sections, questions, conditions)
"""

from __future__ import annotations

from typing import List
import logging

from fastapi import APIRouter, Depends

from formpath.logic.answer_store import AnswerStore, load_answers
from formpath.logic.catalog import Catalog
from formpath.logic.readiness import compute_readiness
from formpath.models.wizard import DocumentSummary
from formpath.routes.deps import get_answer_store, get_document_catalog

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/documents",
    summary="List documents in the catalog",
    operation_id="listDocuments",
    response_model=List[DocumentSummary],
    tags=["Documents"],
)
def list_documents(
    catalog: Catalog = Depends(get_document_catalog),
    store: AnswerStore = Depends(get_answer_store),
):
    items: List[DocumentSummary] = []
    for entry in catalog:
        schema = entry.schema
        saved = load_answers(store, schema.id)
        items.append(
            DocumentSummary(
                id=schema.id,
                title=schema.title,
                short_title=schema.short_title,
                category=schema.category,
                description=schema.description,
                filing_fee=schema.filing_fee,
                saved_readiness=compute_readiness(schema, saved) if saved else None,
            )
        )
    logger.info("documents_listed count=%s", len(items))
    return items


@router.get(
    "/documents/{document_id}",
    summary="Get a document schema",
    operation_id="getDocument",
    tags=["Documents"],
)
def get_document(document_id: str, catalog: Catalog = Depends(get_document_catalog)):
    return catalog.get_schema(document_id).model_dump(mode="json")


__all__ = ["router"]
