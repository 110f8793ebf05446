"""Export endpoint.

POST /documents/{document_id}/export renders the current AnswerSet. On
success the stored AnswerSet is cleared and the wizard context dropped; on
total failure nothing is cleared and a 503 problem is returned.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from formpath.config import AppConfig
from formpath.logic.answer_store import AnswerStore, clear_answers, load_answers
from formpath.logic.catalog import Catalog
from formpath.logic.document_renderer import export_document
from formpath.logic.inmemory_state import drop_wizard, find_wizard
from formpath.routes.deps import get_answer_store, get_app_config, get_document_catalog

router = APIRouter()
logger = logging.getLogger(__name__)

STRATEGY_HEADER = "X-FormPath-Strategy"


@router.post(
    "/documents/{document_id}/export",
    summary="Produce the filled document (overlay, or summary report fallback)",
    operation_id="exportDocument",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
    tags=["Export"],
)
async def export(
    document_id: str,
    catalog: Catalog = Depends(get_document_catalog),
    store: AnswerStore = Depends(get_answer_store),
    config: AppConfig = Depends(get_app_config),
):
    entry = catalog.get(document_id)
    controller = find_wizard(document_id)
    answers = dict(controller.answers) if controller is not None else load_answers(store, document_id)
    result = await export_document(entry, answers, config)
    clear_answers(store, document_id)
    drop_wizard(document_id)
    return Response(
        content=result.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            STRATEGY_HEADER: result.strategy,
        },
    )


__all__ = ["router", "STRATEGY_HEADER"]
