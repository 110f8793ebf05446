"""Wizard endpoints: the HTTP stand-in for UI events.

Implements:
- POST /documents/{document_id}/wizard (select document, resume saved answers)
- GET  /documents/{document_id}/wizard (current view)
- PUT  /documents/{document_id}/wizard/answers/{question_id} (SET_ANSWER)
- POST /documents/{document_id}/wizard/jump (edit from review)
- POST /documents/{document_id}/wizard/{action} (next | prev | continue | skip)
- GET  /documents/{document_id}/wizard/review
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.exceptions import RequestValidationError

from formpath.errors import QuestionNotFoundError
from formpath.logic.answer_store import AnswerStore
from formpath.logic.catalog import Catalog
from formpath.logic.inmemory_state import drop_wizard, put_wizard, require_wizard
from formpath.logic.wizard_controller import WizardController
from formpath.models.wizard import (
    AnswerBody,
    JumpBody,
    ReviewView,
    WizardAction,
    WizardState,
    WizardView,
)
from formpath.routes.deps import get_answer_store, get_document_catalog

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/documents/{document_id}/wizard",
    summary="Start (or resume) the wizard for a document",
    operation_id="startWizard",
    response_model=WizardView,
    tags=["Wizard"],
)
def start_wizard(
    document_id: str,
    catalog: Catalog = Depends(get_document_catalog),
    store: AnswerStore = Depends(get_answer_store),
):
    entry = catalog.get(document_id)
    controller = put_wizard(WizardController.start(entry.graph, store))
    return controller.view()


@router.get(
    "/documents/{document_id}/wizard",
    summary="Get the current wizard view",
    operation_id="getWizard",
    response_model=WizardView,
    tags=["Wizard"],
)
def get_wizard(document_id: str):
    return require_wizard(document_id).view()


@router.put(
    "/documents/{document_id}/wizard/answers/{question_id}",
    summary="Set an answer; the cursor does not move",
    operation_id="setAnswer",
    response_model=WizardView,
    tags=["Wizard", "Autosave"],
)
def set_answer(document_id: str, question_id: str, body: AnswerBody):
    controller = require_wizard(document_id)
    if controller.graph.question(question_id) is None:
        raise QuestionNotFoundError(document_id, question_id)
    controller.set_answer(question_id, body.value)
    return controller.view()


@router.post(
    "/documents/{document_id}/wizard/jump",
    summary="Move the cursor directly (edit from review)",
    operation_id="jumpWizard",
    response_model=WizardView,
    tags=["Wizard"],
)
def jump(document_id: str, body: JumpBody):
    controller = require_wizard(document_id)
    if body.section_index >= controller.graph.section_count:
        raise RequestValidationError(
            [
                {
                    "loc": ("body", "section_index"),
                    "msg": f"section_index must be below {controller.graph.section_count}",
                    "type": "value_error",
                }
            ]
        )
    controller.jump(body.section_index, body.question_index)
    return controller.view()


@router.get(
    "/documents/{document_id}/wizard/review",
    summary="Review every visible question with its answer",
    operation_id="reviewWizard",
    response_model=ReviewView,
    tags=["Wizard"],
)
def review(document_id: str):
    return require_wizard(document_id).review()


@router.post(
    "/documents/{document_id}/wizard/{action}",
    summary="Navigate: next, prev, continue or skip",
    operation_id="navigateWizard",
    response_model=WizardView,
    tags=["Wizard"],
)
def navigate(document_id: str, action: WizardAction):
    controller = require_wizard(document_id)
    if action is WizardAction.NEXT:
        controller.next()
    elif action is WizardAction.PREV:
        controller.prev()
    elif action is WizardAction.CONTINUE:
        controller.continue_()
    elif action is WizardAction.SKIP:
        controller.skip()
    view = controller.view()
    if view.state is WizardState.EXITED:
        # back to document selection; saved answers stay in the store
        drop_wizard(document_id)
    logger.info("wizard_navigated doc_id=%s action=%s state=%s", document_id, action.value, view.state.value)
    return view


__all__ = ["router"]
