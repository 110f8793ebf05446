"""Central in-memory state holders for interactive wizard contexts.

One interactive context owns each AnswerSet: the active `WizardController`
per document id lives here for the lifetime of the process. Durable progress
is in the answer store; this map only tracks cursor position between requests.
"""

from __future__ import annotations

from typing import Dict, Optional

from formpath.errors import WizardNotStartedError
from formpath.logic.wizard_controller import WizardController

# document_id -> active wizard
WIZARDS: Dict[str, WizardController] = {}


def put_wizard(controller: WizardController) -> WizardController:
    WIZARDS[controller.graph.document_id] = controller
    return controller


def find_wizard(document_id: str) -> Optional[WizardController]:
    return WIZARDS.get(document_id)


def require_wizard(document_id: str) -> WizardController:
    controller = WIZARDS.get(document_id)
    if controller is None:
        raise WizardNotStartedError(document_id)
    return controller


def drop_wizard(document_id: str) -> None:
    WIZARDS.pop(document_id, None)


__all__ = ["WIZARDS", "put_wizard", "find_wizard", "require_wizard", "drop_wizard"]
