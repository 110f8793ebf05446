"""Domain event constants and publisher.

Defines event type constants and a simple publish() callable used by the
wizard and export flows.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

ANSWER_SAVED = "answer.saved"
WIZARD_COMPLETED = "wizard.completed"
EXPORT_COMPLETED = "export.completed"
EXPORT_FAILED = "export.failed"


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event.

    Events are logged for observability and buffered in-process for tests.
    """
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


# In-memory buffer for domain events (test-only visibility)
EVENT_BUFFER: List[Dict[str, Any]] = []


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events


__all__ = [
    "ANSWER_SAVED",
    "WIZARD_COMPLETED",
    "EXPORT_COMPLETED",
    "EXPORT_FAILED",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
]
