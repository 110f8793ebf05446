"""Export orchestration: CoordinateOverlay first, SyntheticReport on failure.

The fallback starts strictly after the overlay failure is observed. If the
report cannot be produced either, `FatalExportError` is raised and nothing is
returned. Blocking PDF work runs in a worker thread so the event loop keeps
serving wizard requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Awaitable, Callable, Mapping
import logging

import anyio

from formpath.config import AppConfig, ReferenceConfig
from formpath.errors import FatalExportError, FetchError, ParseError, RenderError
from formpath.logic.catalog import CatalogEntry
from formpath.logic.events import EXPORT_COMPLETED, EXPORT_FAILED, publish
from formpath.logic.overlay_renderer import render_overlay
from formpath.logic.reference_source import fetch_reference
from formpath.logic.synthetic_report import render_report

logger = logging.getLogger(__name__)

OVERLAY = "overlay"
REPORT = "report"

Fetcher = Callable[[str, ReferenceConfig], Awaitable[bytes]]


def filled_filename(document_id: str) -> str:
    return f"{document_id}_FormPath_Filled.pdf"


def summary_filename(document_id: str) -> str:
    return f"{document_id}_FormPath_Summary.pdf"


@dataclass(frozen=True)
class ExportResult:
    document_id: str
    strategy: str
    filename: str
    content: bytes


async def _overlay(entry: CatalogEntry, answers: Mapping[str, str], config: AppConfig, fetch: Fetcher) -> bytes:
    """Run the primary strategy; every failure surfaces as Fetch/Parse/RenderError."""
    document_id = entry.schema.id
    try:
        reference = await fetch(document_id, config.reference)
    except (FetchError, ParseError, RenderError):
        raise
    except Exception as e:
        raise FetchError(f"reference fetch failed for {document_id}: {e!r}") from e
    try:
        return await anyio.to_thread.run_sync(
            partial(render_overlay, reference, entry.field_map, answers, config.render)
        )
    except (FetchError, ParseError, RenderError):
        raise
    except Exception as e:
        raise RenderError(f"overlay rendering failed for {document_id}: {e!r}") from e


async def export_document(
    entry: CatalogEntry,
    answers: Mapping[str, str],
    config: AppConfig,
    fetch: Fetcher = fetch_reference,
) -> ExportResult:
    document_id = entry.schema.id
    snapshot = dict(answers)
    try:
        content = await _overlay(entry, snapshot, config, fetch)
        result = ExportResult(document_id, OVERLAY, filled_filename(document_id), content)
    except (FetchError, ParseError, RenderError) as e:
        logger.warning("export_overlay_failed doc_id=%s code=%s error=%s", document_id, e.code, e)
        try:
            content = await anyio.to_thread.run_sync(partial(render_report, entry.schema, snapshot))
        except Exception as report_exc:
            logger.error("export_report_failed doc_id=%s", document_id, exc_info=True)
            publish(EXPORT_FAILED, {"document_id": document_id, "overlay_error": e.code})
            raise FatalExportError(f"could not produce any document for {document_id}") from report_exc
        result = ExportResult(document_id, REPORT, summary_filename(document_id), content)
    logger.info("export_done doc_id=%s strategy=%s bytes=%s", document_id, result.strategy, len(result.content))
    publish(EXPORT_COMPLETED, {"document_id": document_id, "strategy": result.strategy, "bytes": len(result.content)})
    return result


__all__ = [
    "OVERLAY",
    "REPORT",
    "Fetcher",
    "filled_filename",
    "summary_filename",
    "ExportResult",
    "export_document",
]
