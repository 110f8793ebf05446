"""Reference PDF retrieval by document id.

One fetch per export attempt, no retries. Remote bases are read with
`httpx.AsyncClient`; anything else is treated as a local directory and read
in a worker thread. Every failure surfaces as `FetchError`.
"""

from __future__ import annotations

from pathlib import Path
import logging

import anyio
import httpx

from formpath.config import ReferenceConfig
from formpath.errors import FetchError

logger = logging.getLogger(__name__)


def reference_name(document_id: str) -> str:
    return f"{document_id}.pdf"


async def fetch_reference(document_id: str, config: ReferenceConfig) -> bytes:
    """Return the raw bytes of the reference PDF for `document_id`."""
    if config.is_remote:
        url = f"{config.base_url.rstrip('/')}/{reference_name(document_id)}"
        try:
            async with httpx.AsyncClient(timeout=config.timeout_seconds) as client:
                resp = await client.get(url)
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("reference_fetch_failed doc_id=%s url=%s error=%s", document_id, url, e)
            raise FetchError(f"could not fetch reference for {document_id}: {e}") from e
        content = resp.content
        source = url
    else:
        path = Path(config.base_url) / reference_name(document_id)
        try:
            content = await anyio.to_thread.run_sync(path.read_bytes)
        except OSError as e:
            logger.warning("reference_read_failed doc_id=%s path=%s error=%s", document_id, path, e)
            raise FetchError(f"could not read reference for {document_id}: {e}") from e
        source = str(path)
    if not content:
        raise FetchError(f"reference for {document_id} is empty")
    logger.info("reference_fetched doc_id=%s source=%s bytes=%s", document_id, source, len(content))
    return content


__all__ = ["reference_name", "fetch_reference"]
