"""Functional tests for export orchestration and reference retrieval.

Covers:
- Overlay success with a widget-bearing reference
- Fallback to the summary report on fetch, parse and render failures
- FatalExportError when both strategies fail
- Local and remote reference fetching
"""

from __future__ import annotations

import anyio
import fitz
import httpx
import pytest

from formpath.config import ReferenceConfig
from formpath.errors import FatalExportError, FetchError, RenderError
from formpath.logic import reference_source
from formpath.logic.document_renderer import OVERLAY, REPORT, export_document
from formpath.logic.events import EXPORT_COMPLETED, EXPORT_FAILED, get_buffered_events
from formpath.logic.reference_source import fetch_reference

from conftest import build_plain_pdf


ANSWERS = {"q1": "yes", "q2": "Because I agree"}


def _fetcher(data: bytes):
    async def fetch(document_id, config):
        return data

    return fetch


def _export(entry, answers, config, fetch=None):
    if fetch is None:
        return anyio.run(export_document, entry, answers, config)
    return anyio.run(export_document, entry, answers, config, fetch)


def _text(content: bytes) -> str:
    with fitz.open(stream=content, filetype="pdf") as doc:
        return "".join(page.get_text() for page in doc)


def test_overlay_is_used_when_the_reference_has_widgets(scenario_entry, app_config, scenario_pdf):
    result = _export(scenario_entry, ANSWERS, app_config, _fetcher(scenario_pdf))
    assert result.strategy == OVERLAY
    assert result.filename == "T-1_FormPath_Filled.pdf"
    assert "Because I agree" in _text(result.content)

    events = get_buffered_events()
    assert events[-1]["type"] == EXPORT_COMPLETED
    assert events[-1]["payload"]["strategy"] == OVERLAY


def test_unparseable_reference_falls_back_to_report(scenario_entry, app_config):
    result = _export(scenario_entry, ANSWERS, app_config, _fetcher(b"definitely not a pdf"))
    assert result.strategy == REPORT
    assert result.filename == "T-1_FormPath_Summary.pdf"
    text = _text(result.content)
    assert "Do you agree?" in text
    assert "Because I agree" in text


def test_reference_without_widgets_falls_back_to_report(scenario_entry, app_config):
    result = _export(scenario_entry, ANSWERS, app_config, _fetcher(build_plain_pdf()))
    assert result.strategy == REPORT


def test_missing_local_reference_falls_back_to_report(scenario_entry, app_config):
    # app_config points at an empty tmp_path
    result = _export(scenario_entry, ANSWERS, app_config)
    assert result.strategy == REPORT


def test_render_failure_falls_back_to_report(scenario_entry, app_config, scenario_pdf, mocker):
    mocker.patch(
        "formpath.logic.document_renderer.render_overlay",
        side_effect=RenderError("rasterizer crashed"),
    )
    result = _export(scenario_entry, ANSWERS, app_config, _fetcher(scenario_pdf))
    assert result.strategy == REPORT


def test_both_strategies_failing_is_fatal(scenario_entry, app_config, mocker):
    mocker.patch(
        "formpath.logic.document_renderer.render_report",
        side_effect=RuntimeError("out of memory"),
    )
    with pytest.raises(FatalExportError):
        _export(scenario_entry, ANSWERS, app_config, _fetcher(b"junk"))

    types = [e["type"] for e in get_buffered_events()]
    assert EXPORT_FAILED in types
    assert EXPORT_COMPLETED not in types


def test_local_reference_read(tmp_path):
    (tmp_path / "I-90.pdf").write_bytes(b"%PDF-1.7 bytes")
    data = anyio.run(fetch_reference, "I-90", ReferenceConfig(base_url=str(tmp_path)))
    assert data == b"%PDF-1.7 bytes"


def test_empty_local_reference_is_a_fetch_error(tmp_path):
    (tmp_path / "I-90.pdf").write_bytes(b"")
    with pytest.raises(FetchError):
        anyio.run(fetch_reference, "I-90", ReferenceConfig(base_url=str(tmp_path)))


def _mock_remote(mocker, handler):
    real_client = httpx.AsyncClient

    def factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    mocker.patch.object(reference_source.httpx, "AsyncClient", side_effect=factory)


def test_remote_reference_fetch(mocker):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, content=b"%PDF-remote")

    _mock_remote(mocker, handler)
    config = ReferenceConfig(base_url="https://forms.example.org/pdf/")
    assert anyio.run(fetch_reference, "N-400", config) == b"%PDF-remote"
    assert seen == ["https://forms.example.org/pdf/N-400.pdf"]


def test_remote_http_error_is_a_fetch_error(mocker):
    _mock_remote(mocker, lambda request: httpx.Response(404))
    config = ReferenceConfig(base_url="https://forms.example.org/pdf")
    with pytest.raises(FetchError):
        anyio.run(fetch_reference, "N-400", config)


def test_unexpected_fetch_failure_falls_back_to_report(scenario_entry, app_config):
    async def broken_fetch(document_id, config):
        raise ValueError("unsupported reference scheme")

    result = _export(scenario_entry, ANSWERS, app_config, broken_fetch)
    assert result.strategy == REPORT
    assert "Because I agree" in _text(result.content)


def test_unexpected_render_failure_falls_back_to_report(scenario_entry, app_config, scenario_pdf, mocker):
    mocker.patch(
        "formpath.logic.document_renderer.render_overlay",
        side_effect=KeyError("missing page geometry"),
    )
    result = _export(scenario_entry, ANSWERS, app_config, _fetcher(scenario_pdf))
    assert result.strategy == REPORT


def test_malformed_remote_url_is_a_fetch_error():
    config = ReferenceConfig(base_url="http://bad host name:abc")
    with pytest.raises(FetchError):
        anyio.run(fetch_reference, "T-1", config)


def test_malformed_remote_url_falls_back_to_report(scenario_entry, app_config):
    config = app_config.model_copy(update={"reference": ReferenceConfig(base_url="http://bad host name:abc")})
    result = _export(scenario_entry, ANSWERS, config)
    assert result.strategy == REPORT
