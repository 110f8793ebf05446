"""Domain error taxonomy for the FormPath service.

Route handlers translate these into problem+json responses via
`formpath.http.error_mapping`; rendering errors never leave the export
orchestrator except as `FatalExportError`.
"""

from __future__ import annotations


class FormPathError(Exception):
    """Base class for all FormPath domain errors."""

    code = "FORMPATH_ERROR"


class SchemaError(FormPathError):
    """Catalog authoring defect (e.g. a forward or cyclic condition reference).

    Raised while loading the catalog so it fails in tests and tooling, never
    inside a live wizard flow.
    """

    code = "SCHEMA_INVALID"


class DocumentNotFoundError(FormPathError):
    code = "DOCUMENT_NOT_FOUND"

    def __init__(self, document_id: str):
        super().__init__(f"unknown document id: {document_id}")
        self.document_id = document_id


class WizardNotStartedError(FormPathError):
    code = "WIZARD_NOT_STARTED"

    def __init__(self, document_id: str):
        super().__init__(f"no wizard in progress for document: {document_id}")
        self.document_id = document_id


class QuestionNotFoundError(FormPathError):
    code = "QUESTION_NOT_FOUND"

    def __init__(self, document_id: str, question_id: str):
        super().__init__(f"unknown question {question_id!r} for document {document_id}")
        self.document_id = document_id
        self.question_id = question_id


class RequiredFieldError(FormPathError):
    """The current question is required and has no non-blank answer."""

    code = "REQUIRED_FIELD_MISSING"

    def __init__(self, question_id: str):
        super().__init__("This field is required. Please provide an answer before continuing.")
        self.question_id = question_id


class FetchError(FormPathError):
    code = "REFERENCE_FETCH_FAILED"


class ParseError(FormPathError):
    code = "REFERENCE_PARSE_FAILED"


class RenderError(FormPathError):
    code = "OVERLAY_RENDER_FAILED"


class FatalExportError(FormPathError):
    """Both rendering strategies failed; no artifact was produced."""

    code = "EXPORT_FAILED"


class PersistenceError(FormPathError):
    code = "PERSISTENCE_FAILED"


__all__ = [
    "FormPathError",
    "SchemaError",
    "DocumentNotFoundError",
    "WizardNotStartedError",
    "QuestionNotFoundError",
    "RequiredFieldError",
    "FetchError",
    "ParseError",
    "RenderError",
    "FatalExportError",
    "PersistenceError",
]
