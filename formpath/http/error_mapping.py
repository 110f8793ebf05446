"""Central error mapping for domain errors.

Single source of truth for mapping FormPath error classes to problem+json
titles and HTTP statuses. Handlers import from here instead of hardcoding
strings or numbers.
"""

from __future__ import annotations

from typing import Dict, Type

from formpath.errors import (
    DocumentNotFoundError,
    FatalExportError,
    FormPathError,
    QuestionNotFoundError,
    RequiredFieldError,
    SchemaError,
    WizardNotStartedError,
)

DOMAIN_ERROR_MAP: Dict[Type[FormPathError], Dict[str, object]] = {
    DocumentNotFoundError: {"title": "Document not found", "status": 404},
    QuestionNotFoundError: {"title": "Question not found", "status": 404},
    WizardNotStartedError: {"title": "Wizard not started", "status": 409},
    RequiredFieldError: {"title": "Required field missing", "status": 422},
    FatalExportError: {"title": "Export failed", "status": 503},
    SchemaError: {"title": "Catalog misconfigured", "status": 500},
}

DEFAULT_DOMAIN_ERROR = {"title": "Internal Server Error", "status": 500}


def lookup(exc: FormPathError) -> Dict[str, object]:
    """Most specific mapping along the exception's MRO."""
    for cls in type(exc).__mro__:
        if cls in DOMAIN_ERROR_MAP:
            return DOMAIN_ERROR_MAP[cls]
    return DEFAULT_DOMAIN_ERROR


__all__ = ["DOMAIN_ERROR_MAP", "DEFAULT_DOMAIN_ERROR", "lookup"]
