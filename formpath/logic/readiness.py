"""Readiness computation.

Computes the percentage of currently-applicable required questions that hold
a non-blank answer. Mirrors the gating verdict idea: a document with no
blocking items is ready.
"""

from __future__ import annotations

from typing import List, Mapping
import logging
import math

from formpath.logic.visibility_rules import is_answer_blank, iter_visible
from formpath.models.schema import DocumentSchema, Question

logger = logging.getLogger(__name__)


def applicable_required(schema: DocumentSchema, answers: Mapping[str, str]) -> List[Question]:
    """Required questions whose condition (if any) currently holds."""
    return [q for _idx, _section, visible in iter_visible(schema, answers) for q in visible if q.required]


def missing_required(schema: DocumentSchema, answers: Mapping[str, str]) -> List[str]:
    """Ids of applicable required questions that are still blank."""
    return [q.id for q in applicable_required(schema, answers) if is_answer_blank(answers.get(q.id))]


def compute_readiness(schema: DocumentSchema, answers: Mapping[str, str]) -> int:
    """Return readiness as an integer percentage in [0, 100].

    An empty applicable set is vacuously complete (100). Rounds half up so
    1/8 gives 13 rather than banker's-rounded 12; a set with any blank
    required answer never reports 100.
    """
    required = applicable_required(schema, answers)
    if not required:
        return 100
    filled = sum(1 for q in required if not is_answer_blank(answers.get(q.id)))
    pct = int(math.floor(100 * filled / len(required) + 0.5))
    # 100 is reserved for a fully answered set
    if filled < len(required):
        pct = min(pct, 99)
    logger.debug(
        "readiness_computed doc_id=%s filled=%s required=%s pct=%s",
        schema.id,
        filled,
        len(required),
        pct,
    )
    return pct


__all__ = ["applicable_required", "missing_required", "compute_readiness"]
