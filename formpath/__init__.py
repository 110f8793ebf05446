"""FormPath service package.

Guides an applicant through a branching question flow for an immigration
form and renders the collected answers onto the official PDF, falling back to
a summary report when the overlay cannot be produced. Business logic lives in
`formpath/logic/`, route handlers in `formpath/routes/`.
"""

from __future__ import annotations

from formpath.main import create_app

__all__ = ["create_app"]
