"""Database bootstrap utilities for the FormPath answer store.

Exposes convenience imports for engine/session construction. The DB layer is
intentionally minimal and only backs the PersistenceStore adapter.
"""

from formpath.db.base import get_engine, get_sessionmaker, session_scope

__all__ = [
    "get_engine",
    "get_sessionmaker",
    "session_scope",
]
