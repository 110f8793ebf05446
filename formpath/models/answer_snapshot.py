"""ORM model for persisted AnswerSet snapshots, one row per storage key."""

from __future__ import annotations

from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, String, Text


Base = declarative_base()


class AnswerSnapshot(Base):  # type: ignore[valid-type]
    __tablename__ = "answer_snapshot"

    storage_key = Column(String, primary_key=True)
    payload = Column(Text, nullable=False)


__all__ = ["AnswerSnapshot", "Base"]
