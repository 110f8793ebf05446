"""Geometry of form widgets on a reference PDF.

Coordinates are PDF points with a top-left origin (y grows downward), which is
what PyMuPDF reports for widget rectangles.
"""

from __future__ import annotations

from typing import Mapping

from pydantic import BaseModel, ConfigDict


class Box(BaseModel):
    model_config = ConfigDict(frozen=True)

    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0


class Placement(BaseModel):
    model_config = ConfigDict(frozen=True)

    page_index: int
    box: Box


class ReferenceLayout(BaseModel):
    """Page sizes plus `terminal field key -> placements` for one reference."""

    model_config = ConfigDict(frozen=True)

    page_sizes: tuple[tuple[float, float], ...]
    placements: Mapping[str, tuple[Placement, ...]]

    @property
    def page_count(self) -> int:
        return len(self.page_sizes)


__all__ = ["Box", "Placement", "ReferenceLayout"]
