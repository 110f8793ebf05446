"""APIRouter registration for the FormPath service."""

from __future__ import annotations

from fastapi import APIRouter

from formpath.routes.documents import router as documents_router
from formpath.routes.exports import router as exports_router
from formpath.routes.wizard import router as wizard_router

api_router = APIRouter()
api_router.include_router(documents_router)
api_router.include_router(wizard_router)
api_router.include_router(exports_router)

__all__ = ["api_router"]
