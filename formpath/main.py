from __future__ import annotations

import logging
from typing import Callable

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from formpath.db.base import get_engine
from formpath.errors import FormPathError
from formpath.http.problem import (
    handle_formpath_error,
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from formpath.http.request_id import RequestIdMiddleware
from formpath.logging_setup import configure_logging
from formpath.logic.catalog import get_catalog
from formpath.routes import api_router
from formpath.routes.deps import get_app_config

logger = logging.getLogger(__name__)


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        documents = len(get_catalog())
        try:
            engine = get_engine(get_app_config().store.dsn)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"status": "ok", "db": True, "documents": documents}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "documents": documents, "reason": str(e)}

    return check


def create_app() -> FastAPI:
    # Configure global logging before app instantiation so all modules emit
    configure_logging()
    app = FastAPI(title="FormPath", version="1.0.0")
    app.add_exception_handler(FormPathError, handle_formpath_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)

    # Fail fast on catalog authoring defects at startup, not mid-flow
    get_catalog()

    app.include_router(api_router, prefix="/api/v1")

    health_check = _health_check()

    @app.get("/health")
    def health():  # pragma: no cover - trivial
        return health_check()

    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
