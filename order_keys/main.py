from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from order_keys.config import AppConfig, load_config
from order_keys.http.problem import (
    handle_duplicate_item,
    handle_gap_exhaustion,
    handle_request_validation_error,
    handle_unexpected_error,
    handle_unknown_item,
)
from order_keys.http.request_id import RequestIdMiddleware
from order_keys.logging_setup import configure_logging
from order_keys.logic.rank_allocator import GapExhaustion
from order_keys.logic.reorder import DuplicateItem, UnknownItem
from order_keys.middleware.cors import apply_cors
from order_keys.routes import api_router

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Build the FastAPI application.

    ``config`` defaults to ``load_config()``; tests pass an explicit one.
    """
    cfg = config or load_config()
    configure_logging(cfg.logging.level)

    app = FastAPI(title="Order Keys")
    app.state.config = cfg

    app.add_exception_handler(GapExhaustion, handle_gap_exhaustion)
    app.add_exception_handler(UnknownItem, handle_unknown_item)
    app.add_exception_handler(DuplicateItem, handle_duplicate_item)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    apply_cors(app, origins=cfg.cors.allow_origins)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "fallback_policy": cfg.ranking.fallback_policy}

    logger.info(
        "app.created fallback_policy=%s log_level=%s",
        cfg.ranking.fallback_policy,
        cfg.logging.level,
    )
    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
