"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and handler callables that turn domain
errors into application/problem+json responses.
"""

from __future__ import annotations

import logging
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from order_keys.logic.problem_factory import (
    problem_duplicate_id,
    problem_gap_exhausted,
    problem_internal,
    problem_item_not_found,
    problem_validation,
)
from order_keys.logic.rank_allocator import GapExhaustion
from order_keys.logic.reorder import DuplicateItem, UnknownItem

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def _respond(problem: dict) -> JSONResponse:
    return JSONResponse(problem, status_code=int(problem["status"]), media_type=PROBLEM_MEDIA_TYPE)


async def handle_gap_exhaustion(request: Request, exc: GapExhaustion) -> JSONResponse:  # noqa: D401
    logger.info("ranks.gap_exhausted path=%s", request.url.path)
    return _respond(
        problem_gap_exhausted(str(exc), before=exc.before, after=exc.after, current=exc.current)
    )


async def handle_unknown_item(request: Request, exc: UnknownItem) -> JSONResponse:  # noqa: D401
    return _respond(problem_item_not_found(exc.item_id))


async def handle_duplicate_item(request: Request, exc: DuplicateItem) -> JSONResponse:  # noqa: D401
    return _respond(problem_duplicate_id(exc.item_id))


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    return _respond(problem_validation(jsonable_encoder(exc.errors())))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return _respond(problem_internal())


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "handle_gap_exhaustion",
    "handle_unknown_item",
    "handle_duplicate_item",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
