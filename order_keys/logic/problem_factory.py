"""Centralised construction of problem+json payloads.

Single source of truth for mapping domain failures to problem codes and
HTTP statuses. Route and handler modules import from here instead of
hardcoding strings or numbers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging


logger = logging.getLogger(__name__)

PROBLEM_ERROR_MAP: Dict[str, Dict[str, Any]] = {
    "gap_exhausted": {"code": "RANK_GAP_EXHAUSTED", "status": 409, "title": "Conflict"},
    "item_not_found": {"code": "REORDER_ITEM_NOT_FOUND", "status": 404, "title": "Not Found"},
    "duplicate_id": {"code": "REORDER_DUPLICATE_ID", "status": 422, "title": "Invalid Request"},
    "validation": {"code": "REQUEST_VALIDATION_FAILED", "status": 422, "title": "Invalid Request"},
    "internal": {"code": "INTERNAL_ERROR", "status": 500, "title": "Internal Server Error"},
}


def _problem(kind: str, detail: str, **extra: Any) -> Dict[str, object]:
    entry = PROBLEM_ERROR_MAP[kind]
    problem: Dict[str, object] = {
        "title": entry["title"],
        "status": entry["status"],
        "detail": detail,
        "code": entry["code"],
    }
    problem.update({k: v for k, v in extra.items() if v is not None})
    logger.info("error_handler.handle code=%s status=%s", entry["code"], entry["status"])
    return problem


def problem_gap_exhausted(
    detail: str,
    *,
    before: Optional[float] = None,
    after: Optional[float] = None,
    current: Optional[float] = None,
) -> Dict[str, object]:
    """Return a 409 problem telling the caller to renormalise the collection."""
    return _problem("gap_exhausted", detail, before=before, after=after, current=current)


def problem_item_not_found(item_id: str) -> Dict[str, object]:
    """Return a 404 problem for a moved item missing from the snapshot."""
    return _problem("item_not_found", f"item not found: {item_id}", item_id=item_id)


def problem_duplicate_id(item_id: str) -> Dict[str, object]:
    return _problem("duplicate_id", f"duplicate item id: {item_id}", item_id=item_id)


def problem_validation(errors: List[Any]) -> Dict[str, object]:
    return _problem("validation", "Request validation failed", errors=errors)


def problem_internal() -> Dict[str, object]:
    return _problem("internal", "An unexpected error occurred")


__all__ = [
    "PROBLEM_ERROR_MAP",
    "problem_gap_exhausted",
    "problem_item_not_found",
    "problem_duplicate_id",
    "problem_validation",
    "problem_internal",
]
