"""APIRouter registration for the order keys service."""

from __future__ import annotations

from fastapi import APIRouter

from order_keys.routes.ranks import router as ranks_router
from order_keys.routes.reorder import router as reorder_router

api_router = APIRouter()
api_router.include_router(ranks_router, tags=["Ranks"])
api_router.include_router(reorder_router, tags=["Reorder"])

__all__ = ["api_router"]
