"""Reorder planning endpoints.

Each handler accepts a collection snapshot in display order and returns the
rank writes the caller must persist. Nothing is stored server-side.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from order_keys.logic import reorder
from order_keys.models.ranks import (
    AppendRequest,
    InsertRequest,
    ItemsRequest,
    MoveRequest,
    RankPlan,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reorder")


def _policy(request: Request) -> str:
    return request.app.state.config.ranking.fallback_policy


@router.post(
    "/append",
    response_model=RankPlan,
    responses={409: {"content": {"application/problem+json": {}}}},
    summary="Plan an append",
)
def post_append(body: AppendRequest) -> RankPlan:
    return reorder.plan_append(body.items, body.new_id)


@router.post("/insert", response_model=RankPlan, summary="Plan an insert")
def post_insert(body: InsertRequest, request: Request) -> RankPlan:
    return reorder.plan_insert(body.items, body.new_id, body.position, policy=_policy(request))


@router.post(
    "/move",
    response_model=RankPlan,
    responses={404: {"content": {"application/problem+json": {}}}},
    summary="Plan a move",
)
def post_move(body: MoveRequest, request: Request) -> RankPlan:
    """Move ``item_id`` so it ends up at ``target_index`` in display order."""
    return reorder.plan_move(body.items, body.item_id, body.target_index, policy=_policy(request))


@router.post("/normalize", response_model=RankPlan, summary="Plan a renormalisation")
def post_normalize(body: ItemsRequest) -> RankPlan:
    plan = reorder.plan_normalize(body.items)
    logger.info("reorder.normalize size=%s", len(plan.updates))
    return plan


__all__ = ["router"]
