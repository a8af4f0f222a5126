"""Rank allocation endpoints.

Thin HTTP wrappers over ``order_keys.logic.rank_allocator``. Handlers are
stateless; ``GapExhaustion`` propagates to the problem+json handler, which
answers 409 so the caller can renormalise.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from order_keys.logic import rank_allocator
from order_keys.models.ranks import (
    BetweenRequest,
    ConstantsResponse,
    CurrentRankRequest,
    GapReport,
    GapsResponse,
    RankResponse,
    RankSequenceRequest,
    RankSequenceResponse,
    TargetOrderRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ranks")

_CONFLICT = {409: {"content": {"application/problem+json": {}}}}


@router.get("/constants", response_model=ConstantsResponse, summary="Rank constants")
def get_constants() -> ConstantsResponse:
    return ConstantsResponse(
        min_order=rank_allocator.MIN_ORDER,
        max_order=rank_allocator.MAX_ORDER,
        initial_step=rank_allocator.INITIAL_STEP,
        minimum_order_gap=rank_allocator.MINIMUM_ORDER_GAP,
    )


@router.post("/first", response_model=RankResponse, summary="Rank for an empty collection")
def post_first() -> RankResponse:
    return RankResponse(rank=rank_allocator.first())


@router.post("/after", response_model=RankResponse, responses=_CONFLICT, summary="Rank after a rank")
def post_after(body: CurrentRankRequest) -> RankResponse:
    return RankResponse(rank=rank_allocator.after(body.current))


@router.post("/before", response_model=RankResponse, summary="Rank before a rank")
def post_before(body: CurrentRankRequest) -> RankResponse:
    return RankResponse(rank=rank_allocator.before(body.current))


@router.post("/between", response_model=RankResponse, responses=_CONFLICT, summary="Midpoint rank")
def post_between(body: BetweenRequest) -> RankResponse:
    return RankResponse(rank=rank_allocator.between(body.before, body.after))


@router.post("/target", response_model=RankResponse, summary="Rank for a drop position")
def post_target(body: TargetOrderRequest) -> RankResponse:
    rank = rank_allocator.get_target_order(body.ranks, body.target_position)
    logger.info(
        "ranks.target size=%s target_position=%s rank=%s",
        len(body.ranks),
        body.target_position,
        rank,
    )
    return RankResponse(rank=rank)


@router.post("/normalize", response_model=RankSequenceResponse, summary="Renormalise ranks")
def post_normalize(body: RankSequenceRequest) -> RankSequenceResponse:
    """Ranks are taken in the order given, which must be the display order."""
    return RankSequenceResponse(ranks=rank_allocator.normalize(body.ranks))


@router.post("/gaps", response_model=GapsResponse, summary="Report unsafe gaps")
def post_gaps(body: RankSequenceRequest) -> GapsResponse:
    unsafe = rank_allocator.find_unsafe_gaps(body.ranks)
    return GapsResponse(
        unsafe_gaps=[
            GapReport(index=g.index, before=g.before, after=g.after, gap=g.gap) for g in unsafe
        ],
        needs_normalization=rank_allocator.needs_normalization(body.ranks),
    )


__all__ = ["router"]
