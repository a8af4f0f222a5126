"""Pydantic models for rank allocation and reorder planning."""

from __future__ import annotations

from typing import Annotated, List

from pydantic import BaseModel, Field

# NaN and infinities never sort meaningfully; reject them at the boundary.
FiniteRank = Annotated[float, Field(allow_inf_nan=False)]


class RankedItem(BaseModel):
    """One record of a collection snapshot: its identifier and stored rank."""

    id: str = Field(min_length=1)
    rank: FiniteRank


class RankUpdate(BaseModel):
    """A single rank write the caller must persist."""

    id: str
    rank: float


class RankPlan(BaseModel):
    """Rank writes produced for one reorder gesture.

    ``normalized`` plans rewrite the whole collection and must be persisted
    atomically. ``fallback`` marks a placement that used the exhaustion
    fallback instead of a true midpoint.
    """

    updates: List[RankUpdate]
    normalized: bool = False
    fallback: bool = False


class GapReport(BaseModel):
    index: int
    before: float
    after: float
    gap: float


# Request bodies


class CurrentRankRequest(BaseModel):
    current: FiniteRank


class BetweenRequest(BaseModel):
    before: FiniteRank
    after: FiniteRank


class RankSequenceRequest(BaseModel):
    ranks: List[FiniteRank] = Field(default_factory=list)


class TargetOrderRequest(RankSequenceRequest):
    target_position: int


class ItemsRequest(BaseModel):
    items: List[RankedItem] = Field(default_factory=list)


class AppendRequest(ItemsRequest):
    new_id: str = Field(min_length=1)


class InsertRequest(ItemsRequest):
    new_id: str = Field(min_length=1)
    position: int


class MoveRequest(ItemsRequest):
    item_id: str = Field(min_length=1)
    target_index: int


# Response bodies


class RankResponse(BaseModel):
    rank: float


class RankSequenceResponse(BaseModel):
    ranks: List[float]


class GapsResponse(BaseModel):
    unsafe_gaps: List[GapReport]
    needs_normalization: bool


class ConstantsResponse(BaseModel):
    min_order: float
    max_order: float
    initial_step: float
    minimum_order_gap: float


__all__ = [
    "FiniteRank",
    "RankedItem",
    "RankUpdate",
    "RankPlan",
    "GapReport",
    "CurrentRankRequest",
    "BetweenRequest",
    "RankSequenceRequest",
    "TargetOrderRequest",
    "ItemsRequest",
    "AppendRequest",
    "InsertRequest",
    "MoveRequest",
    "RankResponse",
    "RankSequenceResponse",
    "GapsResponse",
    "ConstantsResponse",
]
